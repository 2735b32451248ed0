"""
Shared authentication helpers.
Provides token creation and verification of the bearer header.
"""

import os
import jwt
from datetime import datetime, timedelta, timezone
from typing import Tuple, Optional, Dict, Any
from flask import request, Response
from dotenv import load_dotenv

from backend.common.errors import ApiError, Unauthorized, Forbidden, handle_api_error

# Load .env only once here
load_dotenv()

# Load secrets & configs
JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET is missing. Set it in .env")

TOKEN_EXPIRATION_MINUTES = int(os.getenv("TOKEN_EXPIRATION_MINUTES", 1440))  # Default 1 day
JWT_ALGORITHM = "HS256"

Claims = Dict[str, Any]


# --- JWT CREATION ---
def create_token(user_id: int, email: str, name: str) -> str:
    """
    Generates a new JWT for a given user.

    Args:
        user_id (int): The unique ID of the user.
        email (str): The user's email, used as the identity for events.
        name (str): The user's display name.

    Returns:
        str: Encoded JWT string.
    """
    now = datetime.now(timezone.utc)

    payload = {
        "userId": user_id,
        "email": email,
        "name": name,
        "exp": now + timedelta(minutes=TOKEN_EXPIRATION_MINUTES),
        "iat": now
    }

    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Claims:
    """
    Decode and validate a JWT.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired.
        jwt.InvalidTokenError: If the token is malformed or tampered.
    """
    payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    return {
        "userId": payload.get("userId"),
        "email": payload.get("email"),
        "name": payload.get("name"),
    }


# --- JWT VALIDATION ---
def _reject(error: ApiError) -> Tuple[None, Response, int]:
    response, code = handle_api_error(error)
    return None, response, code


def verify_token_from_request() -> Tuple[Optional[Claims], Optional[Response], Optional[int]]:
    """
    Verify the JWT in the Authorization header.

    Returns:
        tuple: (claims, error_response, status_code)
               If successful, error_response and status_code are None.
               If failed, claims is None. A missing or malformed header
               gives 401; an invalid or expired token gives 403.
    """
    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer ") or not auth[len("Bearer "):].strip():
        return _reject(Unauthorized("Unauthorized"))

    token = auth.split(" ", 1)[1].strip()

    try:
        claims = decode_token(token)
    except jwt.ExpiredSignatureError:
        return _reject(Forbidden("Token expired"))
    except jwt.InvalidTokenError:
        return _reject(Forbidden("Forbidden"))

    if not claims["email"]:
        return _reject(Forbidden("Forbidden"))

    return claims, None, None


def verify_token(token: str) -> Optional[Claims]:
    """
    Validate a JWT manually (optional usage).

    Args:
        token (str): JWT string.

    Returns:
        dict: the claims if valid, None otherwise.
    """
    try:
        return decode_token(token)
    except jwt.InvalidTokenError:
        return None
