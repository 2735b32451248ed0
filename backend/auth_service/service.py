"""
Auth service: registration and login.

Passwords are hashed with Argon2. Login issues a JWT through
`auth_service.utils.create_token`; registration does not log the user in.
"""

import logging
from typing import Dict, Any, Optional

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

from backend.auth_service.store import CredentialStore
from backend.auth_service.utils import create_token
from backend.common.errors import ValidationError, AuthError, ConflictError

INVALID_CREDENTIALS = "Invalid email or password."


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Projection of a user row that is safe to send to clients."""
    return {
        "name": user["name"],
        "email": user["email"],
        "photoURL": user.get("photo_url") or "",
    }


def _text(value: Any) -> str:
    """Strip a string input; anything else counts as missing."""
    return value.strip() if isinstance(value, str) else ""


class AuthService:
    def __init__(self, store: CredentialStore, hasher: Optional[PasswordHasher] = None):
        self.store = store
        self.hasher = hasher or PasswordHasher()

    def register(self, name: str, email: str, password: str, photo_url: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a new user account.

        Raises:
            ValidationError: If name, email or password is missing.
            ConflictError: If the lower-cased email is already registered.
        """
        name = _text(name)
        email = _text(email).lower()
        password = password if isinstance(password, str) else ""
        photo_url = _text(photo_url)

        if not name or not email or not password:
            raise ValidationError("Name, email and password are required.")

        if self.store.find_by_email(email):
            raise ConflictError("User already exists with this email.")

        pw_hash = self.hasher.hash(password)
        user = self.store.insert(name, email, pw_hash, photo_url)

        logging.info(f"[Auth] Registered user {user['user_id']} ({email})")
        return public_user(user)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Check credentials and issue a session token.

        Returns:
            dict: {"token": str, "user": public user projection}

        Raises:
            ValidationError: If email or password is missing.
            AuthError: If the email is unknown or the password is wrong.
        """
        email = _text(email).lower()
        password = password if isinstance(password, str) else ""

        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = self.store.find_by_email(email)
        if not user:
            logging.warning("[Auth] Rejected login for unknown email")
            raise AuthError(INVALID_CREDENTIALS)

        try:
            self.hasher.verify(user["password_hash"], password)
        except (VerificationError, InvalidHashError):
            logging.warning(f"[Auth] Rejected login for user {user['user_id']}")
            raise AuthError(INVALID_CREDENTIALS)

        token = create_token(user["user_id"], user["email"], user["name"])
        return {"token": token, "user": public_user(user)}
