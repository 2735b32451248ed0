"""
Authentication service route handlers.

Provides routes for:
- User registration
- User login

Business rules live in `auth_service.service`; JWT logic in `auth_service.utils`.
"""

import logging
from typing import Tuple, Dict, Any

import psycopg2
from flask import Blueprint, request, jsonify, Response

from backend.auth_service.service import AuthService
from backend.auth_service.store import CredentialStore
from backend.common.errors import ApiError, ServerError, handle_api_error
from backend.common.payload import json_object

auth_bp = Blueprint("auth", __name__)
auth_bp.register_error_handler(ApiError, handle_api_error)

auth_service = AuthService(CredentialStore())


# --- REQUEST LOGGING ---
@auth_bp.before_request
def before_request() -> None:
    """
    Log every incoming request method and path to the authentication service.
    """
    logging.info(f"[Auth] Incoming {request.method} {request.path}")


@auth_bp.after_request
def after_request(response: Response) -> Response:
    """
    Log the response status code for every request.

    Args:
        response (Response): The Flask response object.

    Returns:
        Response: The passed-through response object.
    """
    logging.info(f"[Auth] Response {response.status}")
    return response


# --- REGISTER ---
@auth_bp.route("/register", methods=["POST"])
def register() -> Tuple[Response, int]:
    """
    Register a new user in the system.

    Expects a JSON body with:
    - name (str)
    - email (str): Unique (case-insensitive) email address.
    - password (str)
    - photoURL (str, optional)

    Returns:
        201: Success message. No token is issued; the client logs in next.
        400: Missing fields or email already exists.
        500: Database error.
    """
    data: Dict[str, Any] = json_object()

    try:
        auth_service.register(
            data.get("name"),
            data.get("email"),
            data.get("password"),
            data.get("photoURL"),
        )
    except psycopg2.Error:
        logging.exception("[Auth] Database error during registration")
        raise ServerError("Server error during registration.")

    return jsonify({"message": "User registered successfully!"}), 201


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: JSON with token and the public user object.
        400: Missing or invalid credentials.
        500: Database error.
    """
    data: Dict[str, Any] = json_object()

    try:
        result = auth_service.login(data.get("email"), data.get("password"))
    except psycopg2.Error:
        logging.exception("[Auth] Database error during login")
        raise ServerError("Server error during login.")

    return jsonify(result), 200
