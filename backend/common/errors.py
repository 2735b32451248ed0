"""
Error taxonomy shared by the auth and events services.

Services raise these; each blueprint registers `handle_api_error` so a raised
error becomes a JSON body of the form {"error": "<message>"} with the
matching HTTP status.
"""

from typing import Tuple

from flask import jsonify, Response


class ApiError(Exception):
    """Base class for every error that maps onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    """Missing or invalid input."""
    status_code = 400


class AuthError(ApiError):
    """Bad login credentials."""
    status_code = 400


class Unauthorized(ApiError):
    """Missing or malformed bearer header."""
    status_code = 401


class Forbidden(ApiError):
    """Invalid, tampered or expired token."""
    status_code = 403


class AuthorizationError(ApiError):
    """Caller is not the owner of the resource."""
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    """Duplicate email, duplicate join, or leaving an event not joined."""
    status_code = 400


class ServerError(ApiError):
    status_code = 500


def handle_api_error(error: ApiError) -> Tuple[Response, int]:
    """
    Convert an ApiError into a Flask JSON response.

    Args:
        error (ApiError): The raised error.

    Returns:
        tuple: (JSON response, HTTP status code)
    """
    return jsonify({"error": error.message}), error.status_code
