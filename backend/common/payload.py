"""
Request body helper shared by the auth and events blueprints.
"""

from typing import Dict, Any

from flask import request

from backend.common.errors import ValidationError


def json_object() -> Dict[str, Any]:
    """
    Return the request's JSON body as a dict.

    A missing or unparseable body counts as empty.

    Raises:
        ValidationError: If the body is valid JSON but not an object.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data
