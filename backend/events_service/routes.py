"""
Events service routes: create, read, update, delete events, and join/leave.
Handles event lifecycle management and participation.

Listing and single-event reads are public; everything else needs a bearer
token. The caller's email (from the token) is the ownership key.
"""

import logging
from typing import Tuple, Dict, Any

import psycopg2
from flask import Blueprint, request, jsonify, Response

from backend.auth_service.utils import verify_token_from_request
from backend.common.errors import ApiError, ServerError, handle_api_error
from backend.common.payload import json_object
from backend.events_service.service import EventService
from backend.events_service.store import EventStore

events_bp = Blueprint("events", __name__)
events_bp.register_error_handler(ApiError, handle_api_error)

event_service = EventService(EventStore())


def serialize_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Make an event dict JSON-ready (timestamps as ISO-8601 strings).
    """
    data = dict(event)
    for key in ("createdAt", "updatedAt"):
        if data.get(key) and hasattr(data[key], "isoformat"):
            data[key] = data[key].isoformat()
    return data


# --- REQUEST LOGGING ---
@events_bp.before_request
def before_request() -> None:
    logging.info(f"[Events] Incoming {request.method} {request.path}")


@events_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Events] Response {response.status}")
    return response


@events_bp.route("/", methods=["GET"], strict_slashes=False)
def list_events() -> Tuple[Response, int]:
    """
    Return all events, optionally filtered.

    Query parameters:
    - search (str): case-insensitive substring of the title.
    - filter (str): all | current-week | last-week | current-month | last-month

    Returns:
        200: List of event objects (unordered; clients sort).
        400: Unknown filter.
        500: Database error.
    """
    try:
        events = event_service.list(request.args.get("search"), request.args.get("filter"))
    except psycopg2.Error:
        logging.exception("[Events] Database error listing events")
        raise ServerError("Failed to fetch events")

    return jsonify([serialize_event(e) for e in events]), 200


@events_bp.route("/my-events", methods=["GET"])
def my_events() -> Tuple[Response, int]:
    """
    Return the events created by the logged-in user.
    """
    claims, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        events = event_service.list_mine(claims["email"])
    except psycopg2.Error:
        logging.exception("[Events] Database error fetching user events")
        raise ServerError("Failed to get user events")

    return jsonify([serialize_event(e) for e in events]), 200


@events_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id: int) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    Returns:
        200: Event object.
        404: Event not found.
    """
    try:
        event = event_service.get(event_id)
    except psycopg2.Error:
        logging.exception(f"[Events] Database error getting event {event_id}")
        raise ServerError("Failed to retrieve event")

    return jsonify(serialize_event(event)), 200


@events_bp.route("/", methods=["POST"], strict_slashes=False)
def create_event() -> Tuple[Response, int]:
    """
    Create an event owned by the caller.

    Expects JSON: title, date (YYYY-MM-DD), time, location, description,
    imageUrl, creator (display name).

    Returns:
        201: The stored event, including its id and an empty `joined` list.
        400: Validation error.
        401/403: Authentication failure.
        500: Server error.
    """
    claims, err, code = verify_token_from_request()
    if err:
        return err, code

    data: Dict[str, Any] = json_object()

    try:
        event = event_service.create(data, claims["email"])
    except psycopg2.Error:
        logging.exception("[Events] Database error creating event")
        raise ServerError("Failed to create event")

    return jsonify(serialize_event(event)), 201


@events_bp.route("/<int:event_id>", methods=["PUT"])
def update_event(event_id: int) -> Tuple[Response, int]:
    """
    Update an event. Only its creator may do this.

    Returns:
        200: {"success": true, "event": ..., "message": ...}
        400: Title, date or description missing.
        403: Caller is not the creator.
        404: Event not found.
        500: Server error.
    """
    claims, err, code = verify_token_from_request()
    if err:
        return err, code

    data: Dict[str, Any] = json_object()

    try:
        event = event_service.update(event_id, data, claims["email"])
    except psycopg2.Error:
        logging.exception(f"[Events] Database error updating event {event_id}")
        raise ServerError("Internal server error during update")

    return jsonify({
        "success": True,
        "event": serialize_event(event),
        "message": "Event updated successfully",
    }), 200


@events_bp.route("/<int:event_id>", methods=["DELETE"])
def delete_event(event_id: int) -> Tuple[Response, int]:
    """
    Delete an event if the caller is its creator.

    A missing event and someone else's event both answer 403.
    """
    claims, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        event_service.delete(event_id, claims["email"])
    except psycopg2.Error:
        logging.exception(f"[Events] Database error deleting event {event_id}")
        raise ServerError("Failed to delete event")

    return jsonify({"message": "Event deleted successfully"}), 200


@events_bp.route("/join/<int:event_id>", methods=["PATCH"])
def join_event(event_id: int) -> Tuple[Response, int]:
    """
    Join an event.

    Returns:
        200: The updated event.
        400: Already joined.
        404: Event not found.
    """
    claims, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        event = event_service.join(event_id, claims["email"])
    except psycopg2.Error:
        logging.exception(f"[Events] Database error joining event {event_id}")
        raise ServerError("Failed to join event")

    return jsonify(serialize_event(event)), 200


@events_bp.route("/leave/<int:event_id>", methods=["PATCH"])
def leave_event(event_id: int) -> Tuple[Response, int]:
    """
    Leave an event.

    Returns:
        200: The updated event.
        400: Not attending.
        404: Event not found.
    """
    claims, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        event = event_service.leave(event_id, claims["email"])
    except psycopg2.Error:
        logging.exception(f"[Events] Database error leaving event {event_id}")
        raise ServerError("Failed to leave event")

    return jsonify(serialize_event(event)), 200
