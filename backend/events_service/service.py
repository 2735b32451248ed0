"""
Event service: create, read, update, delete, join and leave.

Only the creator of an event (identity == createdBy) may update or delete
it. Any authenticated user may join or leave, at most once per email.
"""

import logging
from datetime import date, datetime, timezone
from typing import Dict, Any, List, Optional, Callable

from backend.common.errors import (
    ValidationError,
    AuthorizationError,
    NotFoundError,
    ConflictError,
)
from backend.events_service.filters import resolve_date_range
from backend.events_service.store import EventStore

CREATE_REQUIRED = ("title", "date", "time", "location", "description", "imageUrl", "creator")
UPDATE_REQUIRED = ("title", "date", "description")
UPDATE_OPTIONAL = ("time", "location", "imageUrl")

TITLE_MAX_LENGTH = 200


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _validate_fields(data: Dict[str, Any], required: tuple) -> None:
    missing = [
        key for key in required
        if not isinstance(data.get(key), str) or not data[key].strip()
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    if len(data["title"]) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be {TITLE_MAX_LENGTH} characters or less.")

    # Stored dates are compared as text, so only the canonical form is accepted
    try:
        canonical = date.fromisoformat(data["date"]).isoformat() == data["date"]
    except ValueError:
        canonical = False
    if not canonical:
        raise ValidationError("date must be an ISO date (YYYY-MM-DD).")


class EventService:
    def __init__(self, store: EventStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def create(self, data: Dict[str, Any], identity: str) -> Dict[str, Any]:
        """
        Create an event owned by `identity`.

        Raises:
            ValidationError: If any required field is missing or the date is not ISO.
        """
        _validate_fields(data, CREATE_REQUIRED)

        now = self.clock()
        event = {key: data[key] for key in CREATE_REQUIRED}
        event.update({
            "createdBy": identity,
            "joined": [],
            "createdAt": now,
            "updatedAt": now,
        })

        created = self.store.insert(event)
        logging.info(f"[Events] {identity} created event {created['id']}")
        return created

    def get(self, event_id: int) -> Dict[str, Any]:
        event = self.store.find_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def list(self, search: Optional[str] = None, preset: Optional[str] = None,
             today: Optional[date] = None) -> List[Dict[str, Any]]:
        """
        List events matching the title search and the named date preset.

        Raises:
            ValidationError: If the preset is not recognised.
        """
        date_range = resolve_date_range(preset, today)
        return self.store.find_all(search=search, date_range=date_range)

    def list_mine(self, identity: str) -> List[Dict[str, Any]]:
        return self.store.find_by_creator(identity)

    def update(self, event_id: int, data: Dict[str, Any], identity: str) -> Dict[str, Any]:
        """
        Replace the mutable fields of an event.

        Ownership is checked before the payload, so a non-creator is always
        rejected whatever they send.

        Raises:
            NotFoundError: If the event does not exist.
            AuthorizationError: If `identity` did not create the event.
            ValidationError: If title, date or description is missing.
        """
        existing = self.store.find_by_id(event_id)
        if not existing:
            raise NotFoundError("Event not found")

        if existing["createdBy"] != identity:
            raise AuthorizationError("Not authorized to update this event")

        _validate_fields(data, UPDATE_REQUIRED)

        fields = {key: data[key] for key in UPDATE_REQUIRED}
        for key in UPDATE_OPTIONAL:
            fields[key] = data.get(key) or existing[key]

        updated = self.store.update(event_id, identity, fields, self.clock())
        if not updated:
            # Deleted between the read and the write
            raise NotFoundError("Event not found")

        logging.info(f"[Events] {identity} updated event {event_id}")
        return updated

    def delete(self, event_id: int, identity: str) -> None:
        """
        Raises:
            AuthorizationError: If no event with that id was created by `identity`.
        """
        if not self.store.delete(event_id, identity):
            raise AuthorizationError("Not authorized to delete this event or event not found")
        logging.info(f"[Events] {identity} deleted event {event_id}")

    def join(self, event_id: int, identity: str) -> Dict[str, Any]:
        """
        Add `identity` to the event's attendees.

        Raises:
            NotFoundError: If the event does not exist.
            ConflictError: If `identity` has already joined.
        """
        updated = self.store.add_attendee(event_id, identity)
        if updated:
            logging.info(f"[Events] {identity} joined event {event_id}")
            return updated

        # The conditional append matched nothing: find out why
        if not self.store.find_by_id(event_id):
            raise NotFoundError("Event not found")
        raise ConflictError("You have already joined this event")

    def leave(self, event_id: int, identity: str) -> Dict[str, Any]:
        """
        Remove `identity` from the event's attendees.

        Raises:
            NotFoundError: If the event does not exist.
            ConflictError: If `identity` is not attending.
        """
        updated = self.store.remove_attendee(event_id, identity)
        if updated:
            logging.info(f"[Events] {identity} left event {event_id}")
            return updated

        if not self.store.find_by_id(event_id):
            raise NotFoundError("Event not found")
        raise ConflictError("You are not attending this event")
