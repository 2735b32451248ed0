import os

# Ensure JWT_SECRET is set before the auth helpers are imported
os.environ["JWT_SECRET"] = "test_secret"

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from flask import Flask

from backend.auth_service.routes import auth_bp
from backend.events_service.routes import events_bp
from backend.events_service.store import MUTABLE_COLUMNS


@pytest.fixture
def app():
    app = Flask(__name__)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(events_bp, url_prefix="/api/events")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def make_mock_db(mocker):
    """
    Build a mocked connection whose cursor works as a context manager.
    """
    mock_conn = mocker.MagicMock()
    mock_cursor = mocker.MagicMock()
    mock_conn.__enter__.return_value = mock_conn
    mock_conn.__exit__.return_value = None
    mock_cursor.__enter__.return_value = mock_cursor
    mock_cursor.__exit__.return_value = None
    mock_conn.cursor.return_value = mock_cursor
    return mock_conn, mock_cursor


@pytest.fixture
def mock_db(mocker):
    """
    Mocks the database connection used by the credential store.
    """
    mock_conn, mock_cursor = make_mock_db(mocker)
    mocker.patch("backend.auth_service.store.get_db", return_value=mock_conn)
    return mock_conn, mock_cursor


@pytest.fixture
def mock_events_db(mocker):
    """
    Mocks the database connection used by the event store.
    """
    mock_conn, mock_cursor = make_mock_db(mocker)
    mocker.patch("backend.events_service.store.get_db", return_value=mock_conn)
    return mock_conn, mock_cursor


def make_event_row(**overrides):
    """A row as the events table returns it."""
    row = {
        "id": 1,
        "title": "Meetup",
        "description": "desc",
        "date": "2024-06-10",
        "time": "18:00",
        "location": "Hall",
        "image_url": "x",
        "creator": "Alice",
        "created_by": "alice@example.com",
        "joined": [],
        "created_at": datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


@pytest.fixture
def event_row():
    return make_event_row


# --- IN-MEMORY STORES FOR SERVICE TESTS ---

class InMemoryCredentialStore:
    def __init__(self):
        self.users = {}
        self._ids = itertools.count(1)

    def find_by_email(self, email):
        user = self.users.get(email)
        return dict(user) if user else None

    def insert(self, name, email, password_hash, photo_url):
        user = {
            "user_id": next(self._ids),
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "photo_url": photo_url,
            "created_at": datetime.now(timezone.utc),
        }
        self.users[email] = user
        return dict(user)


class InMemoryEventStore:
    def __init__(self):
        self.events = {}
        self._ids = itertools.count(1)

    @staticmethod
    def _copy(event):
        copy = dict(event)
        copy["joined"] = list(event["joined"])
        return copy

    def find_all(self, search=None, date_range=None):
        result = []
        for event in self.events.values():
            if search and search.strip().lower() not in event["title"].lower():
                continue
            if date_range and not (date_range[0] <= event["date"] <= date_range[1]):
                continue
            result.append(self._copy(event))
        return result

    def find_by_creator(self, email):
        return [self._copy(e) for e in self.events.values() if e["createdBy"] == email]

    def find_by_id(self, event_id):
        event = self.events.get(event_id)
        return self._copy(event) if event else None

    def insert(self, event):
        stored = self._copy(event)
        stored["id"] = next(self._ids)
        self.events[stored["id"]] = stored
        return self._copy(stored)

    def update(self, event_id, created_by, fields, updated_at):
        event = self.events.get(event_id)
        if not event or event["createdBy"] != created_by:
            return None
        for key in MUTABLE_COLUMNS:
            if key in fields:
                event[key] = fields[key]
        event["updatedAt"] = updated_at
        return self._copy(event)

    def delete(self, event_id, created_by):
        event = self.events.get(event_id)
        if not event or event["createdBy"] != created_by:
            return False
        del self.events[event_id]
        return True

    def add_attendee(self, event_id, email):
        event = self.events.get(event_id)
        if not event or email in event["joined"]:
            return None
        event["joined"].append(email)
        return self._copy(event)

    def remove_attendee(self, event_id, email):
        event = self.events.get(event_id)
        if not event or email not in event["joined"]:
            return None
        event["joined"].remove(email)
        return self._copy(event)


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()


@pytest.fixture
def event_store():
    return InMemoryEventStore()


@pytest.fixture
def clock():
    """A clock that moves forward one minute on every call."""
    start = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    ticks = itertools.count()
    return lambda: start + timedelta(minutes=next(ticks))
