from datetime import datetime, timezone

from backend.events_service.store import EventStore



def test_find_all_builds_filters(mock_events_db, event_row):
    mock_conn, mock_cursor = mock_events_db
    mock_cursor.fetchall.return_value = [event_row()]

    events = EventStore().find_all(search="meet", date_range=("2024-06-10", "2024-06-16"))

    sql, params = mock_cursor.execute.call_args[0]
    assert "title ILIKE %s" in sql
    assert "date >= %s AND date <= %s" in sql
    assert params == ("%meet%", "2024-06-10", "2024-06-16")
    assert events[0]["imageUrl"] == "x"
    assert events[0]["createdBy"] == "alice@example.com"


def test_find_all_without_filters(mock_events_db, event_row):
    mock_conn, mock_cursor = mock_events_db
    mock_cursor.fetchall.return_value = []

    assert EventStore().find_all() == []

    sql, params = mock_cursor.execute.call_args[0]
    assert "ILIKE" not in sql
    assert params == ()


def test_insert_commits_and_returns_event(mock_events_db, event_row):
    mock_conn, mock_cursor = mock_events_db
    mock_cursor.fetchone.return_value = event_row(id=7)
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)

    created = EventStore().insert({
        "title": "Meetup", "description": "desc", "date": "2024-06-10", "time": "18:00",
        "location": "Hall", "imageUrl": "x", "creator": "Alice",
        "createdBy": "alice@example.com", "joined": [], "createdAt": now, "updatedAt": now,
    })

    assert created["id"] == 7
    assert mock_conn.commit.called
    params = mock_cursor.execute.call_args[0][1]
    assert params[7] == "alice@example.com"
    assert params[8] == []


def test_update_is_conditional_on_creator(mock_events_db, event_row):
    mock_conn, mock_cursor = mock_events_db
    mock_cursor.fetchone.return_value = None
    now = datetime(2024, 6, 2, tzinfo=timezone.utc)

    result = EventStore().update(1, "bob@example.com", {"title": "New", "imageUrl": "y"}, now)

    assert result is None
    sql, params = mock_cursor.execute.call_args[0]
    assert "title = %s, image_url = %s, updated_at = %s" in sql
    assert "WHERE id = %s AND created_by = %s" in sql
    assert params == ("New", "y", now, 1, "bob@example.com")


def test_delete_reports_rowcount(mock_events_db, event_row):
    mock_conn, mock_cursor = mock_events_db
    mock_cursor.rowcount = 0

    assert EventStore().delete(1, "bob@example.com") is False

    mock_cursor.rowcount = 1
    assert EventStore().delete(1, "alice@example.com") is True


def test_add_attendee_is_a_single_conditional_update(mock_events_db, event_row):
    mock_conn, mock_cursor = mock_events_db
    mock_cursor.fetchone.return_value = event_row(joined=["bob@example.com"])

    event = EventStore().add_attendee(1, "bob@example.com")

    assert event["joined"] == ["bob@example.com"]
    assert mock_cursor.execute.call_count == 1
    sql, params = mock_cursor.execute.call_args[0]
    assert "array_append" in sql
    assert "NOT (%s = ANY(joined))" in sql
    assert params == ("bob@example.com", 1, "bob@example.com")


def test_remove_attendee(mock_events_db, event_row):
    mock_conn, mock_cursor = mock_events_db
    mock_cursor.fetchone.return_value = None

    assert EventStore().remove_attendee(1, "bob@example.com") is None
    sql = mock_cursor.execute.call_args[0][0]
    assert "array_remove" in sql
