"""
Event store: persistence of event documents in the `events` table.

Rows are returned as event dicts using the API's camelCase keys. Every
mutation is a single statement, so it is atomic for the row it touches.
"""

from datetime import datetime
from typing import Optional, Dict, Any, List

from backend.database.db_connection import get_db
from backend.events_service.filters import DateRange, title_pattern

EVENT_COLUMNS = """
    id, title, description, date, time, location, image_url, creator,
    created_by, joined, created_at, updated_at
"""

# API key -> column for the fields a creator may change
MUTABLE_COLUMNS = {
    "title": "title",
    "date": "date",
    "time": "time",
    "location": "location",
    "description": "description",
    "imageUrl": "image_url",
}


def row_to_event(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "description": row["description"],
        "date": row["date"],
        "time": row["time"],
        "location": row["location"],
        "imageUrl": row["image_url"],
        "creator": row["creator"],
        "createdBy": row["created_by"],
        "joined": list(row["joined"] or []),
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
    }


class EventStore:
    def _fetch_one(self, sql: str, params: tuple, commit: bool = False) -> Optional[Dict[str, Any]]:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
            if commit:
                conn.commit()
        return row_to_event(row) if row else None

    def _fetch_all(self, sql: str, params: tuple) -> List[Dict[str, Any]]:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                rows = cur.fetchall()
        return [row_to_event(row) for row in rows]

    def find_all(self, search: Optional[str] = None, date_range: Optional[DateRange] = None) -> List[Dict[str, Any]]:
        """
        List events, optionally filtered by title substring and date range.

        Args:
            search (str, optional): Case-insensitive substring of the title.
            date_range (tuple, optional): Inclusive (start, end) ISO dates.
        """
        sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE 1=1"
        params: list = []

        pattern = title_pattern(search)
        if pattern:
            sql += " AND title ILIKE %s"
            params.append(pattern)

        if date_range:
            sql += " AND date >= %s AND date <= %s"
            params.extend(date_range)

        sql += " ORDER BY id;"
        return self._fetch_all(sql, tuple(params))

    def find_by_creator(self, email: str) -> List[Dict[str, Any]]:
        sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE created_by = %s ORDER BY id;"
        return self._fetch_all(sql, (email,))

    def find_by_id(self, event_id: int) -> Optional[Dict[str, Any]]:
        sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE id = %s;"
        return self._fetch_one(sql, (event_id,))

    def insert(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new event document and return it with its assigned id."""
        sql = f"""
            INSERT INTO events (
                title, description, date, time, location, image_url,
                creator, created_by, joined, created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s, %s,
                %s, %s, %s, %s, %s
            )
            RETURNING {EVENT_COLUMNS};
        """
        params = (
            event["title"], event["description"], event["date"], event["time"],
            event["location"], event["imageUrl"], event["creator"], event["createdBy"],
            list(event["joined"]), event["createdAt"], event["updatedAt"],
        )
        return self._fetch_one(sql, params, commit=True)

    def update(self, event_id: int, created_by: str, fields: Dict[str, Any], updated_at: datetime) -> Optional[Dict[str, Any]]:
        """
        Replace the mutable fields of an event owned by `created_by`.

        Returns:
            dict: The updated event, or None if no event with that id and
                  creator exists.
        """
        columns = [key for key in MUTABLE_COLUMNS if key in fields]
        set_clause = ", ".join(f"{MUTABLE_COLUMNS[key]} = %s" for key in columns)
        set_clause += ", updated_at = %s"

        params = tuple(fields[key] for key in columns) + (updated_at, event_id, created_by)
        sql = f"""
            UPDATE events SET {set_clause}
            WHERE id = %s AND created_by = %s
            RETURNING {EVENT_COLUMNS};
        """
        return self._fetch_one(sql, params, commit=True)

    def delete(self, event_id: int, created_by: str) -> bool:
        """Delete an event owned by `created_by`. Returns False if nothing matched."""
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM events WHERE id = %s AND created_by = %s;",
                    (event_id, created_by),
                )
                deleted = cur.rowcount
            conn.commit()
        return deleted > 0

    def add_attendee(self, event_id: int, email: str) -> Optional[Dict[str, Any]]:
        """
        Append `email` to `joined` unless it is already present.

        Returns:
            dict: The updated event, or None if the event is missing or the
                  email was already in the list.
        """
        sql = f"""
            UPDATE events SET joined = array_append(joined, %s)
            WHERE id = %s AND NOT (%s = ANY(joined))
            RETURNING {EVENT_COLUMNS};
        """
        return self._fetch_one(sql, (email, event_id, email), commit=True)

    def remove_attendee(self, event_id: int, email: str) -> Optional[Dict[str, Any]]:
        """
        Remove `email` from `joined` if it is present.

        Returns:
            dict: The updated event, or None if the event is missing or the
                  email was not in the list.
        """
        sql = f"""
            UPDATE events SET joined = array_remove(joined, %s)
            WHERE id = %s AND %s = ANY(joined)
            RETURNING {EVENT_COLUMNS};
        """
        return self._fetch_one(sql, (email, event_id, email), commit=True)
