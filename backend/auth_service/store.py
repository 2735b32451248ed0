"""
Credential store: persistence of user records in the `users` table.
"""

from typing import Optional, Dict, Any

import psycopg2.errors

from backend.common.errors import ConflictError
from backend.database.db_connection import get_db

USER_COLUMNS = "user_id, name, email, password_hash, photo_url, created_at"


class CredentialStore:
    """Find and insert user records. Emails are stored lower-cased by the caller."""

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        sql = f"SELECT {USER_COLUMNS} FROM users WHERE email = %s;"
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (email,))
                row = cur.fetchone()
        return dict(row) if row else None

    def insert(self, name: str, email: str, password_hash: str, photo_url: str) -> Dict[str, Any]:
        """
        Insert a new user and return the stored row.

        Raises:
            ConflictError: If another insert for the same email won the race.
        """
        sql = f"""
            INSERT INTO users (name, email, password_hash, photo_url)
            VALUES (%s, %s, %s, %s)
            RETURNING {USER_COLUMNS};
        """
        try:
            with get_db() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (name, email, password_hash, photo_url))
                    row = cur.fetchone()
                conn.commit()
        except psycopg2.errors.UniqueViolation:
            raise ConflictError("User already exists with this email.")
        return dict(row)
