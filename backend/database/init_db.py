"""
Create the tables used by the auth and events services.

Run once against a fresh database:

    python -m backend.database.init_db

Both tables are created with IF NOT EXISTS, so running it again is harmless.
"""

import logging
import sys

from backend.database.db_connection import get_db

SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS users (
        user_id       SERIAL PRIMARY KEY,
        name          TEXT NOT NULL,
        email         TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        photo_url     TEXT NOT NULL DEFAULT '',
        created_at    TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS events (
        id          SERIAL PRIMARY KEY,
        title       TEXT NOT NULL,
        description TEXT NOT NULL,
        date        TEXT NOT NULL,
        time        TEXT NOT NULL,
        location    TEXT NOT NULL,
        image_url   TEXT NOT NULL,
        creator     TEXT NOT NULL,
        created_by  TEXT NOT NULL,
        joined      TEXT[] NOT NULL DEFAULT '{}',
        created_at  TIMESTAMPTZ NOT NULL,
        updated_at  TIMESTAMPTZ NOT NULL
    );

    CREATE INDEX IF NOT EXISTS events_created_by_idx ON events (created_by);
    CREATE INDEX IF NOT EXISTS events_date_idx ON events (date);
"""

TABLES = ("users", "events")


def init_db() -> None:
    """
    Apply the schema and check that every table now exists.

    Raises:
        RuntimeError: If a table is still missing after the schema ran.
        psycopg2.Error: On any database failure.
    """
    with get_db() as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
            for table in TABLES:
                cur.execute("SELECT to_regclass(%s) AS found;", (table,))
                if cur.fetchone()["found"] is None:
                    raise RuntimeError(f"Table '{table}' is missing after schema creation")
                logging.info(f" - {table}: Found")
        conn.commit()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")
    try:
        init_db()
    except Exception as e:
        logging.error(f"Database initialisation FAILED: {e}")
        sys.exit(1)
    logging.info("Database initialised successfully.")
