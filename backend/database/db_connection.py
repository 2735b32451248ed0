"""
PostgreSQL connection helper.
Provides get_db() for use by the credential and event stores.
"""

import os
import logging

import psycopg2
from psycopg2.extras import RealDictCursor
from dotenv import load_dotenv

# Load .env variables from the project root
load_dotenv()


def get_db():
    """
    Returns a new psycopg2 connection with dictionary-based row access.

    The URL is read on every call so that importing the stores never
    requires a configured database (tests patch this function).

    Usage:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(...)

    Returns:
        psycopg2.extensions.connection: A connection object with RealDictCursor factory.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
        psycopg2.Error: If connection fails.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set. Please set the environment variable.")

    try:
        # Rows come back as plain dicts (e.g., {"id": 1, "title": "..."})
        return psycopg2.connect(database_url, cursor_factory=RealDictCursor)
    except psycopg2.Error as e:
        logging.error(f"Error connecting to database: {e}")
        raise
