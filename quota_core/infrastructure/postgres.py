"""
PostgreSQL connection helper for quota-gate.

The profile store reads and writes subscription tiers through this helper.
Uses psycopg for the connection.
"""

import psycopg
from loguru import logger

from quota_core.config import settings


def get_db_connection(dsn: str | None = None) -> psycopg.Connection:
    """
    Open a PostgreSQL connection.

    The connection is a context manager; it commits (or rolls back on error)
    and closes when the `with` block exits.

    Usage:
        with get_db_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT tier FROM user_profiles WHERE caller_id = %s", (uid,))

    Args:
        dsn: Connection string. Defaults to settings.POSTGRES_DSN.

    Returns:
        psycopg.Connection: A PostgreSQL connection.
    """
    try:
        conn = psycopg.connect(dsn or settings.POSTGRES_DSN)
        logger.debug("Connected to PostgreSQL")
        return conn
    except Exception as e:
        logger.error(f"Failed to connect to PostgreSQL: {e}")
        raise
