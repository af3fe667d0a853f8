"""
PostgreSQL-backed profile store.

Holds one row per caller with their subscription tier:

    CREATE TABLE user_profiles (
        caller_id  TEXT PRIMARY KEY,
        tier       TEXT NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
"""

from __future__ import annotations

import asyncio

from loguru import logger
from psycopg import sql

from quota_core.config import settings
from quota_core.domain.quota import Tier
from quota_core.infrastructure.postgres import get_db_connection


class PostgresProfileStore:
    """Reads and writes caller tiers."""

    def __init__(self, dsn: str | None = None, table: str | None = None):
        """Initialize the profile store.

        Args:
            dsn: PostgreSQL connection string. Defaults to settings.POSTGRES_DSN.
            table: Profile table name. Defaults to settings.PROFILE_TABLE.
        """
        self.dsn = dsn or settings.POSTGRES_DSN
        self.table = table or settings.PROFILE_TABLE

    def _read_tier(self, caller_id: str) -> str | None:
        query = sql.SQL("SELECT tier FROM {} WHERE caller_id = %s").format(sql.Identifier(self.table))
        with get_db_connection(self.dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(query, (caller_id,))
                row = cur.fetchone()
        return row[0] if row else None

    async def read_tier(self, caller_id: str) -> str | None:
        """Read the stored tier for a caller.

        Args:
            caller_id: The caller id.

        Returns:
            The stored tier value, or None if the caller has no profile.
        """
        return await asyncio.to_thread(self._read_tier, caller_id)

    def _write_tier(self, caller_id: str, tier: Tier) -> None:
        query = sql.SQL(
            """
            INSERT INTO {} (caller_id, tier, updated_at)
            VALUES (%s, %s, NOW())
            ON CONFLICT (caller_id) DO UPDATE
            SET tier = EXCLUDED.tier, updated_at = EXCLUDED.updated_at
            """
        ).format(sql.Identifier(self.table))
        with get_db_connection(self.dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(query, (caller_id, tier.value))
            conn.commit()

    async def write_tier(self, caller_id: str, tier: str | Tier) -> Tier:
        """Set a caller's tier.

        Args:
            caller_id: The caller id.
            tier: A Tier or its string value.

        Returns:
            The stored Tier.

        Raises:
            ValueError: If `tier` is not a known tier.
        """
        resolved = tier if isinstance(tier, Tier) else Tier(tier)
        await asyncio.to_thread(self._write_tier, caller_id, resolved)
        logger.info(f"Set tier for caller '{caller_id}' to '{resolved.value}'")
        return resolved
