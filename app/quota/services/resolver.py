"""
Quota resolution: ceiling for the caller's tier minus current usage.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from app.quota.protocols import ProfileStore
from app.quota.services.accountant import StorageAccountant
from quota_core.domain.exceptions import AccountingFailure
from quota_core.domain.quota import DEFAULT_POLICY, QuotaPolicy, Tier
from quota_core.domain.storage import QuotaSnapshot


class QuotaResolver:
    """
    Combines the profile store, the quota policy and the storage accountant.

    The profile read and the usage listing run concurrently; both must
    succeed before any figure is produced. The result is not clamped, so an
    over-quota caller gets a negative remainder.
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        accountant: StorageAccountant,
        policy: QuotaPolicy = DEFAULT_POLICY,
    ):
        self.profile_store = profile_store
        self.accountant = accountant
        self.policy = policy

    async def _read_tier(self, caller_id: str) -> Tier:
        try:
            stored = await self.profile_store.read_tier(caller_id)
        except Exception as e:
            logger.error(f"Profile read failed for caller '{caller_id}': {e}")
            raise AccountingFailure(
                caller_id,
                message_debug="Profile store read failed",
                cause=e,
            ) from e

        tier = Tier.parse(stored)
        if stored is not None and tier.value != str(stored).strip().lower():
            logger.warning(f"Caller '{caller_id}' has unrecognised tier {stored!r}; using '{tier.value}'")
        return tier

    async def snapshot(self, caller_id: str) -> QuotaSnapshot:
        """
        Evaluate tier, ceiling and usage for a caller.

        Args:
            caller_id: The verified caller id.

        Returns:
            QuotaSnapshot with the figures computed for this call.

        Raises:
            AccountingFailure: If either the profile read or the usage listing fails.
        """
        results = await asyncio.gather(
            self._read_tier(caller_id),
            self.accountant.usage_bytes(caller_id),
            return_exceptions=True,
        )

        # Both sub-reads have settled; surface the first failure, if any
        for result in results:
            if isinstance(result, BaseException):
                raise result

        tier, usage = results
        return QuotaSnapshot(
            caller_id=caller_id,
            tier=tier,
            ceiling_bytes=self.policy.ceiling_for(tier),
            usage_bytes=usage,
        )

    async def storage_left_in_bytes(self, caller_id: str) -> int:
        """
        Compute the caller's remaining quota in bytes.

        Raises:
            AccountingFailure: If either sub-read fails.
        """
        snapshot = await self.snapshot(caller_id)
        logger.debug(
            f"Caller '{caller_id}' tier={snapshot.tier.value} ceiling={snapshot.ceiling_bytes} "
            f"usage={snapshot.usage_bytes} left={snapshot.storage_left_in_bytes}"
        )
        return snapshot.storage_left_in_bytes
