"""
Bulk reclamation of a caller's stored objects.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from app.quota.protocols import BlobStore
from quota_core.domain.exceptions import AccountingFailure
from quota_core.domain.storage import (
    AllSucceeded,
    DeletionResult,
    PartiallyFailed,
    namespace_prefix,
)


class DeletionCoordinator:
    """
    Deletes every object under a caller's namespace.

    Deletes are issued concurrently. A failed delete does not undo the ones
    that succeeded and is not retried here; the failed keys are returned so
    the invoker can repeat the operation. Repeating it is safe because
    deleted objects no longer appear in the next listing.
    """

    def __init__(self, blob_store: BlobStore):
        self.blob_store = blob_store

    async def delete_all(self, caller_id: str) -> DeletionResult:
        """
        Delete all of a caller's objects.

        Args:
            caller_id: The verified caller id.

        Returns:
            AllSucceeded, or PartiallyFailed listing the keys that survived.

        Raises:
            AccountingFailure: If the namespace cannot be listed.
        """
        prefix = namespace_prefix(caller_id)

        try:
            objects = await self.blob_store.list_objects(prefix)
        except Exception as e:
            logger.error(f"Listing '{prefix}' failed before deletion: {e}")
            raise AccountingFailure(
                caller_id,
                message_debug=f"Blob store listing failed for prefix '{prefix}'",
                cause=e,
            ) from e

        if not objects:
            logger.info(f"No objects to delete for caller '{caller_id}'")
            return AllSucceeded()

        keys = [obj.key for obj in objects]
        outcomes = await asyncio.gather(
            *(self.blob_store.delete_object(key) for key in keys),
            return_exceptions=True,
        )

        deleted: list[str] = []
        failed: list[str] = []
        for key, outcome in zip(keys, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Failed to delete '{key}': {outcome}")
                failed.append(key)
            else:
                deleted.append(key)

        if failed:
            logger.error(
                f"Deletion for caller '{caller_id}' incomplete: deleted={len(deleted)}, failed={len(failed)}"
            )
            return PartiallyFailed(deleted_keys=tuple(deleted), failed_keys=tuple(failed))

        logger.info(f"Deleted {len(deleted)} objects for caller '{caller_id}'")
        return AllSucceeded(deleted_keys=tuple(deleted))
