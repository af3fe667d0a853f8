"""
Storage accounting: how many bytes a caller currently occupies.
"""

from __future__ import annotations

from loguru import logger

from app.quota.protocols import BlobStore
from quota_core.domain.exceptions import AccountingFailure
from quota_core.domain.storage import namespace_prefix


class StorageAccountant:
    """
    Sums object sizes under a caller's namespace.

    The figure is recomputed on every call and reflects whatever the blob
    store's listing returns at that moment. No retries are attempted.

    Usage:
        accountant = StorageAccountant(blob_store)
        used = await accountant.usage_bytes("uid-123")
    """

    def __init__(self, blob_store: BlobStore):
        self.blob_store = blob_store

    async def usage_bytes(self, caller_id: str) -> int:
        """
        Compute the bytes consumed by a caller.

        Args:
            caller_id: The verified caller id.

        Returns:
            Total size of the caller's objects; 0 when there are none.

        Raises:
            AccountingFailure: If the blob store listing fails.
        """
        prefix = namespace_prefix(caller_id)

        try:
            objects = await self.blob_store.list_objects(prefix)
        except Exception as e:
            logger.error(f"Listing '{prefix}' failed while accounting usage: {e}")
            raise AccountingFailure(
                caller_id,
                message_debug=f"Blob store listing failed for prefix '{prefix}'",
                cause=e,
            ) from e

        if not objects:
            return 0

        total = sum(obj.size_bytes for obj in objects)
        logger.debug(f"Caller '{caller_id}' uses {total} bytes across {len(objects)} objects")
        return total
