"""
Blob store backends for quota accounting and reclamation.

This module provides:
- MinIOBlobStore: Production blob store on MinIO object storage
- get_blob_store: Factory function to get the configured backend

The backend is selected based on the USE_LOCAL_STORAGE setting.
"""

from __future__ import annotations

import asyncio

from loguru import logger
from minio import Minio

from app.quota.protocols import BlobStore
from quota_core.config import settings
from quota_core.domain.storage import StorageObject
from quota_core.infrastructure.minio import get_minio_client


class MinIOBlobStore:
    """
    MinIO-backed blob store holding every caller's objects in one bucket.

    The MinIO client is blocking, so calls run in a worker thread.

    Usage:
        store = MinIOBlobStore()
        objects = await store.list_objects("uid-123/")
        await store.delete_object("uid-123/1700000000/photo.png")
    """

    def __init__(self, client: Minio | None = None, bucket: str | None = None):
        """
        Initialize the MinIO blob store.

        Args:
            client: MinIO client. Defaults to the shared connector client.
            bucket: Bucket holding caller objects. Defaults to settings.MINIO_BUCKET_OBJECTS.
        """
        self._client = client or get_minio_client()
        self.bucket = bucket or settings.MINIO_BUCKET_OBJECTS

        # Ensure bucket exists
        self.ensure_bucket_exists()

    def ensure_bucket_exists(self) -> None:
        """Create the bucket if it doesn't exist.

        A failure here is only logged; the next listing surfaces it as an
        accounting failure.
        """
        try:
            if not self._client.bucket_exists(self.bucket):
                self._client.make_bucket(self.bucket)
                logger.info(f"Created MinIO bucket '{self.bucket}'")
        except Exception as e:
            logger.warning(f"Could not ensure bucket '{self.bucket}' exists: {e}")

    def _list_objects(self, prefix: str) -> list[StorageObject]:
        listing = self._client.list_objects(self.bucket, prefix=prefix, recursive=True)
        return [
            StorageObject(key=obj.object_name, size_bytes=int(obj.size or 0))
            for obj in listing
            if not obj.is_dir
        ]

    async def list_objects(self, prefix: str) -> list[StorageObject]:
        """
        List objects under a prefix.

        Args:
            prefix: Key prefix (a caller namespace).

        Returns:
            list[StorageObject]: Matching objects with their sizes.
        """
        objects = await asyncio.to_thread(self._list_objects, prefix)
        logger.debug(f"Listed {len(objects)} objects under {self.bucket}/{prefix}")
        return objects

    async def delete_object(self, key: str) -> None:
        """
        Delete an object.

        Args:
            key: Object key inside the bucket.
        """
        logger.info(f"Deleting {self.bucket}/{key}")
        await asyncio.to_thread(self._client.remove_object, self.bucket, key)


def get_blob_store() -> BlobStore:
    """
    Factory function to get the configured blob store backend.

    Uses USE_LOCAL_STORAGE setting to determine which backend to use.
    Defaults to MinIO for production.

    Returns:
        BlobStore: The configured blob store instance.
    """
    if settings.USE_LOCAL_STORAGE:
        from .local_blob_store import LocalBlobStore

        logger.info("Using LocalBlobStore backend")
        return LocalBlobStore(base_path=settings.LOCAL_STORAGE_PATH)

    logger.info("Using MinIOBlobStore backend")
    return MinIOBlobStore()
