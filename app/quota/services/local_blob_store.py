"""
Local filesystem blob store.

Maps object keys to files under a base directory, useful for development
and testing without MinIO.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from loguru import logger

from quota_core.domain.storage import StorageObject


class LocalBlobStore:
    """
    File-system based blob store for local development.

    An object key "uid/1700000000/photo.png" is stored at
    "<base_path>/uid/1700000000/photo.png".

    Usage:
        store = LocalBlobStore(base_path="/tmp/quota-gate-storage")
        store.put("uid/1/a.txt", b"hello")
        objects = await store.list_objects("uid/")
    """

    def __init__(self, base_path: str = "/tmp/quota-gate-storage"):
        """
        Initialize local storage.

        Args:
            base_path: Root directory for all stored objects.
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalBlobStore initialized at {self.base_path}")

    def _resolve(self, key: str) -> Path:
        target = (self.base_path / key).resolve()
        if not target.is_relative_to(self.base_path.resolve()):
            raise ValueError(f"Object key escapes the storage root: {key}")
        return target

    def put(self, key: str, content: bytes) -> None:
        """Store an object (the upload path; used by tooling and tests)."""
        target = self._resolve(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.info(f"Stored {key} ({len(content)} bytes)")

    def _list_objects(self, prefix: str) -> list[StorageObject]:
        root = self.base_path.resolve()
        objects = []
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            key = path.relative_to(root).as_posix()
            if key.startswith(prefix):
                objects.append(StorageObject(key=key, size_bytes=path.stat().st_size))
        return objects

    async def list_objects(self, prefix: str) -> list[StorageObject]:
        """List objects whose key starts with `prefix`."""
        return await asyncio.to_thread(self._list_objects, prefix)

    async def delete_object(self, key: str) -> None:
        """
        Delete an object.

        Raises:
            FileNotFoundError: If the object doesn't exist.
        """
        target = self._resolve(key)
        await asyncio.to_thread(target.unlink)
        logger.info(f"Deleted {key}")
