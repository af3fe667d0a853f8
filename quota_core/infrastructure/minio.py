"""
Shared MinIO client.

The blob store adapter and the operator scripts both talk to the object
bucket through one lazily built client per process.
"""

from loguru import logger
from minio import Minio

from quota_core.config import settings


class MinioClientConnector:
    """Holds the process-wide MinIO client. `reset()` forces a rebuild."""

    _instance: Minio | None = None

    @classmethod
    def get_instance(cls) -> Minio:
        if cls._instance is not None:
            return cls._instance

        endpoint = settings.MINIO_ENDPOINT
        try:
            client = Minio(
                endpoint=endpoint,
                access_key=settings.MINIO_ACCESS_KEY,
                secret_key=settings.MINIO_SECRET_KEY,
                secure=settings.MINIO_SECURE,
            )
        except Exception as e:
            logger.error(f"Invalid MinIO configuration for '{endpoint}': {e}")
            raise

        logger.info(f"MinIO client ready for '{endpoint}' (secure={settings.MINIO_SECURE})")
        cls._instance = client
        return client

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


def get_minio_client() -> Minio:
    """Return the shared MinIO client, building it on first use."""
    return MinioClientConnector.get_instance()
