# Quota services

from .accountant import StorageAccountant
from .blob_store import MinIOBlobStore, get_blob_store
from .deletion import DeletionCoordinator
from .local_blob_store import LocalBlobStore
from .profile_store import PostgresProfileStore
from .resolver import QuotaResolver
from .token_issuer import IssuedArtifact, TokenIssuer

__all__ = [
    # Core services
    "StorageAccountant",
    "QuotaResolver",
    "TokenIssuer",
    "IssuedArtifact",
    "DeletionCoordinator",
    # Collaborator backends
    "MinIOBlobStore",
    "LocalBlobStore",
    "PostgresProfileStore",
    "get_blob_store",
]
