"""
Factory for wiring the quota services to their collaborators.

Routes receive these through FastAPI dependencies; tests replace them
with app.dependency_overrides.
"""

from __future__ import annotations

from app.quota.protocols import ProfileStore
from app.quota.services.accountant import StorageAccountant
from app.quota.services.blob_store import get_blob_store
from app.quota.services.deletion import DeletionCoordinator
from app.quota.services.profile_store import PostgresProfileStore
from app.quota.services.resolver import QuotaResolver
from app.quota.services.token_issuer import TokenIssuer
from quota_core.auth.artifacts import JwtArtifactSigner
from quota_core.auth.identity import JwtIdentityVerifier


def get_identity_verifier() -> JwtIdentityVerifier:
    """Get the identity verifier."""
    return JwtIdentityVerifier()


def get_profile_store() -> ProfileStore:
    """Get the profile store."""
    return PostgresProfileStore()


def get_resolver() -> QuotaResolver:
    """Create a QuotaResolver over the configured profile and blob stores."""
    return QuotaResolver(
        profile_store=get_profile_store(),
        accountant=StorageAccountant(get_blob_store()),
    )


def get_token_issuer() -> TokenIssuer:
    """Create a fully configured TokenIssuer."""
    return TokenIssuer(
        identity_verifier=get_identity_verifier(),
        resolver=get_resolver(),
        signer=JwtArtifactSigner(),
    )


def get_deletion_coordinator() -> DeletionCoordinator:
    """Create a DeletionCoordinator over the configured blob store."""
    return DeletionCoordinator(get_blob_store())
