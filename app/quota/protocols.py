from __future__ import annotations
"""
Protocols for the collaborators consumed by the quota services.

Identity verification, the profile store, the blob store and artifact
signing all live outside the quota core. These protocols are the only
surface the services depend on, so each can be swapped for a test double.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from quota_core.domain.storage import StorageObject


@runtime_checkable
class IdentityVerifier(Protocol):
    """Protocol for turning a bearer credential into a caller id."""

    async def verify(self, credential: str | None) -> str:
        """
        Validate the credential.

        Args:
            credential: Opaque bearer value from the caller's session.

        Returns:
            The verified caller id.

        Raises:
            AuthenticationFailure: If the credential is invalid or expired.
        """
        ...


@runtime_checkable
class ProfileStore(Protocol):
    """Protocol for the durable per-caller profile (tier) store."""

    async def read_tier(self, caller_id: str) -> str | None:
        """
        Read the caller's stored tier.

        Returns:
            The raw stored tier value, or None when the caller has no profile.
        """
        ...


@runtime_checkable
class BlobStore(Protocol):
    """Protocol for the blob store primitives used for accounting and reclamation."""

    async def list_objects(self, prefix: str) -> list[StorageObject]:
        """
        List every object whose key starts with `prefix`.

        Returns:
            Matching objects; an empty list when nothing matches.
        """
        ...

    async def delete_object(self, key: str) -> None:
        """
        Delete one object.

        Raises:
            Exception: Any failure reported by the store.
        """
        ...


@runtime_checkable
class ArtifactSigner(Protocol):
    """Protocol for minting signed upload artifacts."""

    async def mint(self, subject: str, claims: Mapping[str, Any]) -> str:
        """
        Sign an artifact for `subject` embedding `claims`.

        Returns:
            The opaque artifact (token string).
        """
        ...
