"""
Upload token issuance.

An upload token binds the verified caller, the remaining quota computed at
issuance time and the intended upload path. The remainder is computed
fresh for every token and never taken from the request.

Two concurrent issuances for the same caller each see the same remainder
and neither reserves it, so uploads made under both tokens can jointly
exceed the ceiling. There is no reservation phase.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from app.quota.protocols import ArtifactSigner, IdentityVerifier
from app.quota.services.resolver import QuotaResolver

STORAGE_LEFT_CLAIM = "storageLeftInBytes"
PATH_CLAIM = "path"


@dataclass(frozen=True)
class IssuedArtifact:
    """A minted upload token and the claims it carries."""

    token: str
    caller_id: str
    storage_left_in_bytes: int
    path: str


class TokenIssuer:
    """Mints quota-bound upload tokens."""

    def __init__(
        self,
        identity_verifier: IdentityVerifier,
        resolver: QuotaResolver,
        signer: ArtifactSigner,
    ):
        self.identity_verifier = identity_verifier
        self.resolver = resolver
        self.signer = signer

    async def issue(self, credential: str | None, path: str) -> IssuedArtifact:
        """
        Verify the caller and mint an upload token for `path`.

        Args:
            credential: The caller's identity token.
            path: The object key the caller intends to upload to.

        Returns:
            IssuedArtifact with the signed token.

        Raises:
            AuthenticationFailure: If the credential is rejected.
            AccountingFailure: If the remaining quota cannot be computed.
        """
        caller_id = await self.identity_verifier.verify(credential)
        storage_left = await self.resolver.storage_left_in_bytes(caller_id)

        token = await self.signer.mint(
            caller_id,
            {
                STORAGE_LEFT_CLAIM: int(storage_left),
                PATH_CLAIM: path,
            },
        )

        logger.info(f"Issued upload token for caller '{caller_id}' path='{path}' storage_left={storage_left}")
        return IssuedArtifact(
            token=token,
            caller_id=caller_id,
            storage_left_in_bytes=storage_left,
            path=path,
        )
