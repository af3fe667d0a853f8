"""Unit tests for TokenIssuer."""

import asyncio

import pytest

from app.quota.services.accountant import StorageAccountant
from app.quota.services.resolver import QuotaResolver
from app.quota.services.token_issuer import TokenIssuer
from quota_core.auth.artifacts import JwtArtifactSigner
from quota_core.domain.exceptions import AccountingFailure, AuthenticationFailure
from tests.app.quota.fakes import (
    FakeIdentityVerifier,
    FakeProfileStore,
    InMemoryBlobStore,
    RecordingSigner,
)

SIGNING_SECRET = "upload-secret-long-enough-for-hs256"


@pytest.fixture
def blob_store():
    return InMemoryBlobStore({"alice/1/a.png": 40_000})


@pytest.fixture
def resolver(blob_store):
    return QuotaResolver(FakeProfileStore({"alice": "free"}), StorageAccountant(blob_store))


@pytest.fixture
def verifier():
    return FakeIdentityVerifier({"good-credential": "alice"})


class TestIssue:
    """Tests for successful issuance."""

    @pytest.mark.asyncio
    async def test_embeds_caller_remaining_quota_and_path(self, verifier, resolver):
        """The artifact carries callerId, storageLeftInBytes and path."""
        signer = RecordingSigner()
        issuer = TokenIssuer(verifier, resolver, signer)

        artifact = await issuer.issue("good-credential", "alice/1700000000/photo.png")

        assert artifact.token == "artifact-1"
        assert artifact.caller_id == "alice"
        assert artifact.storage_left_in_bytes == 60_000
        assert signer.minted == [
            ("alice", {"storageLeftInBytes": 60_000, "path": "alice/1700000000/photo.png"})
        ]

    @pytest.mark.asyncio
    async def test_signed_artifact_matches_contemporaneous_read(self, verifier, resolver):
        """Embedded figure equals a storage-left read made at the same time."""
        signer = JwtArtifactSigner(secret=SIGNING_SECRET)
        issuer = TokenIssuer(verifier, resolver, signer)

        artifact = await issuer.issue("good-credential", "alice/1/next.png")
        claims = signer.verify(artifact.token)

        assert claims is not None
        assert claims["sub"] == "alice"
        assert claims["storageLeftInBytes"] == await resolver.storage_left_in_bytes("alice")
        assert claims["path"] == "alice/1/next.png"

    @pytest.mark.asyncio
    async def test_figure_is_recomputed_per_issuance(self, verifier, resolver, blob_store):
        """A second token reflects storage added after the first."""
        signer = RecordingSigner()
        issuer = TokenIssuer(verifier, resolver, signer)

        first = await issuer.issue("good-credential", "alice/2/a")
        blob_store.put("alice/2/a", 25_000)
        second = await issuer.issue("good-credential", "alice/3/b")

        assert first.storage_left_in_bytes == 60_000
        assert second.storage_left_in_bytes == 35_000

    @pytest.mark.asyncio
    async def test_negative_remainder_is_embedded_unclamped(self, verifier):
        resolver = QuotaResolver(
            FakeProfileStore({"alice": "free"}),
            StorageAccountant(InMemoryBlobStore({"alice/1/big": 150_000})),
        )
        signer = RecordingSigner()
        issuer = TokenIssuer(verifier, resolver, signer)

        artifact = await issuer.issue("good-credential", "alice/2/x")

        assert artifact.storage_left_in_bytes == -50_000
        assert signer.minted[0][1]["storageLeftInBytes"] == -50_000

    @pytest.mark.asyncio
    async def test_concurrent_issuances_do_not_reserve_quota(self, verifier, resolver, blob_store):
        """Overlapping issuances both embed the full remainder."""
        signer = RecordingSigner()
        issuer = TokenIssuer(verifier, resolver, signer)

        first, second = await asyncio.gather(
            issuer.issue("good-credential", "alice/2/a.png"),
            issuer.issue("good-credential", "alice/3/b.png"),
        )

        assert blob_store.peak_listings_in_flight == 2
        assert first.storage_left_in_bytes == second.storage_left_in_bytes == 60_000
        assert [claims["storageLeftInBytes"] for _, claims in signer.minted] == [60_000, 60_000]
        # Together the two tokens authorise more than is left
        assert first.storage_left_in_bytes + second.storage_left_in_bytes > 60_000


class TestIssueFailures:
    """Tests for rejected issuance."""

    @pytest.mark.asyncio
    async def test_invalid_credential_mints_nothing(self, verifier, resolver, blob_store):
        signer = RecordingSigner()
        issuer = TokenIssuer(verifier, resolver, signer)

        with pytest.raises(AuthenticationFailure):
            await issuer.issue("forged", "alice/1/x")

        assert signer.minted == []
        assert blob_store.list_calls == []

    @pytest.mark.asyncio
    async def test_accounting_failure_mints_nothing(self, verifier, resolver, blob_store):
        blob_store.list_error = ConnectionError("minio down")
        signer = RecordingSigner()
        issuer = TokenIssuer(verifier, resolver, signer)

        with pytest.raises(AccountingFailure):
            await issuer.issue("good-credential", "alice/1/x")

        assert signer.minted == []

    @pytest.mark.asyncio
    async def test_issuance_does_not_mutate_storage(self, verifier, resolver, blob_store):
        before = dict(blob_store.objects)
        issuer = TokenIssuer(verifier, resolver, RecordingSigner())

        await issuer.issue("good-credential", "alice/1/x")

        assert blob_store.objects == before
        assert blob_store.delete_calls == []
