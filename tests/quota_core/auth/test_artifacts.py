"""Unit tests for upload artifact signing and the upload-side check."""

from __future__ import annotations

from unittest.mock import patch

import jwt
import pytest

from quota_core.auth.artifacts import JwtArtifactSigner, UploadClaims, permits_upload

SECRET = "upload-secret-long-enough-for-hs256"


class TestMint:
    """Tests for artifact minting."""

    @pytest.mark.asyncio
    async def test_mint_returns_jwt(self):
        signer = JwtArtifactSigner(secret=SECRET)

        token = await signer.mint("uid-1", {"storageLeftInBytes": 10, "path": "uid-1/a"})

        assert isinstance(token, str)
        assert token.count(".") == 2

    @pytest.mark.asyncio
    async def test_round_trip_preserves_claims(self):
        signer = JwtArtifactSigner(secret=SECRET, issuer="quota-gate-test")

        token = await signer.mint("uid-1", {"storageLeftInBytes": -50_000, "path": "uid-1/a"})
        claims = signer.verify(token)

        assert claims is not None
        assert claims["sub"] == "uid-1"
        assert claims["storageLeftInBytes"] == -50_000
        assert claims["path"] == "uid-1/a"
        assert claims["iss"] == "quota-gate-test"
        assert claims["exp"] > claims["iat"]

    @pytest.mark.asyncio
    async def test_claims_cannot_override_subject_or_expiry(self):
        signer = JwtArtifactSigner(secret=SECRET, ttl_seconds=60)

        token = await signer.mint(
            "uid-1",
            {"sub": "someone-else", "exp": 9_999_999_999, "storageLeftInBytes": 1, "path": "uid-1/a"},
        )
        claims = signer.verify(token)

        assert claims["sub"] == "uid-1"
        assert claims["exp"] - claims["iat"] == 60

    @pytest.mark.asyncio
    async def test_ttl_from_settings(self):
        with patch("quota_core.auth.artifacts.settings") as mock_settings:
            mock_settings.UPLOAD_TOKEN_SECRET = SECRET
            mock_settings.UPLOAD_TOKEN_TTL = 120
            mock_settings.UPLOAD_TOKEN_ISSUER = "quota-gate"

            signer = JwtArtifactSigner()

        assert signer.ttl == 120


class TestVerify:
    """Tests for artifact decoding."""

    @pytest.mark.asyncio
    async def test_wrong_secret_returns_none(self):
        minted_by = JwtArtifactSigner(secret="other-secret-long-enough-for-hs256")
        token = await minted_by.mint("uid-1", {"storageLeftInBytes": 1, "path": "uid-1/a"})

        assert JwtArtifactSigner(secret=SECRET).verify(token) is None

    @pytest.mark.asyncio
    async def test_expired_returns_none(self):
        signer = JwtArtifactSigner(secret=SECRET, ttl_seconds=-10)
        token = await signer.mint("uid-1", {"storageLeftInBytes": 1, "path": "uid-1/a"})

        assert signer.verify(token) is None

    def test_missing_quota_claim_returns_none(self):
        signer = JwtArtifactSigner(secret=SECRET)
        token = jwt.encode(
            {"sub": "uid-1", "iss": signer.issuer, "exp": 9_999_999_999, "path": "uid-1/a"},
            SECRET,
            algorithm="HS256",
        )

        assert signer.verify(token) is None

    def test_garbage_returns_none(self):
        assert JwtArtifactSigner(secret=SECRET).verify("not-a-token") is None


class TestPermitsUpload:
    """Tests for the upload-side quota check."""

    def test_fits_within_remaining(self):
        assert permits_upload(make_claims(storage_left=1_000), "uid-1/1/a.png", 1_000)

    def test_exceeds_remaining(self):
        assert not permits_upload(make_claims(storage_left=1_000), "uid-1/1/a.png", 1_001)

    def test_negative_remaining_never_permits(self):
        assert not permits_upload(make_claims(storage_left=-50_000), "uid-1/1/a.png", 0)

    def test_zero_remaining_never_permits(self):
        assert not permits_upload(make_claims(storage_left=0), "uid-1/1/a.png", 0)

    def test_path_must_match_artifact(self):
        assert not permits_upload(make_claims(storage_left=1_000), "uid-1/1/other.png", 10)

    def test_path_must_be_in_subject_namespace(self):
        claims = make_claims(storage_left=1_000, path="uid-2/1/a.png")

        assert not permits_upload(claims, "uid-2/1/a.png", 10)

    def test_subject_with_separator_never_permits(self):
        claims = make_claims(storage_left=1_000, path="uid-1/x/1/a.png")
        claims["sub"] = "uid-1/x"

        assert not permits_upload(claims, "uid-1/x/1/a.png", 10)


# --- Helpers ---


def make_claims(storage_left: int, path: str = "uid-1/1/a.png") -> UploadClaims:
    return UploadClaims(
        sub="uid-1",
        storageLeftInBytes=storage_left,
        path=path,
        iss="quota-gate",
        iat=0,
        exp=9_999_999_999,
    )
