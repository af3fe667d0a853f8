"""
Upload artifacts: short-lived signed tokens carrying quota claims.

The token issuer mints one per upload request. The upload path decodes it
with `verify` and gates the transfer with `permits_upload`, trusting the
embedded `storageLeftInBytes` because it was computed server-side.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, TypedDict

import jwt

from quota_core.config import settings
from quota_core.domain.storage import namespace_prefix

RESERVED_CLAIMS = frozenset({"sub", "iss", "iat", "exp"})


class UploadClaims(TypedDict):
    """Decoded upload artifact."""

    sub: str  # caller id
    storageLeftInBytes: int
    path: str
    iss: str
    iat: int
    exp: int


class JwtArtifactSigner:
    """Mints and decodes upload artifacts."""

    ALGORITHM = "HS256"

    def __init__(
        self,
        secret: str | None = None,
        ttl_seconds: int | None = None,
        issuer: str | None = None,
    ):
        """Initialize the signer.

        Args:
            secret: Signing secret. Defaults to settings.UPLOAD_TOKEN_SECRET.
            ttl_seconds: Artifact lifetime. Defaults to settings.UPLOAD_TOKEN_TTL.
            issuer: `iss` claim. Defaults to settings.UPLOAD_TOKEN_ISSUER.
        """
        self.secret = secret or settings.UPLOAD_TOKEN_SECRET
        self.ttl = ttl_seconds if ttl_seconds is not None else settings.UPLOAD_TOKEN_TTL
        self.issuer = issuer or settings.UPLOAD_TOKEN_ISSUER

        if not self.secret:
            raise ValueError("UPLOAD_TOKEN_SECRET must be configured")

    async def mint(self, subject: str, claims: Mapping[str, Any]) -> str:
        """Sign an artifact for `subject` carrying `claims`.

        Reserved registered claims (sub, iss, iat, exp) are always set by the
        signer and cannot be overridden through `claims`.

        Args:
            subject: The caller id.
            claims: Additional claims to embed.

        Returns:
            Encoded JWT string.
        """
        now = datetime.now(timezone.utc)
        payload = {key: value for key, value in claims.items() if key not in RESERVED_CLAIMS}
        payload.update(
            {
                "sub": subject,
                "iss": self.issuer,
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(seconds=self.ttl)).timestamp()),
            }
        )
        return jwt.encode(payload, self.secret, algorithm=self.ALGORITHM)

    def verify(self, token: str) -> UploadClaims | None:
        """Decode an artifact.

        Args:
            token: The JWT string.

        Returns:
            Decoded claims if valid, None otherwise.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.ALGORITHM],
                issuer=self.issuer,
                options={"require": ["sub", "exp", "iss"]},
            )
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None

        storage_left = payload.get("storageLeftInBytes")
        if not isinstance(storage_left, int) or isinstance(storage_left, bool):
            return None

        return UploadClaims(
            sub=payload["sub"],
            storageLeftInBytes=storage_left,
            path=payload.get("path", ""),
            iss=payload["iss"],
            iat=payload.get("iat", 0),
            exp=payload["exp"],
        )


def permits_upload(claims: UploadClaims, path: str, size_bytes: int) -> bool:
    """Decide whether an upload may proceed under an artifact.

    The upload must target the path the artifact was issued for, that path
    must sit inside the subject's namespace, and the file must fit in the
    remaining quota. A zero or negative remainder never permits an upload.
    """
    if size_bytes < 0:
        return False
    if not path or path != claims["path"]:
        return False
    try:
        prefix = namespace_prefix(claims["sub"])
    except ValueError:
        return False
    if not path.startswith(prefix):
        return False
    remaining = claims["storageLeftInBytes"]
    if remaining <= 0:
        return False
    return size_bytes <= remaining
