"""
Identity verification for inbound bearer credentials.

Turns the identity token issued to a browser session into a caller id.
The caller id is always the token's `sub` claim and is never read from
any other request input.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from loguru import logger

from quota_core.config import settings
from quota_core.domain.exceptions import AuthenticationFailure
from quota_core.domain.storage import namespace_prefix


class JwtIdentityVerifier:
    """Verifies HMAC-signed identity tokens."""

    def __init__(
        self,
        secret: str | None = None,
        algorithm: str | None = None,
        audience: str | None = None,
    ):
        """Initialize the verifier.

        Args:
            secret: Signing secret shared with the identity provider.
                Defaults to settings.IDENTITY_JWT_SECRET.
            algorithm: JWT algorithm. Defaults to settings.IDENTITY_JWT_ALGORITHM.
            audience: Expected `aud` claim, if any. Defaults to settings.IDENTITY_JWT_AUDIENCE.
        """
        self.secret = secret or settings.IDENTITY_JWT_SECRET
        self.algorithm = algorithm or settings.IDENTITY_JWT_ALGORITHM
        self.audience = audience if audience is not None else settings.IDENTITY_JWT_AUDIENCE

        if not self.secret:
            raise ValueError("IDENTITY_JWT_SECRET must be configured")

    async def verify(self, credential: str | None) -> str:
        """Validate a credential and return the caller id.

        Args:
            credential: The raw identity token.

        Returns:
            The caller id (`sub` claim).

        Raises:
            AuthenticationFailure: If the credential is missing, invalid or expired.
        """
        if not credential:
            raise AuthenticationFailure(message_debug="No credential supplied")

        try:
            payload = jwt.decode(
                credential,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationFailure(message_debug="Credential expired", cause=e) from e
        except jwt.InvalidTokenError as e:
            raise AuthenticationFailure(message_debug=f"Invalid credential: {e}", cause=e) from e

        caller_id = payload.get("sub")
        if not isinstance(caller_id, str):
            raise AuthenticationFailure(message_debug="Credential has no usable subject")
        try:
            namespace_prefix(caller_id)
        except ValueError as e:
            raise AuthenticationFailure(message_debug=f"Credential subject unusable: {e}", cause=e) from e

        logger.debug(f"Verified credential for caller '{caller_id}'")
        return caller_id

    def create_id_token(self, caller_id: str, ttl_seconds: int = 900) -> str:
        """Mint an identity token with this verifier's secret.

        Used by local tooling and tests in place of the identity provider.

        Args:
            caller_id: Value for the `sub` claim.
            ttl_seconds: Lifetime of the token (default: 15 minutes).

        Returns:
            Encoded JWT string.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": caller_id,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl_seconds)).timestamp()),
        }
        if self.audience:
            payload["aud"] = self.audience
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)
