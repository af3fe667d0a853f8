"""
Auth module for quota-gate.

Provides identity credential verification and upload artifact signing.
"""

from quota_core.auth.artifacts import JwtArtifactSigner, UploadClaims, permits_upload
from quota_core.auth.identity import JwtIdentityVerifier

__all__ = [
    "JwtArtifactSigner",
    "JwtIdentityVerifier",
    "UploadClaims",
    "permits_upload",
]
