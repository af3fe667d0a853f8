"""
Quota API routes.

Every endpoint takes the caller's identity token as the `token` query
parameter:
- GET /quota/upload-token - mint an upload token bound to the remaining quota
- GET /quota/storage-left - read the remaining quota
- DELETE /quota/objects - delete every object the caller owns

Authentication and accounting failures both answer 403 with the same
body, so callers cannot tell a bad credential from a store outage.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from loguru import logger

from app.quota.factory import (
    get_deletion_coordinator,
    get_identity_verifier,
    get_resolver,
    get_token_issuer,
)
from app.quota.protocols import IdentityVerifier
from app.quota.schemas import StorageLeftResponse, UploadTokenResponse
from app.quota.services.deletion import DeletionCoordinator
from app.quota.services.resolver import QuotaResolver
from app.quota.services.token_issuer import TokenIssuer
from quota_core.config import settings
from quota_core.domain.exceptions import (
    AccountingFailure,
    AuthenticationFailure,
    PartialDeletionFailure,
)
from quota_core.domain.storage import PartiallyFailed
from quota_core.infrastructure.rate_limiter import limiter
from quota_core.runtime.errors import ServiceError

router = APIRouter(prefix="/quota")

ACCESS_DENIED = "Access denied"
DELETION_INCOMPLETE = "Some objects could not be deleted; retry the request"


def _access_denied(error: ServiceError, operation: str) -> HTTPException:
    """Log the failure in full and build the opaque 403."""
    logger.warning(
        f"{operation} denied [{error.code}] debug_id={error.debug_id}: "
        f"{error.message_debug or error.message_safe}"
    )
    return HTTPException(status_code=403, detail=ACCESS_DENIED)


@router.get("/health")
def quota_health():
    """Health check for the quota module."""
    return {"status": "ok", "module": "quota"}


@router.get("/upload-token", response_model=UploadTokenResponse)
@limiter.limit(settings.UPLOAD_TOKEN_RATE_LIMIT)
async def upload_token(
    request: Request,
    token: str | None = Query(default=None, description="Caller identity token"),
    path: str = Query(..., min_length=1, description="Object key the caller will upload to"),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Mint an upload token embedding the caller's current remaining quota."""
    try:
        artifact = await issuer.issue(token, path)
    except (AuthenticationFailure, AccountingFailure) as e:
        raise _access_denied(e, "upload-token") from e

    return UploadTokenResponse(token=artifact.token)


@router.get("/storage-left", response_model=StorageLeftResponse)
async def storage_left(
    token: str | None = Query(default=None, description="Caller identity token"),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    resolver: QuotaResolver = Depends(get_resolver),
):
    """Return the caller's remaining quota in bytes (may be negative)."""
    try:
        caller_id = await verifier.verify(token)
        remaining = await resolver.storage_left_in_bytes(caller_id)
    except (AuthenticationFailure, AccountingFailure) as e:
        raise _access_denied(e, "storage-left") from e

    return StorageLeftResponse(storage_left_in_bytes=remaining)


@router.delete("/objects", status_code=204)
async def delete_all_objects(
    token: str | None = Query(default=None, description="Caller identity token"),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    coordinator: DeletionCoordinator = Depends(get_deletion_coordinator),
):
    """Delete every object in the caller's namespace.

    A partial failure leaves the successful deletes in place; repeating
    the request deletes what is left.
    """
    try:
        caller_id = await verifier.verify(token)
        result = await coordinator.delete_all(caller_id)
    except (AuthenticationFailure, AccountingFailure) as e:
        raise _access_denied(e, "delete-all-objects") from e

    if isinstance(result, PartiallyFailed):
        error = PartialDeletionFailure(
            caller_id,
            failed_keys=result.failed_keys,
            deleted_count=len(result.deleted_keys),
        )
        logger.error(f"delete-all-objects incomplete for '{caller_id}': {error.to_dict()} {error.message_debug}")
        raise HTTPException(status_code=500, detail=DELETION_INCOMPLETE)

    return Response(status_code=204)
