"""
Domain failures for quota accounting and reclamation.

Every failure here is surfaced to HTTP callers with a fixed, non-detailed
response; the details only reach the logs.
"""

from __future__ import annotations

from quota_core.runtime.errors import ErrorCode, RetryableError, TerminalError


class AuthenticationFailure(TerminalError):
    """The inbound credential is missing, malformed, forged or expired."""

    def __init__(
        self,
        message_debug: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            code=ErrorCode.UNAUTHORIZED,
            message_safe="Credential rejected",
            message_debug=message_debug,
            cause=cause,
        )


class AccountingFailure(RetryableError):
    """The profile read or the usage listing failed; no figure was computed."""

    def __init__(
        self,
        caller_id: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            code=ErrorCode.ACCOUNTING_FAILED,
            message_safe="Storage accounting unavailable",
            message_debug=message_debug,
            cause=cause,
        )
        self.caller_id = caller_id


class PartialDeletionFailure(RetryableError):
    """Some deletes of a bulk reclamation failed.

    Objects that were deleted stay deleted; `failed_keys` lists the rest.
    """

    def __init__(
        self,
        caller_id: str,
        failed_keys: tuple[str, ...],
        deleted_count: int,
    ):
        super().__init__(
            code=ErrorCode.PARTIAL_DELETION,
            message_safe="Some objects could not be deleted",
            message_debug=f"{len(failed_keys)} failed, {deleted_count} deleted",
        )
        self.caller_id = caller_id
        self.failed_keys = failed_keys
        self.deleted_count = deleted_count
