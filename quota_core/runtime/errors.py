"""
Error model with retry classification.

A ServiceError carries a machine-readable code and a message safe to log.
Its `retryable` flag tells the invoking client whether repeating the whole
request can help. Nothing in the core retries on its own.
"""

from __future__ import annotations

import uuid
from typing import Any, ClassVar


class ErrorCode:
    """Codes carried by quota-gate errors."""

    UNAUTHORIZED = "UNAUTHORIZED"
    ACCOUNTING_FAILED = "ACCOUNTING_FAILED"
    PARTIAL_DELETION = "PARTIAL_DELETION"


class ServiceError(Exception):
    """Base service error.

    Attributes:
        code: Error code for programmatic handling.
        message_safe: Message that may appear in logs and summaries.
        message_debug: Internal detail; never sent to callers.
        cause: Underlying exception, if any.
        debug_id: Short id tying a response to its log line.
    """

    retryable: ClassVar[bool] = False

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.cause = cause
        self.debug_id = debug_id or uuid.uuid4().hex[:8]

    def __str__(self) -> str:
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, debug_id={self.debug_id!r}, retryable={self.retryable})"

    def to_dict(self) -> dict[str, Any]:
        """Structured-log view. Leaves out message_debug and cause."""
        return {
            "code": self.code,
            "message": self.message_safe,
            "retryable": self.retryable,
            "debug_id": self.debug_id,
        }


class RetryableError(ServiceError):
    """Repeating the whole request may succeed (store outage, partial delete)."""

    retryable = True


class TerminalError(ServiceError):
    """Repeating the same request will fail the same way (bad credential)."""
