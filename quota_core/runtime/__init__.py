"""
Service runtime layer for quota-gate.

- ServiceError: Standardized errors with retry semantics
"""

from .errors import ErrorCode, RetryableError, ServiceError, TerminalError

__all__ = [
    "ErrorCode",
    "ServiceError",
    "RetryableError",
    "TerminalError",
]
