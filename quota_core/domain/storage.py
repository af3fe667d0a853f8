"""
Storage domain models.

- StorageObject: one blob under a caller's namespace
- QuotaSnapshot: tier, ceiling and usage evaluated together
- AllSucceeded / PartiallyFailed: tagged outcome of a bulk delete
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from quota_core.domain.quota import Tier

NAMESPACE_SEPARATOR = "/"


def namespace_prefix(caller_id: str) -> str:
    """Return the key prefix that scopes blob listings to one caller.

    The trailing separator keeps caller "abc" from matching keys owned by
    caller "abcd".

    Raises:
        ValueError: If caller_id is empty or contains the separator, since
            either prefix would reach into other callers' keys.
    """
    if not caller_id or not caller_id.strip():
        raise ValueError("caller_id must be a non-empty string")
    if NAMESPACE_SEPARATOR in caller_id:
        raise ValueError(f"caller_id must not contain {NAMESPACE_SEPARATOR!r}")
    return f"{caller_id}{NAMESPACE_SEPARATOR}"


@dataclass(frozen=True)
class StorageObject:
    """A blob store entry and its size in bytes."""

    key: str
    size_bytes: int


@dataclass(frozen=True)
class QuotaSnapshot:
    """Quota figures computed from one profile read and one usage listing."""

    caller_id: str
    tier: Tier
    ceiling_bytes: int
    usage_bytes: int

    @property
    def storage_left_in_bytes(self) -> int:
        """Remaining bytes; negative for an over-quota caller."""
        return self.ceiling_bytes - self.usage_bytes


@dataclass(frozen=True)
class AllSucceeded:
    """Every listed object was deleted (or there was nothing to delete)."""

    deleted_keys: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return True


@dataclass(frozen=True)
class PartiallyFailed:
    """At least one delete failed. Successful deletes are not rolled back."""

    deleted_keys: tuple[str, ...]
    failed_keys: tuple[str, ...]

    @property
    def succeeded(self) -> bool:
        return False


DeletionResult = Union[AllSucceeded, PartiallyFailed]
