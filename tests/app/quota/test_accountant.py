"""Unit tests for StorageAccountant."""

import pytest

from app.quota.services.accountant import StorageAccountant
from quota_core.domain.exceptions import AccountingFailure
from tests.app.quota.fakes import InMemoryBlobStore


class TestUsageBytes:
    """Tests for usage aggregation."""

    @pytest.mark.asyncio
    async def test_sums_sizes_under_caller_namespace(self):
        """Usage is the sum of the caller's object sizes."""
        store = InMemoryBlobStore(
            {
                "alice/1/a.png": 10_000,
                "alice/2/b.png": 30_000,
                "bob/1/c.png": 99_999,
            }
        )
        accountant = StorageAccountant(store)

        assert await accountant.usage_bytes("alice") == 40_000

    @pytest.mark.asyncio
    async def test_zero_objects_returns_zero(self):
        """An empty namespace accounts to 0, not an error."""
        accountant = StorageAccountant(InMemoryBlobStore())

        assert await accountant.usage_bytes("nobody") == 0

    @pytest.mark.asyncio
    async def test_lists_with_separator_terminated_prefix(self):
        """Caller 'abc' must not be charged for caller 'abcd' objects."""
        store = InMemoryBlobStore({"abc/1/x": 5, "abcd/1/y": 7})
        accountant = StorageAccountant(store)

        assert await accountant.usage_bytes("abc") == 5
        assert store.list_calls == ["abc/"]

    @pytest.mark.asyncio
    async def test_listing_failure_raises_accounting_failure(self):
        """A failing listing surfaces as AccountingFailure with the cause attached."""
        store = InMemoryBlobStore()
        store.list_error = PermissionError("access denied by bucket policy")
        accountant = StorageAccountant(store)

        with pytest.raises(AccountingFailure) as exc_info:
            await accountant.usage_bytes("alice")

        assert exc_info.value.caller_id == "alice"
        assert isinstance(exc_info.value.cause, PermissionError)
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_listing_failure_is_not_retried(self):
        """The accountant calls the listing exactly once."""
        store = InMemoryBlobStore()
        store.list_error = ConnectionError("reset")
        accountant = StorageAccountant(store)

        with pytest.raises(AccountingFailure):
            await accountant.usage_bytes("alice")

        assert len(store.list_calls) == 1

    @pytest.mark.asyncio
    async def test_empty_caller_id_rejected(self):
        """An empty caller id would list every namespace."""
        accountant = StorageAccountant(InMemoryBlobStore({"a/1": 1}))

        with pytest.raises(ValueError):
            await accountant.usage_bytes("")
