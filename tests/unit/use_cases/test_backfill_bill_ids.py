"""Unit tests for BackfillBillIds use case

Tests cover:
- Groups numbered by earliest entry, continuing the reserved run
- No-op run when nothing is legacy
- Overflow keeps assigned groups and reports counts
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.billing.backfill_bill_ids import BackfillBillIds
from src.domain.billing_entry import BillingEntry
from src.domain.errors import SeriesExhausted

T0 = datetime(2024, 11, 5, 9, 0, 0, tzinfo=timezone.utc)


def legacy_entry(entry_id, minutes, time, bill_id=None):
    return BillingEntry(
        id=entry_id,
        bill_id=bill_id,
        order_id=1,
        order_business_id="ORD-2024-010",
        item_id=f"ITEM-{entry_id}",
        item_name=f"Item {entry_id}",
        client_name="Acme",
        quantity=1,
        unit_price=Decimal("1.00"),
        total_amount=Decimal("1.00"),
        date="05/11/2024",
        time=time,
        created_at=T0 + timedelta(minutes=minutes),
    )


@pytest.fixture
def legacy_entries():
    """Oldest first, as get_legacy_entries returns them"""
    return [
        legacy_entry(1, 0, "02:30 PM"),
        legacy_entry(2, 0, "02:30 PM", bill_id="OLD-17"),
        legacy_entry(3, 5, "02:35 PM"),
    ]


@pytest.fixture
def mock_entry_repo(legacy_entries):
    repo = MagicMock()
    repo.get_legacy_entries = AsyncMock(return_value=legacy_entries)
    repo.assign_bill_id = AsyncMock(side_effect=lambda entry_ids, bill_id: len(entry_ids))
    return repo


@pytest.fixture
def mock_id_generator():
    generator = MagicMock()
    generator.reserve_bill_numbers = AsyncMock(return_value=8)
    return generator


@pytest.fixture
def backfill_use_case(mock_uow, mock_entry_repo, mock_id_generator):
    return BackfillBillIds(
        uow=mock_uow,
        entry_repo=mock_entry_repo,
        id_generator=mock_id_generator,
    )


@pytest.mark.asyncio
class TestBackfillBillIds:
    async def test_assigns_ids_in_creation_order(
        self, backfill_use_case, mock_entry_repo, mock_id_generator, mock_uow
    ):
        """
        Given: Two legacy groups (one with a malformed bill_id member), ledger max BILL000007
        When: Backfill runs
        Then: The earlier group gets BILL000008, the later BILL000009
        """
        # Act
        result = await backfill_use_case.execute()

        # Assert
        assert result.is_ok()
        assert result.value.groups_updated == 2
        assert result.value.entries_updated == 3
        assert result.value.first_bill_id == "BILL000008"
        assert result.value.last_bill_id == "BILL000009"

        mock_id_generator.reserve_bill_numbers.assert_awaited_once_with(2)
        calls = [call.args for call in mock_entry_repo.assign_bill_id.await_args_list]
        assert calls == [([1, 2], "BILL000008"), ([3], "BILL000009")]
        mock_uow.commit.assert_awaited_once()

    async def test_nothing_to_backfill(
        self, backfill_use_case, mock_entry_repo, mock_id_generator, mock_uow
    ):
        mock_entry_repo.get_legacy_entries = AsyncMock(return_value=[])

        result = await backfill_use_case.execute()

        assert result.is_ok()
        assert result.value.groups_updated == 0
        assert result.value.entries_updated == 0
        mock_id_generator.reserve_bill_numbers.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_overflow_keeps_assigned_groups(
        self, backfill_use_case, mock_id_generator, mock_entry_repo, mock_uow
    ):
        mock_id_generator.reserve_bill_numbers = AsyncMock(return_value=999999)

        result = await backfill_use_case.execute()

        assert result.is_err()
        assert result.error.code == "SERIES_EXHAUSTED"
        assert result.error.details["groups_updated"] == 1
        assert result.error.details["entries_updated"] == 2
        mock_entry_repo.assign_bill_id.assert_awaited_once_with([1, 2], "BILL999999")
        mock_uow.commit.assert_awaited_once()

    async def test_series_already_full(self, backfill_use_case, mock_id_generator, mock_uow):
        mock_id_generator.reserve_bill_numbers = AsyncMock(
            side_effect=SeriesExhausted("bill", 999999)
        )

        result = await backfill_use_case.execute()

        assert result.error.code == "SERIES_EXHAUSTED"
        assert result.error.details == {"groups_updated": 0, "entries_updated": 0}
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_called()

    async def test_storage_error_rolls_back(self, backfill_use_case, mock_entry_repo, mock_uow):
        mock_entry_repo.assign_bill_id = AsyncMock(side_effect=Exception("Database error"))

        result = await backfill_use_case.execute()

        assert result.error.code == "BACKFILL_FAILED"
        mock_uow.rollback.assert_awaited_once()
