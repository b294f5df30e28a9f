"""Unit tests for SequentialIdGenerator

Tests cover:
- Next bill and order IDs from the stored maximum
- Yearly restart of the order series
- Collision retry and bounded attempts
- Series exhaustion
- Sequence counter (atomic mode)
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.id_generator import SequentialIdGenerator
from src.domain.errors import IdAllocationFailed, SeriesExhausted
from src.domain.sequence_counter import SequenceCounter


@pytest.fixture
def mock_order_repo():
    repo = MagicMock()
    repo.get_latest_order_id = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_entry_repo():
    repo = MagicMock()
    repo.get_max_bill_id = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_counter_repo():
    repo = MagicMock()
    repo.get_by_name = AsyncMock(return_value=None)
    repo.create = AsyncMock(side_effect=lambda counter: counter)
    repo.update = AsyncMock(side_effect=lambda counter: counter)
    return repo


@pytest.fixture
def mock_clock():
    clock = MagicMock()
    clock.year.return_value = 2025
    return clock


@pytest.fixture
def generator(mock_order_repo, mock_entry_repo, mock_clock):
    """Generator without sequence counters"""
    return SequentialIdGenerator(
        order_repo=mock_order_repo,
        entry_repo=mock_entry_repo,
        clock=mock_clock,
        max_attempts=3,
    )


@pytest.fixture
def counting_generator(mock_order_repo, mock_entry_repo, mock_counter_repo, mock_clock):
    return SequentialIdGenerator(
        order_repo=mock_order_repo,
        entry_repo=mock_entry_repo,
        counter_repo=mock_counter_repo,
        clock=mock_clock,
    )


@pytest.mark.asyncio
class TestNextBillId:
    async def test_empty_ledger_starts_at_one(self, generator):
        assert await generator.next("bill") == "BILL000001"

    async def test_continues_after_max(self, generator, mock_entry_repo):
        mock_entry_repo.get_max_bill_id = AsyncMock(return_value="BILL000041")

        assert await generator.next("bill") == "BILL000042"

    async def test_max_exhausts_series(self, generator, mock_entry_repo):
        mock_entry_repo.get_max_bill_id = AsyncMock(return_value="BILL999999")

        with pytest.raises(SeriesExhausted):
            await generator.next("bill")

    async def test_unknown_series(self, generator):
        with pytest.raises(ValueError):
            await generator.next("invoice")


@pytest.mark.asyncio
class TestNextOrderId:
    async def test_first_order_of_year(self, generator, mock_order_repo, mock_clock):
        mock_clock.year.return_value = 2026

        assert await generator.next("order") == "ORD-2026-001"
        mock_order_repo.get_latest_order_id.assert_called_once_with(2026)

    async def test_continues_within_year(self, generator, mock_order_repo):
        mock_order_repo.get_latest_order_id = AsyncMock(return_value="ORD-2025-037")

        assert await generator.next("order") == "ORD-2025-038"

    async def test_year_capacity(self, generator, mock_order_repo):
        mock_order_repo.get_latest_order_id = AsyncMock(return_value="ORD-2025-999")

        with pytest.raises(SeriesExhausted):
            await generator.next("order")


@pytest.mark.asyncio
class TestAllocate:
    async def test_returns_first_free_candidate(self, generator):
        is_taken = AsyncMock(return_value=False)

        assert await generator.allocate("bill", is_taken) == "BILL000001"
        is_taken.assert_awaited_once_with("BILL000001")

    async def test_retries_above_rejected_candidate(self, generator, mock_entry_repo):
        """
        Given: The scanned maximum has not moved but BILL000006 is taken
        When: allocate is called
        Then: The retry skips past the rejected candidate
        """
        mock_entry_repo.get_max_bill_id = AsyncMock(return_value="BILL000005")
        is_taken = AsyncMock(side_effect=[True, False])

        assert await generator.allocate("bill", is_taken) == "BILL000007"

    async def test_gives_up_after_max_attempts(self, generator):
        is_taken = AsyncMock(return_value=True)

        with pytest.raises(IdAllocationFailed) as exc_info:
            await generator.allocate("bill", is_taken)

        assert exc_info.value.attempts == 3
        assert is_taken.await_count == 3
        assert exc_info.value.last_candidate == "BILL000003"


@pytest.mark.asyncio
class TestSequenceCounter:
    async def test_counter_ahead_of_ledger_wins(
        self, counting_generator, mock_entry_repo, mock_counter_repo
    ):
        counter = SequenceCounter(name="bill", last_value=10)
        mock_entry_repo.get_max_bill_id = AsyncMock(return_value="BILL000005")
        mock_counter_repo.get_by_name = AsyncMock(return_value=counter)

        assert await counting_generator.next("bill") == "BILL000011"
        assert counter.last_value == 11
        mock_counter_repo.get_by_name.assert_called_once_with("bill", for_update=True)
        mock_counter_repo.update.assert_awaited_once_with(counter)

    async def test_ledger_ahead_of_counter_wins(
        self, counting_generator, mock_entry_repo, mock_counter_repo
    ):
        counter = SequenceCounter(name="bill", last_value=3)
        mock_entry_repo.get_max_bill_id = AsyncMock(return_value="BILL000005")
        mock_counter_repo.get_by_name = AsyncMock(return_value=counter)

        assert await counting_generator.next("bill") == "BILL000006"
        assert counter.last_value == 6

    async def test_missing_counter_is_created(self, counting_generator, mock_counter_repo):
        assert await counting_generator.next("order") == "ORD-2025-001"

        created = mock_counter_repo.create.call_args.args[0]
        assert created.name == "order:2025"
        assert created.last_value == 1

    async def test_reserve_bill_numbers_moves_counter_past_block(
        self, counting_generator, mock_entry_repo, mock_counter_repo
    ):
        counter = SequenceCounter(name="bill", last_value=10)
        mock_entry_repo.get_max_bill_id = AsyncMock(return_value="BILL000005")
        mock_counter_repo.get_by_name = AsyncMock(return_value=counter)

        first = await counting_generator.reserve_bill_numbers(3)

        assert first == 11
        assert counter.last_value == 13

    async def test_reserve_without_counter(self, generator, mock_entry_repo):
        mock_entry_repo.get_max_bill_id = AsyncMock(return_value="BILL000005")

        assert await generator.reserve_bill_numbers(4) == 6

    async def test_reserve_when_series_full(self, generator, mock_entry_repo):
        mock_entry_repo.get_max_bill_id = AsyncMock(return_value="BILL999999")

        with pytest.raises(SeriesExhausted):
            await generator.reserve_bill_numbers(1)
