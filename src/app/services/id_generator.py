"""Sequential ID Generator

Produces the next identifier of the order and bill series.

The next number is recomputed from the store on every call (greatest
existing ID + 1). Reading the maximum and inserting later is not atomic, so:
- callers go through allocate(), which verifies the candidate is unused and
  retries with a higher floor, bounded by max_attempts
- with use_counters, the scanned maximum is combined with a SequenceCounter
  row read under SELECT FOR UPDATE, so concurrent allocators in separate
  transactions serialize on the lock instead of computing the same value
"""

import logging
import re
from typing import Awaitable, Callable, Optional
from src.app.repositories.billing_entry_repository import BillingEntryRepository
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.sequence_counter_repository import SequenceCounterRepository
from src.app.services.clock import BusinessClock
from src.domain.base import utc_now
from src.domain.errors import IdAllocationFailed, SeriesExhausted
from src.domain.sequence import (
    BILL_NUMBER_CAPACITY,
    BILL_SERIES,
    ORDER_NUMBER_CAPACITY,
    ORDER_SERIES,
    format_bill_id,
    format_order_id,
    parse_bill_number,
    parse_order_number,
)
from src.domain.sequence_counter import SequenceCounter

logger = logging.getLogger(__name__)

_TRAILING_NUMBER = re.compile(r"(\d+)$")


class SequentialIdGenerator:
    """
    Next-ID service for the order and bill series

    Series:
    - "order": ORD-YYYY-NNN, per calendar year of the business clock
    - "bill": BILLNNNNNN, global

    Errors:
    - SeriesExhausted: the next number exceeds the series capacity
    - IdAllocationFailed: allocate() ran out of attempts
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        entry_repo: BillingEntryRepository,
        counter_repo: Optional[SequenceCounterRepository] = None,
        clock: Optional[BusinessClock] = None,
        max_attempts: int = 10,
    ):
        self.order_repo = order_repo
        self.entry_repo = entry_repo
        self.counter_repo = counter_repo
        self.clock = clock or BusinessClock()
        self.max_attempts = max_attempts

    async def next(self, series: str, at_least: int = 1) -> str:
        """
        Compute the next identifier of a series

        Args:
            series: "order" or "bill"
            at_least: Lowest acceptable sequence number (used by retries)

        Returns:
            Identifier string
        """
        if series == BILL_SERIES:
            last = parse_bill_number(await self.entry_repo.get_max_bill_id()) or 0
            number = await self._reserve(BILL_SERIES, max(last + 1, at_least), BILL_NUMBER_CAPACITY)
            return format_bill_id(number)

        if series == ORDER_SERIES:
            year = self.clock.year()
            latest = await self.order_repo.get_latest_order_id(year)
            last = parse_order_number(latest, year) or 0
            number = await self._reserve(
                f"{ORDER_SERIES}:{year}", max(last + 1, at_least), ORDER_NUMBER_CAPACITY
            )
            return format_order_id(year, number)

        raise ValueError(f"Unknown ID series '{series}'")

    async def allocate(self, series: str, is_taken: Callable[[str], Awaitable[bool]]) -> str:
        """
        Next identifier that is verified not to exist yet

        Args:
            series: "order" or "bill"
            is_taken: Async predicate telling whether an identifier is already used

        Returns:
            Unused identifier

        Raises:
            IdAllocationFailed: Every attempt collided
            SeriesExhausted: Series capacity reached
        """
        at_least = 1
        candidate = None
        for attempt in range(1, self.max_attempts + 1):
            candidate = await self.next(series, at_least=at_least)
            if not await is_taken(candidate):
                return candidate
            logger.warning(
                f"ID collision on {candidate} (series={series}, attempt {attempt}/{self.max_attempts})"
            )
            at_least = int(_TRAILING_NUMBER.search(candidate).group(1)) + 1

        logger.error(f"ID allocation for series '{series}' failed after {self.max_attempts} attempts")
        raise IdAllocationFailed(series, self.max_attempts, candidate)

    async def last_bill_number(self) -> int:
        """Highest bill number in the ledger, 0 when there is none"""
        return parse_bill_number(await self.entry_repo.get_max_bill_id()) or 0

    async def reserve_bill_numbers(self, count: int) -> int:
        """
        Reserve a run of consecutive bill numbers

        Args:
            count: How many numbers are wanted

        Returns:
            First number of the run. The run may extend past capacity; callers
            stop at the first number that fails to format.
        """
        first = await self.last_bill_number() + 1
        if count <= 0:
            return first
        if first > BILL_NUMBER_CAPACITY:
            raise SeriesExhausted(BILL_SERIES, BILL_NUMBER_CAPACITY)
        if self.counter_repo is None:
            return first

        counter = await self.counter_repo.get_by_name(BILL_SERIES, for_update=True)
        if counter is not None and counter.last_value >= first:
            first = counter.last_value + 1
            if first > BILL_NUMBER_CAPACITY:
                raise SeriesExhausted(BILL_SERIES, BILL_NUMBER_CAPACITY)
        await self._store_counter(
            counter, BILL_SERIES, min(first + count - 1, BILL_NUMBER_CAPACITY)
        )
        return first

    async def _reserve(self, name: str, candidate: int, capacity: int) -> int:
        if candidate > capacity:
            raise SeriesExhausted(name, capacity)
        if self.counter_repo is None:
            return candidate

        counter = await self.counter_repo.get_by_name(name, for_update=True)
        if counter is not None and counter.last_value >= candidate:
            candidate = counter.last_value + 1
            if candidate > capacity:
                raise SeriesExhausted(name, capacity)
        await self._store_counter(counter, name, candidate)
        return candidate

    async def _store_counter(
        self, counter: Optional[SequenceCounter], name: str, value: int
    ) -> None:
        if counter is None:
            await self.counter_repo.create(SequenceCounter(name=name, last_value=value))
            return
        counter.last_value = value
        counter.updated_at = utc_now()
        await self.counter_repo.update(counter)
