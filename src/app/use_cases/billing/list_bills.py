"""List Bills Use Case

Reconstructs bills from ledger entries and paginates them.
"""

import logging
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.billing_entry_repository import BillingEntryRepository
from src.app.services.clock import BusinessClock
from src.domain.bill_grouping import EntryGroup, group_entries, number_legacy_groups
from src.domain.errors import ErrorCode, SeriesExhausted
from src.domain.sequence import parse_bill_number
from .dtos import BillDTO, BillingEntryDTO, ListBillsQueryDTO, ListBillsResponseDTO

logger = logging.getLogger(__name__)


class ListBills:
    """
    List Bills Use Case

    Read-only. Entries sharing a canonical bill ID form one bill; legacy
    entries are grouped by (order, date, time) and get a synthetic bill ID
    continuing the series after the ledger-wide maximum. Synthetic IDs are
    unique within one call but not persisted, so they can change between
    calls until the legacy backfill runs.

    Bills are ordered by their most recent entry, newest first, and
    pagination counts bills, not entries.
    """

    def __init__(
        self,
        entry_repo: BillingEntryRepository,
        clock: Optional[BusinessClock] = None,
        default_page_size: int = 10,
        max_page_size: int = 100,
    ):
        self.entry_repo = entry_repo
        self.clock = clock or BusinessClock()
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def execute(self, query: ListBillsQueryDTO) -> Result[ListBillsResponseDTO]:
        """
        Execute bill listing

        Args:
            query: Filters and pagination

        Returns:
            Result[ListBillsResponseDTO]: One page of bills or error

        Errors:
            SERIES_EXHAUSTED: Legacy groups would need IDs past BILL999999
        """
        try:
            # Step 1: Resolve time range into a created_at lower bound
            created_from = query.created_from
            range_start = self.clock.range_start(query.time_range)
            if range_start is not None and (created_from is None or range_start > created_from):
                created_from = range_start

            # Step 2: Fetch matching entries, newest first
            entries = await self.entry_repo.find(
                item_id=query.item_id,
                item_name=query.item_name,
                client_name=query.client_name,
                order_business_id=query.order_business_id,
                created_from=created_from,
                created_to=query.created_to,
            )

            # Step 3: Group and number the legacy groups
            groups = group_entries(entries)
            last_number = parse_bill_number(await self.entry_repo.get_max_bill_id()) or 0
            synthetic_ids = {
                group.key: bill_id for group, bill_id in number_legacy_groups(groups, last_number)
            }

            bills = [
                self._to_bill_dto(group, synthetic_ids.get(group.key, group.bill_id))
                for group in groups
            ]
            bills.sort(key=lambda bill: bill.created_at, reverse=True)

            # Step 4: Paginate at bill granularity
            page_size = min(query.page_size or self.default_page_size, self.max_page_size)
            total = len(bills)
            total_pages = (total + page_size - 1) // page_size
            offset = (query.page - 1) * page_size

            return Return.ok(
                ListBillsResponseDTO(
                    bills=bills[offset:offset + page_size],
                    total=total,
                    page=query.page,
                    page_size=page_size,
                    total_pages=total_pages,
                )
            )

        except SeriesExhausted as e:
            logger.error(f"Bill listing failed: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.SERIES_EXHAUSTED,
                    message="Bill ID series is exhausted",
                    reason=str(e),
                )
            )
        except Exception as e:
            logger.error(f"Bill listing failed: {e}")
            return Return.err(
                Error(
                    code="LIST_BILLS_FAILED",
                    message="Failed to list bills",
                    reason=str(e),
                )
            )

    def _to_bill_dto(self, group: EntryGroup, bill_id: str) -> BillDTO:
        members = sorted(
            group.entries, key=lambda entry: (entry.created_at, entry.id or 0), reverse=True
        )
        head = members[0]
        return BillDTO(
            bill_id=bill_id,
            order_id=head.order_id,
            order_business_id=head.order_business_id,
            client_name=head.client_name,
            date=head.date,
            time=head.time,
            total_amount=sum((Decimal(entry.total_amount) for entry in members), Decimal("0")),
            created_at=head.created_at,
            is_legacy=group.is_legacy,
            items=[BillingEntryDTO.model_validate(entry, from_attributes=True) for entry in members],
        )
