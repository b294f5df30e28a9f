"""BackfillBillIds Use Case

One-shot repair of legacy ledger entries: every group of entries without a
canonical bill ID gets one permanently, using the same grouping rule as the
bill listing.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.id_generator import SequentialIdGenerator
from src.app.repositories.billing_entry_repository import BillingEntryRepository
from src.domain.bill_grouping import group_entries, number_legacy_groups
from src.domain.errors import ErrorCode, SeriesExhausted
from .dtos import BackfillResultDTO

logger = logging.getLogger(__name__)


class BackfillBillIds:
    """
    Use Case: Assign canonical bill IDs to legacy entries

    Business Rules:
    1. Scope is every entry lacking a canonical bill ID, archived ones included
    2. Groups are numbered by earliest created_at, ascending, continuing the
       bill series (counter reservation included)
    3. Idempotent: a second run finds nothing and updates zero entries
    4. On series overflow the groups already assigned are kept (committed)
       and SERIES_EXHAUSTED is reported with the counts

    Flow:
    1. Load legacy entries and group them
    2. Reserve a run of bill numbers
    3. Assign IDs group by group
    4. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        entry_repo: BillingEntryRepository,
        id_generator: SequentialIdGenerator,
    ):
        self.uow = uow
        self.entry_repo = entry_repo
        self.id_generator = id_generator

    async def execute(self) -> Result[BackfillResultDTO]:
        try:
            # Step 1: Load and group legacy entries
            entries = await self.entry_repo.get_legacy_entries()
            groups = group_entries(entries)

            if not groups:
                logger.info("Bill ID backfill: no legacy entries found")
                return Return.ok(
                    BackfillResultDTO(
                        groups_updated=0,
                        entries_updated=0,
                        message="No legacy billing entries to backfill",
                    )
                )

            groups.sort(key=lambda group: group.earliest_created_at)

            # Step 2: Reserve bill numbers for every group
            try:
                first_number = await self.id_generator.reserve_bill_numbers(len(groups))
            except SeriesExhausted as e:
                await self.uow.rollback()
                logger.error(f"Bill ID backfill aborted: {e}")
                return Return.err(
                    Error(
                        code=ErrorCode.SERIES_EXHAUSTED,
                        message="Bill ID series is exhausted, no legacy group was updated",
                        reason=str(e),
                        details={"groups_updated": 0, "entries_updated": 0},
                    )
                )

            # Step 3: Assign IDs in order
            groups_updated = 0
            entries_updated = 0
            first_bill_id = last_bill_id = None
            try:
                for group, bill_id in number_legacy_groups(groups, first_number - 1):
                    entries_updated += await self.entry_repo.assign_bill_id(
                        [entry.id for entry in group.entries], bill_id
                    )
                    groups_updated += 1
                    first_bill_id = first_bill_id or bill_id
                    last_bill_id = bill_id
            except SeriesExhausted as e:
                # Keep what was assigned before the overflow
                await self.uow.commit()
                logger.error(
                    f"Bill ID backfill stopped after {groups_updated} of {len(groups)} groups: {e}"
                )
                return Return.err(
                    Error(
                        code=ErrorCode.SERIES_EXHAUSTED,
                        message=(
                            f"Bill ID series exhausted after {groups_updated} of "
                            f"{len(groups)} legacy groups"
                        ),
                        reason=str(e),
                        details={
                            "groups_updated": groups_updated,
                            "entries_updated": entries_updated,
                            "last_bill_id": last_bill_id,
                        },
                    )
                )

            # Step 4: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Bill ID backfill assigned {first_bill_id}..{last_bill_id} to "
                f"{groups_updated} groups ({entries_updated} entries)"
            )

            return Return.ok(
                BackfillResultDTO(
                    groups_updated=groups_updated,
                    entries_updated=entries_updated,
                    first_bill_id=first_bill_id,
                    last_bill_id=last_bill_id,
                    message=f"Assigned bill IDs to {groups_updated} legacy groups",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Bill ID backfill failed: {e}")
            return Return.err(
                Error(
                    code="BACKFILL_FAILED",
                    message="Failed to backfill bill IDs",
                    reason=str(e),
                )
            )
