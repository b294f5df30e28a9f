"""ArchiveData Use Case

Hides everything created so far from the working views: orders, ledger
entries and inventory records created before the run are flagged archived.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.clock import BusinessClock
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.billing_entry_repository import BillingEntryRepository
from src.app.repositories.inventory_repository import InventoryRepository
from .dtos import ArchiveResultDTO

logger = logging.getLogger(__name__)


class ArchiveData:
    """
    Use Case: Archive all data created before now

    Business Rules:
    1. Rows with created_at strictly before the cutoff and archived=False are
       set to archived=True; nothing is deleted
    2. Archived rows keep their IDs, so the order and bill ID series never
       reuse a number
    3. Archived orders cannot be billed; archived inventory cannot be
       decremented; archived entries drop out of the bill listing
    4. All three tables are archived in one transaction

    Flow:
    1. Take the cutoff from the clock
    2. Archive orders, billing entries and inventory
    3. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        entry_repo: BillingEntryRepository,
        inventory_repo: InventoryRepository,
        clock: Optional[BusinessClock] = None,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.entry_repo = entry_repo
        self.inventory_repo = inventory_repo
        self.clock = clock or BusinessClock()

    async def execute(self) -> Result[ArchiveResultDTO]:
        try:
            # Step 1: Cutoff
            cutoff = self.clock.now()

            # Step 2: Archive per table
            orders = await self.order_repo.archive_created_before(cutoff)
            billing_entries = await self.entry_repo.archive_created_before(cutoff)
            inventory = await self.inventory_repo.archive_created_before(cutoff)

            # Step 3: Commit transaction
            await self.uow.commit()

            total = orders + billing_entries + inventory
            logger.info(
                f"Archived {total} rows created before {cutoff.isoformat()} "
                f"(orders={orders}, billing_entries={billing_entries}, inventory={inventory})"
            )

            return Return.ok(
                ArchiveResultDTO(
                    orders=orders,
                    billing_entries=billing_entries,
                    inventory=inventory,
                    archived_count=total,
                    cutoff=cutoff,
                    message="Data archived successfully",
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Archive failed: {e}")
            return Return.err(
                Error(
                    code="ARCHIVE_FAILED",
                    message="Failed to archive data",
                    reason=str(e),
                )
            )
