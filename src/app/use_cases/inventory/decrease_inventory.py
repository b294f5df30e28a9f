"""DecreaseInventory Use Case

Removes stock for one or many items outside of billing.
"""

import logging
from typing import List
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.inventory_repository import InventoryRepository
from src.app.use_cases.item_failures import ItemFailureDTO, failure_error
from src.domain.errors import ErrorCode
from .dtos import DecreaseInventoryCommandDTO, DecreaseInventoryResponseDTO, StockAdjustmentDTO

logger = logging.getLogger(__name__)


class DecreaseInventory:
    """
    Use Case: Decrease stock

    Business Rules:
    1. Each item is decremented independently with one conditional update
       (available_quantity never goes negative)
    2. INVENTORY_NOT_FOUND: record missing or archived
    3. INSUFFICIENT_STOCK: available below the requested quantity
    4. The call succeeds when at least one item was decremented
    """

    def __init__(self, uow: UnitOfWork, inventory_repo: InventoryRepository):
        self.uow = uow
        self.inventory_repo = inventory_repo

    async def execute(
        self, command: DecreaseInventoryCommandDTO
    ) -> Result[DecreaseInventoryResponseDTO]:
        try:
            adjusted: List[StockAdjustmentDTO] = []
            failures: List[ItemFailureDTO] = []

            for requested in command.items:
                decremented = await self.inventory_repo.decrement(
                    requested.item_id, requested.quantity
                )
                # Re-read: the new level on success, the rejection cause otherwise
                record = await self.inventory_repo.get_by_item_id(requested.item_id)

                if decremented:
                    adjusted.append(
                        StockAdjustmentDTO(
                            item_id=requested.item_id,
                            item_name=record.item_name,
                            quantity=requested.quantity,
                            available_quantity=record.available_quantity,
                        )
                    )
                elif record is None or record.archived:
                    failures.append(
                        ItemFailureDTO(
                            item_id=requested.item_id,
                            code=ErrorCode.INVENTORY_NOT_FOUND,
                            message=f"Inventory item {requested.item_id} not found",
                        )
                    )
                else:
                    failures.append(
                        ItemFailureDTO(
                            item_id=requested.item_id,
                            code=ErrorCode.INSUFFICIENT_STOCK,
                            message=(
                                f"Insufficient stock for item {requested.item_id}. "
                                f"Required: {requested.quantity}, "
                                f"Available: {record.available_quantity}"
                            ),
                        )
                    )

            if not adjusted:
                await self.uow.rollback()
                logger.warning(f"Stock adjustment rejected for all {len(failures)} item(s)")
                return Return.err(failure_error(failures, "No inventory item could be decreased"))

            await self.uow.commit()
            logger.info(
                f"Stock decreased for {len(adjusted)} item(s) ({command.reason}), "
                f"{len(failures)} rejected"
            )
            return Return.ok(DecreaseInventoryResponseDTO(adjusted=adjusted, failures=failures))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Stock adjustment failed: {e}")
            return Return.err(
                Error(
                    code="DECREASE_INVENTORY_FAILED",
                    message="Failed to decrease inventory",
                    reason=str(e),
                )
            )
