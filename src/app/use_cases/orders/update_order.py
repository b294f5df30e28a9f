"""UpdateOrder Use Case

Explicit edit of an order's client and item list.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.order_repository import OrderRepository
from src.domain.errors import ErrorCode
from src.domain.order import OrderItem, derive_order_status
from .dtos import OrderResponseDTO, UpdateOrderCommandDTO, build_order_response

logger = logging.getLogger(__name__)


class UpdateOrder:
    """
    Use Case: Edit an order

    Business Rules:
    1. Items keep their billed quantity, matched by item_id
    2. ordered_quantity may not drop below the billed quantity
    3. Items that were already billed may not be removed
    4. Status is recomputed, never taken from the caller
    """

    def __init__(self, uow: UnitOfWork, order_repo: OrderRepository):
        self.uow = uow
        self.order_repo = order_repo

    async def execute(self, command: UpdateOrderCommandDTO) -> Result[OrderResponseDTO]:
        try:
            # Step 1: Get order with lock
            order = await self.order_repo.get_by_order_id(command.order_id, for_update=True)

            if not order:
                return Return.err(
                    Error(
                        code=ErrorCode.ORDER_NOT_FOUND,
                        message=f"Order {command.order_id} not found",
                    )
                )

            items = await self.order_repo.get_items(order.id)

            if command.client_name is not None:
                order.client_name = command.client_name

            # Step 2: Validate and merge the new item list
            if command.items is not None:
                existing = {item.item_id: item for item in items}
                requested_ids = {item.item_id for item in command.items}

                for item in items:
                    if item.item_id not in requested_ids and item.billed_quantity > 0:
                        return Return.err(
                            Error(
                                code=ErrorCode.VALIDATION_ERROR,
                                message=f"Item {item.item_id} has been billed and cannot be removed",
                                reason=f"billed_quantity={item.billed_quantity}",
                            )
                        )

                for requested in command.items:
                    current = existing.get(requested.item_id)
                    if current and requested.ordered_quantity < current.billed_quantity:
                        return Return.err(
                            Error(
                                code=ErrorCode.VALIDATION_ERROR,
                                message=(
                                    f"Ordered quantity of item {requested.item_id} cannot be "
                                    f"below its billed quantity"
                                ),
                                reason=(
                                    f"ordered_quantity={requested.ordered_quantity}, "
                                    f"billed_quantity={current.billed_quantity}"
                                ),
                            )
                        )

                removed = [item for item in items if item.item_id not in requested_ids]
                merged = []
                for position, requested in enumerate(command.items):
                    item = existing.get(requested.item_id) or OrderItem(
                        order_pk=order.id,
                        item_id=requested.item_id,
                        billed_quantity=0,
                    )
                    item.item_name = requested.item_name
                    item.ordered_quantity = requested.ordered_quantity
                    item.position = position
                    merged.append(item)

                await self.order_repo.delete_items(removed)
                await self.order_repo.save_items(merged)
                items = merged

            # Step 3: Recompute status and persist
            order.status = derive_order_status(items)
            order = await self.order_repo.update(order)

            await self.uow.commit()
            logger.info(f"Updated order {order.order_id}, status={order.status.value}")

            return Return.ok(build_order_response(order, items))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Order update failed for {command.order_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_ORDER_FAILED",
                    message="Failed to update order",
                    reason=str(e),
                )
            )
