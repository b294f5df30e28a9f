"""DeleteOrder Use Case

Administrative hard delete. Billing entries of the order are kept; they
reference the order by value, not by foreign key.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.order_repository import OrderRepository
from src.domain.errors import ErrorCode
from .dtos import DeleteOrderResponseDTO

logger = logging.getLogger(__name__)


class DeleteOrder:
    def __init__(self, uow: UnitOfWork, order_repo: OrderRepository):
        self.uow = uow
        self.order_repo = order_repo

    async def execute(self, order_id: str) -> Result[DeleteOrderResponseDTO]:
        try:
            order = await self.order_repo.get_by_order_id(order_id, for_update=True)

            if not order:
                return Return.err(
                    Error(
                        code=ErrorCode.ORDER_NOT_FOUND,
                        message=f"Order {order_id} not found",
                    )
                )

            items = await self.order_repo.get_items(order.id)
            await self.order_repo.delete(order)
            await self.uow.commit()

            logger.info(f"Deleted order {order_id} with {len(items)} item(s)")
            return Return.ok(DeleteOrderResponseDTO(order_id=order_id, items_deleted=len(items)))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Order deletion failed for {order_id}: {e}")
            return Return.err(
                Error(
                    code="DELETE_ORDER_FAILED",
                    message="Failed to delete order",
                    reason=str(e),
                )
            )
