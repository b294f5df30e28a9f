"""Get Order Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository
from src.domain.errors import ErrorCode
from .dtos import OrderResponseDTO, build_order_response


class GetOrder:
    """
    Get Order Use Case

    Read-only; returns the order with its items, archived orders included.
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(self, order_id: str) -> Result[OrderResponseDTO]:
        """
        Args:
            order_id: Business order ID

        Errors:
            ORDER_NOT_FOUND: No order with this ID
        """
        order = await self.order_repo.get_by_order_id(order_id)

        if not order:
            return Return.err(
                Error(
                    code=ErrorCode.ORDER_NOT_FOUND,
                    message=f"Order {order_id} not found",
                )
            )

        items = await self.order_repo.get_items(order.id)
        return Return.ok(build_order_response(order, items))
