"""Get Order Filter Options Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository
from .dtos import OrderFilterOptionsDTO


class GetOrderFilterOptions:
    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(self) -> Result[OrderFilterOptionsDTO]:
        try:
            return Return.ok(
                OrderFilterOptionsDTO(
                    item_ids=await self.order_repo.get_distinct_values("item_id"),
                    item_names=await self.order_repo.get_distinct_values("item_name"),
                    client_names=await self.order_repo.get_distinct_values("client_name"),
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_FILTER_OPTIONS_FAILED",
                    message="Failed to load order filter options",
                    reason=str(e),
                )
            )
