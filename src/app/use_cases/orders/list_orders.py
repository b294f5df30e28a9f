"""List Orders Use Case

Filtered, paginated order listing with items.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository
from src.app.services.clock import BusinessClock
from .dtos import ListOrdersQueryDTO, ListOrdersResponseDTO, build_order_response

logger = logging.getLogger(__name__)


class ListOrders:
    """
    List Orders Use Case

    Read-only. Orders are ordered newest first and paginated in the
    database; archived orders are hidden unless include_archived is set.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Optional[BusinessClock] = None,
        default_page_size: int = 10,
        max_page_size: int = 100,
    ):
        self.order_repo = order_repo
        self.clock = clock or BusinessClock()
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def execute(self, query: ListOrdersQueryDTO) -> Result[ListOrdersResponseDTO]:
        """
        Execute order listing

        Args:
            query: Filters and pagination

        Returns:
            Result[ListOrdersResponseDTO]: One page of orders or error
        """
        try:
            # Step 1: Resolve time range into a created_at lower bound
            created_from = query.created_from
            range_start = self.clock.range_start(query.time_range)
            if range_start is not None and (created_from is None or range_start > created_from):
                created_from = range_start

            filters = dict(
                order_id=query.order_id,
                item_id=query.item_id,
                item_name=query.item_name,
                client_name=query.client_name,
                status=query.status,
                created_from=created_from,
                created_to=query.created_to,
                include_archived=query.include_archived,
            )

            # Step 2: Count and fetch one page
            page_size = min(query.page_size or self.default_page_size, self.max_page_size)
            total = await self.order_repo.count(**filters)
            orders = await self.order_repo.find(
                **filters, offset=(query.page - 1) * page_size, limit=page_size
            )

            # Step 3: Attach items
            items_by_order = await self.order_repo.get_items_for_orders([order.id for order in orders])

            return Return.ok(
                ListOrdersResponseDTO(
                    orders=[build_order_response(order, items_by_order.get(order.id, [])) for order in orders],
                    total=total,
                    page=query.page,
                    page_size=page_size,
                    total_pages=(total + page_size - 1) // page_size,
                )
            )

        except Exception as e:
            logger.error(f"Order listing failed: {e}")
            return Return.err(
                Error(
                    code="LIST_ORDERS_FAILED",
                    message="Failed to list orders",
                    reason=str(e),
                )
            )
