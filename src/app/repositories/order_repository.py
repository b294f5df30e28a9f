"""Order Repository Interface

Defines the contract for order and order item persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional
from src.domain.order import Order, OrderItem, OrderStatus


class OrderRepository(ABC):
    """
    Repository interface for Order persistence

    Items are stored in their own table and loaded alongside the order.
    get_by_order_id supports SELECT FOR UPDATE so concurrent billing calls
    on the same order serialize.
    """

    @abstractmethod
    async def get_by_order_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """
        Retrieve order by business order ID

        Args:
            order_id: Business order ID (e.g., ORD-2025-001)
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_items(self, order_pk: int) -> List[OrderItem]:
        """
        Retrieve the items of an order in line position order

        Args:
            order_pk: Order.id

        Returns:
            List of OrderItem
        """
        pass

    @abstractmethod
    async def get_latest_order_id(self, year: int) -> Optional[str]:
        """
        Greatest well-formed business order ID of the given year

        Args:
            year: Calendar year of the series

        Returns:
            Order ID string, or None when no order exists for the year
        """
        pass

    @abstractmethod
    async def exists_order_id(self, order_id: str) -> bool:
        pass

    @abstractmethod
    async def create(self, order: Order, items: List[OrderItem]) -> Order:
        """
        Create an order together with its items

        Raises:
            IntegrityError: If order_id already exists
        """
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def save_items(self, items: List[OrderItem]) -> None:
        pass

    @abstractmethod
    async def delete_items(self, items: List[OrderItem]) -> None:
        pass

    @abstractmethod
    async def delete(self, order: Order) -> None:
        """Hard delete an order and its items (ledger entries are kept)"""
        pass

    @abstractmethod
    async def find(
        self,
        order_id: Optional[str] = None,
        item_id: Optional[str] = None,
        item_name: Optional[str] = None,
        client_name: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        include_archived: bool = False,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """
        Find orders matching the filters, newest first

        Text filters are case-insensitive substring matches. item_id and
        item_name match when any item of the order matches.

        Returns:
            Orders ordered by created_at DESC, id DESC
        """
        pass

    @abstractmethod
    async def count(
        self,
        order_id: Optional[str] = None,
        item_id: Optional[str] = None,
        item_name: Optional[str] = None,
        client_name: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        include_archived: bool = False,
    ) -> int:
        """Number of orders find() would return without offset/limit"""
        pass

    @abstractmethod
    async def get_items_for_orders(self, order_pks: List[int]) -> Dict[int, List[OrderItem]]:
        """Items of several orders, keyed by Order.id, each list in line position order"""
        pass

    @abstractmethod
    async def get_distinct_values(self, field_name: str) -> List[str]:
        """
        Sorted distinct non-empty values over non-archived orders

        Args:
            field_name: One of client_name, item_id, item_name
        """
        pass

    @abstractmethod
    async def archive_created_before(self, cutoff: datetime) -> int:
        """
        Mark every non-archived order created before cutoff as archived

        Returns:
            Number of orders archived
        """
        pass
