"""Inventory Repository Interface

Defines the contract for inventory record persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from src.domain.inventory_record import InventoryRecord


class InventoryRepository(ABC):
    """
    Repository interface for InventoryRecord persistence

    decrement is a single conditional UPDATE, so the available quantity
    can never be driven negative by concurrent decrements.
    """

    @abstractmethod
    async def get_by_item_id(self, item_id: str) -> Optional[InventoryRecord]:
        """
        Retrieve an inventory record by item ID (archived included)

        Args:
            item_id: Item identifier

        Returns:
            InventoryRecord if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, record: InventoryRecord) -> InventoryRecord:
        pass

    @abstractmethod
    async def decrement(self, item_id: str, quantity: int) -> bool:
        """
        Atomically reduce available_quantity by quantity

        Args:
            item_id: Item identifier
            quantity: Amount to remove (> 0)

        Returns:
            True if applied; False if the record is missing, archived or short
        """
        pass

    @abstractmethod
    async def archive_created_before(self, cutoff: datetime) -> int:
        """Archive records created before cutoff; returns the number archived"""
        pass
