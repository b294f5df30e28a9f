"""Inventory use cases"""
from .decrease_inventory import DecreaseInventory
from .dtos import (
    StockDecreaseItemDTO,
    DecreaseInventoryCommandDTO,
    StockAdjustmentDTO,
    DecreaseInventoryResponseDTO,
)

__all__ = [
    "DecreaseInventory",
    "StockDecreaseItemDTO",
    "DecreaseInventoryCommandDTO",
    "StockAdjustmentDTO",
    "DecreaseInventoryResponseDTO",
]
