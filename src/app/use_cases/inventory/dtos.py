"""Data Transfer Objects for Inventory Use Cases"""

from typing import List
from pydantic import BaseModel, Field
from src.app.use_cases.item_failures import ItemFailureDTO


class StockDecreaseItemDTO(BaseModel):
    item_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0, description="Quantity to remove from stock (must be > 0)")


class DecreaseInventoryCommandDTO(BaseModel):
    """
    Command DTO for a stock adjustment outside billing

    Used as input to DecreaseInventory use case.
    """

    items: List[StockDecreaseItemDTO] = Field(..., min_length=1)
    reason: str = Field(default="adjustment", description="Free-text reason, logged only")


class StockAdjustmentDTO(BaseModel):
    item_id: str
    item_name: str
    quantity: int
    available_quantity: int = Field(..., description="Available quantity after the decrement")


class DecreaseInventoryResponseDTO(BaseModel):
    adjusted: List[StockAdjustmentDTO] = Field(default_factory=list)
    failures: List[ItemFailureDTO] = Field(default_factory=list)
