"""Inventory Record Domain Entity

Available quantity per item. The quantity never goes negative; billing and
stock adjustments reduce it through an atomic conditional decrement.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Integer, String
from src.domain.base import BaseModel, IdType, utc_now


class InventoryRecord(BaseModel, table=True):
    """
    Inventory Record - Stock on hand for one item

    Domain Rules:
    - item_id is unique
    - available_quantity >= 0 at all times
    - Archived records cannot be decremented (treated as not found)
    """

    __tablename__ = "inventory_records"
    __table_args__ = (
        CheckConstraint('available_quantity >= 0', name='available_quantity_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique record identifier (auto-increment)"
    )

    item_id: str = Field(
        sa_column=Column(String(100), nullable=False, unique=True),
        description="Item identifier (unique)"
    )

    item_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Item display name"
    )

    available_quantity: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Quantity available for billing (must be >= 0)"
    )

    archived: bool = Field(
        default=False,
        description="Archived records are excluded from decrements"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="Record creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        description="Last quantity change timestamp"
    )
