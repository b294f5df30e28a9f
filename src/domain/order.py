"""Order Domain Entities

An Order holds one or more OrderItems, each tracking ordered vs. billed
quantity. The order status is derived from its items and never set directly.
"""

from datetime import datetime
from enum import Enum
from typing import Iterable, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from src.domain.base import BaseModel, IdType, utc_now


class OrderStatus(str, Enum):
    """Order fulfillment status"""
    UNCOMPLETED = "uncompleted"
    PARTIALLY_COMPLETED = "partially_completed"
    COMPLETED = "completed"


class Order(BaseModel, table=True):
    """
    Order - Customer order placed against inventory

    Domain Rules:
    - order_id is the business identifier (ORD-YYYY-NNN), unique
    - An order has at least one item
    - status is recomputed from items after every mutation
    - Only the admin delete removes an order; billing entries survive it
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index('ix_orders_client_name', 'client_name'),
        Index('ix_orders_status', 'status'),
        Index('ix_orders_created_at', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique order identifier (auto-increment)"
    )

    order_id: str = Field(
        sa_column=Column(String(20), nullable=False, unique=True),
        description="Business order ID (e.g., ORD-2025-001)"
    )

    client_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Client the order was placed for"
    )

    status: OrderStatus = Field(
        default=OrderStatus.UNCOMPLETED,
        description="Derived fulfillment status"
    )

    date: str = Field(
        sa_column=Column(String(10), nullable=False),
        description="Business date at creation (dd/mm/yyyy)"
    )

    time: str = Field(
        sa_column=Column(String(8), nullable=False),
        description="Business time at creation (hh:mm AM/PM)"
    )

    archived: bool = Field(
        default=False,
        description="Archived orders are hidden from billing"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="Order creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        description="Last update timestamp"
    )


class OrderItem(BaseModel, table=True):
    """
    Order Item - One line of an order

    Domain Rules:
    - Owned by exactly one order (no independent identity)
    - item_id is unique within its order
    - 0 <= billed_quantity <= ordered_quantity
    """

    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint('ordered_quantity >= 0', name='ordered_quantity_non_negative'),
        CheckConstraint('billed_quantity >= 0', name='billed_quantity_non_negative'),
        CheckConstraint('billed_quantity <= ordered_quantity', name='billed_not_above_ordered'),
        Index('ix_order_items_order_pk', 'order_pk'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    order_pk: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Order"
    )

    item_id: str = Field(
        sa_column=Column(String(100), nullable=False),
    )

    item_name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    ordered_quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
    )

    billed_quantity: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
    )

    position: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Line position within the order"
    )

    def remaining_quantity(self) -> int:
        return self.ordered_quantity - self.billed_quantity


def derive_order_status(items: Iterable[OrderItem]) -> OrderStatus:
    """
    Status is a pure function of all items:
    - completed: every item billed >= ordered
    - partially_completed: not completed, some item billed > 0
    - uncompleted: otherwise
    """
    items = list(items)
    if all(item.billed_quantity >= item.ordered_quantity for item in items):
        return OrderStatus.COMPLETED
    if any(item.billed_quantity > 0 for item in items):
        return OrderStatus.PARTIALLY_COMPLETED
    return OrderStatus.UNCOMPLETED
