"""Billing Entry Domain Entity

Immutable append-only ledger of billed items. One row per item per bill.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Integer, Numeric, String
from src.domain.base import BaseModel, IdType, utc_now


class BillingEntry(BaseModel, table=True):
    """
    Billing Entry - One item billed in one billing transaction

    Domain Rules:
    - Entries are immutable once written (append-only)
    - Entries billed together share one bill_id (BILL + 6 digits)
    - Legacy entries may lack a canonical bill_id; only the backfill fills it in
    - order_id references Order.id without a foreign key so the ledger
      outlives order deletion
    - total_amount = quantity * unit_price
    """

    __tablename__ = "billing_entries"
    __table_args__ = (
        CheckConstraint('quantity >= 0', name='entry_quantity_non_negative'),
        CheckConstraint('unit_price >= 0', name='entry_unit_price_non_negative'),
        Index('ix_billing_entries_bill_id', 'bill_id'),
        Index('ix_billing_entries_order_id', 'order_id'),
        Index('ix_billing_entries_order_business_id', 'order_business_id'),
        Index('ix_billing_entries_item_id', 'item_id'),
        Index('ix_billing_entries_client_name', 'client_name'),
        Index('ix_billing_entries_created_at', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique entry identifier (auto-increment)"
    )

    bill_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Shared bill identifier (absent or malformed on legacy rows)"
    )

    order_id: int = Field(
        sa_column=Column(IdType, nullable=False),
        description="Order.id at write time"
    )

    order_business_id: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="Business order ID copied at write time"
    )

    item_id: str = Field(
        sa_column=Column(String(100), nullable=False),
    )

    item_name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    client_name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Billed quantity"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Price per unit (precision: 18,2)"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="quantity * unit_price"
    )

    date: str = Field(
        sa_column=Column(String(10), nullable=False),
        description="Business date of billing (dd/mm/yyyy)"
    )

    time: str = Field(
        sa_column=Column(String(8), nullable=False),
        description="Business time of billing (hh:mm AM/PM)"
    )

    archived: bool = Field(
        default=False,
        description="Archived entries are hidden from bill listings"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="Entry timestamp (immutable)"
    )
