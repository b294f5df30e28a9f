"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from src.app.services.clock import TIME_RANGES
from src.app.use_cases.item_failures import ItemFailureDTO
from src.domain.base import as_utc


class BillItemDTO(BaseModel):
    """One item to bill against an order"""

    item_id: str = Field(
        ...,
        min_length=1,
        description="Item identifier (must be on the order)"
    )

    quantity: int = Field(
        ...,
        gt=0,
        description="Quantity to bill (must be > 0)"
    )

    unit_price: Decimal = Field(
        ...,
        ge=0,
        description="Price per unit (must be >= 0)"
    )


class BillOrderCommandDTO(BaseModel):
    """
    Command DTO for billing items of an order

    Used as input to BillOrder use case. All items share one bill ID.
    """

    order_id: str = Field(
        ...,
        min_length=1,
        description="Business order ID (e.g., ORD-2025-001)"
    )

    items: List[BillItemDTO] = Field(
        ...,
        min_length=1,
        description="Items to bill, processed in request order"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "order_id": "ORD-2025-001",
                "items": [
                    {"item_id": "A", "quantity": 4, "unit_price": "100.00"}
                ],
            }
        }
    }


class BillingEntryDTO(BaseModel):
    """Ledger entry representation"""

    id: int
    bill_id: Optional[str]
    order_id: int
    order_business_id: str
    item_id: str
    item_name: str
    client_name: str
    quantity: int
    unit_price: Decimal
    total_amount: Decimal
    date: str
    time: str
    created_at: datetime


class BillOrderResponseDTO(BaseModel):
    """
    Response DTO for a billing call

    Partial success: applied entries and rejected items are both reported.
    """

    bill_id: str = Field(..., description="Bill ID shared by all applied entries")
    order_id: str = Field(..., description="Business order ID")
    order_status: str = Field(..., description="Order status after billing")
    total_amount: Decimal = Field(..., description="Sum of applied entry totals")
    applied_entries: List[BillingEntryDTO] = Field(default_factory=list)
    failures: List[ItemFailureDTO] = Field(default_factory=list)


class ListBillsQueryDTO(BaseModel):
    """
    Query DTO for the bill listing

    Text filters are case-insensitive substring matches. time_range and
    created_from/created_to combine (the narrower lower bound wins).
    """

    item_id: Optional[str] = None
    item_name: Optional[str] = None
    client_name: Optional[str] = None
    order_business_id: Optional[str] = None

    time_range: str = Field(
        default="all",
        description="all, today, 7d, 1m or 1y"
    )

    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None

    page: int = Field(default=1, ge=1)

    page_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Bills per page (defaults to configuration, capped at MAX_PAGE_SIZE)"
    )

    @field_validator("time_range")
    @classmethod
    def validate_time_range(cls, value: str) -> str:
        if value not in TIME_RANGES:
            raise ValueError(f"time_range must be one of {', '.join(TIME_RANGES)}")
        return value

    @field_validator("created_from", "created_to")
    @classmethod
    def normalize_bounds(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None


class BillDTO(BaseModel):
    """
    A bill reconstructed from ledger entries

    is_legacy marks bills whose ID was synthesized for this listing only.
    """

    bill_id: str
    order_id: int
    order_business_id: str
    client_name: str
    date: str
    time: str
    total_amount: Decimal
    created_at: datetime = Field(..., description="Most recent member created_at")
    is_legacy: bool = False
    items: List[BillingEntryDTO]


class ListBillsResponseDTO(BaseModel):
    bills: List[BillDTO]
    total: int = Field(..., description="Number of bills matching the filter")
    page: int
    page_size: int
    total_pages: int


class BackfillResultDTO(BaseModel):
    """Outcome of a legacy bill ID backfill run"""

    groups_updated: int = Field(..., ge=0)
    entries_updated: int = Field(..., ge=0)
    first_bill_id: Optional[str] = None
    last_bill_id: Optional[str] = None
    message: str


class BillingFilterOptionsDTO(BaseModel):
    """Distinct filter values over non-archived ledger entries"""

    item_ids: List[str]
    item_names: List[str]
    client_names: List[str]
    order_business_ids: List[str]
