"""Data Transfer Objects for Order Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from src.app.services.clock import TIME_RANGES
from src.domain.base import as_utc
from src.domain.order import Order, OrderItem, OrderStatus


class OrderItemInputDTO(BaseModel):
    item_id: str = Field(..., min_length=1)
    item_name: str = Field(..., min_length=1)
    ordered_quantity: int = Field(..., ge=0)


def _check_unique_item_ids(items: Optional[List[OrderItemInputDTO]]) -> None:
    if not items:
        return
    seen = set()
    for item in items:
        if item.item_id in seen:
            raise ValueError(f"Duplicate item_id '{item.item_id}' in order")
        seen.add(item.item_id)


class CreateOrderCommandDTO(BaseModel):
    """
    Command DTO for creating an order

    Used as input to CreateOrder use case. The order ID, status and
    date/time are assigned by the system.
    """

    client_name: str = Field(..., min_length=1)
    items: List[OrderItemInputDTO] = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "client_name": "Acme Traders",
                "items": [{"item_id": "A", "item_name": "Widget", "ordered_quantity": 10}],
            }
        }
    }

    @model_validator(mode="after")
    def validate_unique_items(self):
        _check_unique_item_ids(self.items)
        return self


class UpdateOrderCommandDTO(BaseModel):
    """
    Command DTO for editing an order

    Omitted fields stay unchanged. When items is given it replaces the
    whole item list; billed quantities are carried over by item_id.
    """

    order_id: str = Field(..., min_length=1)
    client_name: Optional[str] = Field(default=None, min_length=1)
    items: Optional[List[OrderItemInputDTO]] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def validate_unique_items(self):
        _check_unique_item_ids(self.items)
        return self


class OrderItemDTO(BaseModel):
    item_id: str
    item_name: str
    ordered_quantity: int
    billed_quantity: int
    remaining_quantity: int


class OrderResponseDTO(BaseModel):
    id: int
    order_id: str
    client_name: str
    status: str
    date: str
    time: str
    archived: bool
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemDTO]


class DeleteOrderResponseDTO(BaseModel):
    order_id: str
    items_deleted: int


class ListOrdersQueryDTO(BaseModel):
    """
    Query DTO for the order listing

    Text filters are case-insensitive substring matches; item_id and
    item_name match an order when any of its items matches.
    """

    order_id: Optional[str] = None
    item_id: Optional[str] = None
    item_name: Optional[str] = None
    client_name: Optional[str] = None
    status: Optional[OrderStatus] = None

    time_range: str = Field(
        default="all",
        description="all, today, 7d, 1m or 1y"
    )

    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    include_archived: bool = False

    page: int = Field(default=1, ge=1)

    page_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Orders per page (defaults to configuration, capped at MAX_PAGE_SIZE)"
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


class ListOrdersResponseDTO(BaseModel):
    orders: List[OrderResponseDTO]
    total: int = Field(..., description="Number of orders matching the filter")
    page: int
    page_size: int
    total_pages: int


class OrderFilterOptionsDTO(BaseModel):
    """Distinct filter values over non-archived orders"""

    item_ids: List[str]
    item_names: List[str]
    client_names: List[str]


def build_order_response(order: Order, items: List[OrderItem]) -> OrderResponseDTO:
    return OrderResponseDTO(
        id=order.id,
        order_id=order.order_id,
        client_name=order.client_name,
        status=order.status.value,
        date=order.date,
        time=order.time,
        archived=order.archived,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[
            OrderItemDTO(
                item_id=item.item_id,
                item_name=item.item_name,
                ordered_quantity=item.ordered_quantity,
                billed_quantity=item.billed_quantity,
                remaining_quantity=item.remaining_quantity(),
            )
            for item in items
        ],
    )
