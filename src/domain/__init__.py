from .base import BaseModel, as_utc, utc_now
from .order import Order, OrderItem, OrderStatus, derive_order_status
from .inventory_record import InventoryRecord
from .billing_entry import BillingEntry
from .sequence_counter import SequenceCounter

__all__ = [
    "BaseModel",
    "as_utc",
    "utc_now",
    "Order",
    "OrderItem",
    "OrderStatus",
    "derive_order_status",
    "InventoryRecord",
    "BillingEntry",
    "SequenceCounter",
]
