from .order_repository import OrderRepository
from .inventory_repository import InventoryRepository
from .billing_entry_repository import BillingEntryRepository
from .sequence_counter_repository import SequenceCounterRepository

__all__ = [
    "OrderRepository",
    "InventoryRepository",
    "BillingEntryRepository",
    "SequenceCounterRepository",
]
