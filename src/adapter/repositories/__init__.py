from .order_repository import SqlAlchemyOrderRepository
from .inventory_repository import SqlAlchemyInventoryRepository
from .billing_entry_repository import SqlAlchemyBillingEntryRepository
from .sequence_counter_repository import SqlAlchemySequenceCounterRepository

__all__ = [
    "SqlAlchemyOrderRepository",
    "SqlAlchemyInventoryRepository",
    "SqlAlchemyBillingEntryRepository",
    "SqlAlchemySequenceCounterRepository",
]
