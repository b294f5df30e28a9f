from .unit_of_work import UnitOfWork
from .clock import BusinessClock
from .id_generator import SequentialIdGenerator

__all__ = [
    "UnitOfWork",
    "BusinessClock",
    "SequentialIdGenerator",
]
