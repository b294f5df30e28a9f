"""Sequence Counter Repository Interface

Defines the contract for ID series counter persistence.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.sequence_counter import SequenceCounter


class SequenceCounterRepository(ABC):
    """
    Repository interface for SequenceCounter persistence

    get_by_name(for_update=True) takes a row lock that is held until the
    surrounding unit of work commits or rolls back.
    """

    @abstractmethod
    async def get_by_name(self, name: str, for_update: bool = False) -> Optional[SequenceCounter]:
        pass

    @abstractmethod
    async def create(self, counter: SequenceCounter) -> SequenceCounter:
        pass

    @abstractmethod
    async def update(self, counter: SequenceCounter) -> SequenceCounter:
        pass
