"""SQLAlchemy implementation of SequenceCounterRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.sequence_counter_repository import SequenceCounterRepository
from src.domain.sequence_counter import SequenceCounter


class SqlAlchemySequenceCounterRepository(SequenceCounterRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_name(self, name: str, for_update: bool = False) -> Optional[SequenceCounter]:
        stmt = select(SequenceCounter).where(SequenceCounter.name == name)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, counter: SequenceCounter) -> SequenceCounter:
        """
        Raises:
            IntegrityError: If a concurrent allocator created the same series first
        """
        self.session.add(counter)
        await self.session.flush()
        await self.session.refresh(counter)
        return counter

    async def update(self, counter: SequenceCounter) -> SequenceCounter:
        self.session.add(counter)
        await self.session.flush()
        return counter
