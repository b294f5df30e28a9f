"""SQLAlchemy implementation of InventoryRepository

The decrement is one conditional UPDATE; its affected row count tells
whether the stock was there, with no read-modify-write window.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.inventory_repository import InventoryRepository
from src.domain.base import utc_now
from src.domain.inventory_record import InventoryRecord


class SqlAlchemyInventoryRepository(InventoryRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_item_id(self, item_id: str) -> Optional[InventoryRecord]:
        # populate_existing: a decrement issued earlier in this session bypassed the identity map
        stmt = (
            select(InventoryRecord)
            .where(InventoryRecord.item_id == item_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, record: InventoryRecord) -> InventoryRecord:
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def decrement(self, item_id: str, quantity: int) -> bool:
        stmt = (
            update(InventoryRecord)
            .where(InventoryRecord.item_id == item_id)
            .where(InventoryRecord.archived.is_(False))
            .where(InventoryRecord.available_quantity >= quantity)
            .values(
                available_quantity=InventoryRecord.available_quantity - quantity,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def archive_created_before(self, cutoff: datetime) -> int:
        stmt = (
            update(InventoryRecord)
            .where(InventoryRecord.archived.is_(False))
            .where(InventoryRecord.created_at < cutoff)
            .values(archived=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
