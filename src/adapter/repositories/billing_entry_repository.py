"""SQLAlchemy implementation of BillingEntryRepository

Canonical bill IDs are matched in the database with regexp_match
(PostgreSQL ~ operator; SQLite REGEXP registered by the driver dialect).
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update, or_, not_
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.billing_entry_repository import BillingEntryRepository
from src.domain.billing_entry import BillingEntry
from src.domain.sequence import BILL_ID_PATTERN

FILTERABLE_FIELDS = ("item_id", "item_name", "client_name", "order_business_id")


def _lacks_canonical_bill_id():
    return or_(
        BillingEntry.bill_id.is_(None),
        not_(BillingEntry.bill_id.regexp_match(BILL_ID_PATTERN)),
    )


class SqlAlchemyBillingEntryRepository(BillingEntryRepository):
    """
    SQLAlchemy implementation of BillingEntryRepository

    Features:
    - Append-only inserts
    - Ledger-wide canonical bill ID maximum (archived rows included)
    - Filtered full scans for the bill listing (pagination happens per bill)
    - Guarded bill_id assignment that never overwrites a canonical ID
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: BillingEntry) -> BillingEntry:
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def exists_bill_id(self, bill_id: str) -> bool:
        stmt = select(func.count()).select_from(BillingEntry).where(BillingEntry.bill_id == bill_id)
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def get_max_bill_id(self) -> Optional[str]:
        stmt = select(func.max(BillingEntry.bill_id)).where(
            BillingEntry.bill_id.regexp_match(BILL_ID_PATTERN)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find(
        self,
        item_id: Optional[str] = None,
        item_name: Optional[str] = None,
        client_name: Optional[str] = None,
        order_business_id: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> List[BillingEntry]:
        stmt = select(BillingEntry).where(BillingEntry.archived.is_(False))

        if item_id:
            stmt = stmt.where(BillingEntry.item_id.icontains(item_id, autoescape=True))
        if item_name:
            stmt = stmt.where(BillingEntry.item_name.icontains(item_name, autoescape=True))
        if client_name:
            stmt = stmt.where(BillingEntry.client_name.icontains(client_name, autoescape=True))
        if order_business_id:
            stmt = stmt.where(
                BillingEntry.order_business_id.icontains(order_business_id, autoescape=True)
            )
        if created_from:
            stmt = stmt.where(BillingEntry.created_at >= created_from)
        if created_to:
            stmt = stmt.where(BillingEntry.created_at <= created_to)

        # populate_existing: assign_bill_id updates rows behind the identity map
        stmt = (
            stmt.order_by(BillingEntry.created_at.desc(), BillingEntry.id.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_legacy_entries(self) -> List[BillingEntry]:
        stmt = (
            select(BillingEntry)
            .where(_lacks_canonical_bill_id())
            .order_by(BillingEntry.created_at.asc(), BillingEntry.id.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def assign_bill_id(self, entry_ids: List[int], bill_id: str) -> int:
        if not entry_ids:
            return 0
        stmt = (
            update(BillingEntry)
            .where(BillingEntry.id.in_(entry_ids))
            .where(_lacks_canonical_bill_id())
            .values(bill_id=bill_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def get_distinct_values(self, field_name: str) -> List[str]:
        if field_name not in FILTERABLE_FIELDS:
            raise ValueError(f"Unsupported filter field '{field_name}'")

        column = getattr(BillingEntry, field_name)
        stmt = (
            select(column)
            .where(BillingEntry.archived.is_(False))
            .where(column.is_not(None))
            .where(column != "")
            .distinct()
            .order_by(column)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def archive_created_before(self, cutoff: datetime) -> int:
        stmt = (
            update(BillingEntry)
            .where(BillingEntry.archived.is_(False))
            .where(BillingEntry.created_at < cutoff)
            .values(archived=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
