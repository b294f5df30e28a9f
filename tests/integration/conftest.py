from datetime import datetime, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.services.clock import BusinessClock
from src.depends import init_db
from src.domain.base import as_utc
from src.domain.billing_entry import BillingEntry
from src.domain.inventory_record import InventoryRecord


class FrozenClock(BusinessClock):
    """Business clock pinned to one UTC moment (naive moments are read as UTC)"""

    def __init__(self, moment: datetime, timezone_name: str = "Asia/Kolkata"):
        super().__init__(timezone_name)
        self.moment = moment

    def now(self) -> datetime:
        return as_utc(self.moment)


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'ledger_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)
    await init_db(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def frozen_clock():
    return FrozenClock


@pytest.fixture
def add_inventory(db_session):
    async def _add(item_id: str, available: int, item_name: str = None, archived: bool = False):
        record = InventoryRecord(
            item_id=item_id,
            item_name=item_name or f"Item {item_id}",
            available_quantity=available,
            archived=archived,
        )
        db_session.add(record)
        await db_session.commit()
        await db_session.refresh(record)
        return record

    return _add


@pytest.fixture
def add_entry(db_session):
    """Insert a ledger row directly, bypassing billing (legacy data)"""

    async def _add(
        bill_id=None,
        order_business_id="ORD-2024-001",
        item_id="A",
        time="10:00 AM",
        date="05/11/2024",
        created_at=None,
        amount="10.00",
        client_name="Acme Traders",
        archived=False,
    ):
        entry = BillingEntry(
            bill_id=bill_id,
            order_id=1,
            order_business_id=order_business_id,
            item_id=item_id,
            item_name=f"Item {item_id}",
            client_name=client_name,
            quantity=1,
            unit_price=Decimal(amount),
            total_amount=Decimal(amount),
            date=date,
            time=time,
            archived=archived,
            created_at=created_at or datetime(2024, 11, 5, 4, 30, tzinfo=timezone.utc),
        )
        db_session.add(entry)
        await db_session.commit()
        await db_session.refresh(entry)
        return entry

    return _add
