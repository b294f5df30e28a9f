"""Session and use case wiring

Every use case of one call is built on a single AsyncSession, so its
repositories and unit of work share one transaction.
"""

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyBillingEntryRepository,
    SqlAlchemyInventoryRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemySequenceCounterRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services import BusinessClock, SequentialIdGenerator
from src.app.use_cases.archive import ArchiveData
from src.app.use_cases.billing import BackfillBillIds, BillOrder, GetBillingFilterOptions, ListBills
from src.app.use_cases.inventory import DecreaseInventory
from src.app.use_cases.orders import (
    CreateOrder,
    DeleteOrder,
    GetOrder,
    GetOrderFilterOptions,
    ListOrders,
    UpdateOrder,
)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def init_db(db_engine=None) -> None:
    """Create missing tables (development and tests; no migrations are shipped)"""
    async with (db_engine or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


def get_clock() -> BusinessClock:
    return BusinessClock(ApplicationConfig.BUSINESS_TIMEZONE)


def get_id_generator(session: AsyncSession) -> SequentialIdGenerator:
    return SequentialIdGenerator(
        order_repo=SqlAlchemyOrderRepository(session),
        entry_repo=SqlAlchemyBillingEntryRepository(session),
        counter_repo=(
            SqlAlchemySequenceCounterRepository(session)
            if ApplicationConfig.USE_SEQUENCE_COUNTERS
            else None
        ),
        clock=get_clock(),
        max_attempts=ApplicationConfig.ID_ALLOCATION_MAX_ATTEMPTS,
    )


def get_create_order_use_case(session: AsyncSession) -> CreateOrder:
    return CreateOrder(
        uow=SqlAlchemyUnitOfWork(session),
        order_repo=SqlAlchemyOrderRepository(session),
        id_generator=get_id_generator(session),
        clock=get_clock(),
    )


def get_get_order_use_case(session: AsyncSession) -> GetOrder:
    return GetOrder(order_repo=SqlAlchemyOrderRepository(session))


def get_update_order_use_case(session: AsyncSession) -> UpdateOrder:
    return UpdateOrder(
        uow=SqlAlchemyUnitOfWork(session),
        order_repo=SqlAlchemyOrderRepository(session),
    )


def get_delete_order_use_case(session: AsyncSession) -> DeleteOrder:
    return DeleteOrder(
        uow=SqlAlchemyUnitOfWork(session),
        order_repo=SqlAlchemyOrderRepository(session),
    )


def get_list_orders_use_case(session: AsyncSession) -> ListOrders:
    return ListOrders(
        order_repo=SqlAlchemyOrderRepository(session),
        clock=get_clock(),
        default_page_size=ApplicationConfig.DEFAULT_PAGE_SIZE,
        max_page_size=ApplicationConfig.MAX_PAGE_SIZE,
    )


def get_order_filter_options_use_case(session: AsyncSession) -> GetOrderFilterOptions:
    return GetOrderFilterOptions(order_repo=SqlAlchemyOrderRepository(session))


def get_bill_order_use_case(session: AsyncSession) -> BillOrder:
    return BillOrder(
        uow=SqlAlchemyUnitOfWork(session),
        order_repo=SqlAlchemyOrderRepository(session),
        inventory_repo=SqlAlchemyInventoryRepository(session),
        entry_repo=SqlAlchemyBillingEntryRepository(session),
        id_generator=get_id_generator(session),
        clock=get_clock(),
    )


def get_list_bills_use_case(session: AsyncSession) -> ListBills:
    return ListBills(
        entry_repo=SqlAlchemyBillingEntryRepository(session),
        clock=get_clock(),
        default_page_size=ApplicationConfig.DEFAULT_PAGE_SIZE,
        max_page_size=ApplicationConfig.MAX_PAGE_SIZE,
    )


def get_backfill_bill_ids_use_case(session: AsyncSession) -> BackfillBillIds:
    return BackfillBillIds(
        uow=SqlAlchemyUnitOfWork(session),
        entry_repo=SqlAlchemyBillingEntryRepository(session),
        id_generator=get_id_generator(session),
    )


def get_decrease_inventory_use_case(session: AsyncSession) -> DecreaseInventory:
    return DecreaseInventory(
        uow=SqlAlchemyUnitOfWork(session),
        inventory_repo=SqlAlchemyInventoryRepository(session),
    )


def get_billing_filter_options_use_case(session: AsyncSession) -> GetBillingFilterOptions:
    return GetBillingFilterOptions(entry_repo=SqlAlchemyBillingEntryRepository(session))


def get_archive_data_use_case(session: AsyncSession) -> ArchiveData:
    return ArchiveData(
        uow=SqlAlchemyUnitOfWork(session),
        order_repo=SqlAlchemyOrderRepository(session),
        entry_repo=SqlAlchemyBillingEntryRepository(session),
        inventory_repo=SqlAlchemyInventoryRepository(session),
        clock=get_clock(),
    )
