"""Integration tests for order billing

Tests cover:
- Billing an order in two steps until completed
- Over-billing rejection with no side effects
- Partial success across items
- Ledger entries surviving order deletion
- Stored timestamps round-tripping as UTC
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories import SqlAlchemyBillingEntryRepository, SqlAlchemyInventoryRepository
from src.app.use_cases.billing import BillOrderCommandDTO, ListBillsQueryDTO
from src.app.use_cases.orders import CreateOrderCommandDTO
from src.depends import (
    get_bill_order_use_case,
    get_create_order_use_case,
    get_delete_order_use_case,
    get_get_order_use_case,
    get_list_bills_use_case,
)
from src.domain.sequence_counter import SequenceCounter


async def create_order(session, *items, client_name="Acme Traders"):
    command = CreateOrderCommandDTO(
        client_name=client_name,
        items=[
            {"item_id": item_id, "item_name": f"Item {item_id}", "ordered_quantity": ordered}
            for item_id, ordered in items
        ],
    )
    result = await get_create_order_use_case(session).execute(command)
    assert result.is_ok(), result.error
    return result.value.order_id


def bill(order_id, *items):
    return BillOrderCommandDTO(
        order_id=order_id,
        items=[
            {"item_id": item_id, "quantity": quantity, "unit_price": price}
            for item_id, quantity, price in items
        ],
    )


@pytest.mark.asyncio
class TestBillingFlow:
    async def test_bill_until_completed(self, db_session: AsyncSession, add_inventory):
        """
        Given: Order with A ordered 10, inventory A = 10
        When: 4 then 6 are billed at 100
        Then: Order completed, inventory 0, two bills totalling 1000
        """
        # Arrange
        await add_inventory("A", 10)
        order_id = await create_order(db_session, ("A", 10))
        use_case = get_bill_order_use_case(db_session)

        # Act
        first = await use_case.execute(bill(order_id, ("A", 4, "100")))
        second = await use_case.execute(bill(order_id, ("A", 6, "100")))

        # Assert
        assert first.is_ok() and second.is_ok()
        assert first.value.order_status == "partially_completed"
        assert second.value.order_status == "completed"
        assert first.value.bill_id == "BILL000001"
        assert second.value.bill_id == "BILL000002"

        inventory = await SqlAlchemyInventoryRepository(db_session).get_by_item_id("A")
        assert inventory.available_quantity == 0

        entries = await SqlAlchemyBillingEntryRepository(db_session).find()
        assert len({entry.bill_id for entry in entries}) == 2
        assert sum(entry.total_amount for entry in entries) == Decimal("1000")

        order = (await get_get_order_use_case(db_session).execute(order_id)).value
        assert order.status == "completed"
        assert order.items[0].billed_quantity == 10

    async def test_over_billing_rejected_without_effects(
        self, db_session: AsyncSession, add_inventory
    ):
        """
        Given: A ordered 10, nothing billed, plenty of stock
        When: 11 are billed
        Then: EXCEEDS_ORDERED_QUANTITY, inventory and order unchanged, no entry
        """
        await add_inventory("A", 20)
        order_id = await create_order(db_session, ("A", 10))

        result = await get_bill_order_use_case(db_session).execute(bill(order_id, ("A", 11, "5")))

        assert result.is_err()
        assert result.error.code == "EXCEEDS_ORDERED_QUANTITY"
        inventory = await SqlAlchemyInventoryRepository(db_session).get_by_item_id("A")
        assert inventory.available_quantity == 20
        assert await SqlAlchemyBillingEntryRepository(db_session).find() == []
        order = (await get_get_order_use_case(db_session).execute(order_id)).value
        assert order.status == "uncompleted"
        assert order.items[0].billed_quantity == 0

    async def test_partial_success(self, db_session: AsyncSession, add_inventory):
        await add_inventory("A", 10)
        await add_inventory("B", 1)
        order_id = await create_order(db_session, ("A", 5), ("B", 5), ("C", 5))

        result = await get_bill_order_use_case(db_session).execute(
            bill(order_id, ("A", 5, "2.50"), ("B", 2, "1"), ("Z", 1, "1"))
        )

        assert result.is_ok()
        response = result.value
        assert [entry.item_id for entry in response.applied_entries] == ["A"]
        assert [(f.item_id, f.code) for f in response.failures] == [
            ("B", "INSUFFICIENT_STOCK"),
            ("Z", "ITEM_NOT_ON_ORDER"),
        ]
        assert response.total_amount == Decimal("12.50")
        assert response.order_status == "partially_completed"

        inventory_repo = SqlAlchemyInventoryRepository(db_session)
        assert (await inventory_repo.get_by_item_id("A")).available_quantity == 5
        assert (await inventory_repo.get_by_item_id("B")).available_quantity == 1

    async def test_unknown_order(self, db_session: AsyncSession):
        result = await get_bill_order_use_case(db_session).execute(bill("ORD-1999-001", ("A", 1, "1")))

        assert result.error.code == "ORDER_NOT_FOUND"

    async def test_ledger_outlives_order_deletion(self, db_session: AsyncSession, add_inventory):
        await add_inventory("A", 10)
        order_id = await create_order(db_session, ("A", 10))
        await get_bill_order_use_case(db_session).execute(bill(order_id, ("A", 3, "10")))

        deleted = await get_delete_order_use_case(db_session).execute(order_id)

        assert deleted.is_ok()
        assert deleted.value.items_deleted == 1
        assert (await get_get_order_use_case(db_session).execute(order_id)).error.code == "ORDER_NOT_FOUND"
        entries = await SqlAlchemyBillingEntryRepository(db_session).find(order_business_id=order_id)
        assert len(entries) == 1


@pytest.mark.asyncio
class TestStoredTimestamps:
    async def test_timestamps_round_trip_as_utc(self, db_session: AsyncSession, add_inventory):
        """
        Given: An order billed once
        When: Order, ledger entry, inventory and counter rows are read back
        Then: Every stored timestamp carries a UTC offset
        """
        # Arrange
        await add_inventory("A", 5)
        order_id = await create_order(db_session, ("A", 5))
        result = await get_bill_order_use_case(db_session).execute(bill(order_id, ("A", 2, "10")))
        assert result.is_ok(), result.error

        # Act
        order = (await get_get_order_use_case(db_session).execute(order_id)).value
        entries = await SqlAlchemyBillingEntryRepository(db_session).find()
        record = await SqlAlchemyInventoryRepository(db_session).get_by_item_id("A")
        counters = (await db_session.execute(select(SequenceCounter))).scalars().all()

        # Assert
        stamps = [order.created_at, order.updated_at, record.created_at, record.updated_at]
        stamps += [entry.created_at for entry in entries]
        stamps += [counter.updated_at for counter in counters]
        assert counters
        assert all(stamp.utcoffset() == timedelta(0) for stamp in stamps)

    async def test_naive_listing_bounds_are_read_as_utc(self, db_session: AsyncSession, add_entry):
        """
        Given: A ledger entry at 04:30 UTC
        When: Bills are listed with naive created_from/created_to bounds around it
        Then: The bounds are treated as UTC and the entry is found
        """
        # Arrange
        await add_entry(bill_id="BILL000001", created_at=datetime(2024, 11, 5, 4, 30, tzinfo=timezone.utc))

        # Act
        result = await get_list_bills_use_case(db_session).execute(
            ListBillsQueryDTO(
                created_from=datetime(2024, 11, 5, 4, 0),
                created_to=datetime(2024, 11, 5, 5, 0),
            )
        )

        # Assert
        assert result.is_ok(), result.error
        assert [b.bill_id for b in result.value.bills] == ["BILL000001"]
