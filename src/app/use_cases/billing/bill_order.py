"""BillOrder Use Case

Bills one or more items of an order in a single transaction. Every applied
item decrements inventory, raises the item's billed quantity and appends a
ledger entry; all entries of the call share one bill ID.
"""

import logging
from decimal import Decimal
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.clock import BusinessClock
from src.app.services.id_generator import SequentialIdGenerator
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.inventory_repository import InventoryRepository
from src.app.repositories.billing_entry_repository import BillingEntryRepository
from src.app.use_cases.item_failures import ItemFailureDTO, failure_error
from src.domain.billing_entry import BillingEntry
from src.domain.errors import ErrorCode, IdAllocationFailed, SeriesExhausted
from src.domain.order import Order, OrderItem, derive_order_status
from src.domain.sequence import BILL_SERIES
from .dtos import BillItemDTO, BillOrderCommandDTO, BillOrderResponseDTO, BillingEntryDTO

logger = logging.getLogger(__name__)


class BillOrder:
    """
    Use Case: Bill items of an order

    Business Rules:
    1. The order must exist and not be archived
    2. One bill ID per call, verified unused before any entry is written
    3. Each item is checked independently, in request order:
       - ITEM_NOT_ON_ORDER: the order has no such item
       - INSUFFICIENT_STOCK: inventory missing, archived or below the quantity
       - EXCEEDS_ORDERED_QUANTITY: billed + quantity > ordered
    4. Rejected items leave inventory and the order untouched
    5. The call succeeds when at least one item was applied
    6. Order status is recomputed from all items

    Flow:
    1. Get order with lock (SELECT FOR UPDATE) and its items
    2. Allocate the bill ID
    3. Validate and apply each item
    4. Recompute status and persist the order
    5. Commit transaction
    6. Return applied entries and per-item failures
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        inventory_repo: InventoryRepository,
        entry_repo: BillingEntryRepository,
        id_generator: SequentialIdGenerator,
        clock: Optional[BusinessClock] = None,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.inventory_repo = inventory_repo
        self.entry_repo = entry_repo
        self.id_generator = id_generator
        self.clock = clock or BusinessClock()

    async def execute(self, command: BillOrderCommandDTO) -> Result[BillOrderResponseDTO]:
        """
        Execute billing

        Args:
            command: BillOrderCommandDTO with order_id and items

        Returns:
            Result[BillOrderResponseDTO]: Applied entries and failures, or error
        """
        try:
            # Step 1: Get order with pessimistic lock
            order = await self.order_repo.get_by_order_id(command.order_id, for_update=True)

            if not order or order.archived:
                return Return.err(
                    Error(
                        code=ErrorCode.ORDER_NOT_FOUND,
                        message=f"Order {command.order_id} not found",
                        reason="Order does not exist or is archived",
                    )
                )

            items = await self.order_repo.get_items(order.id)
            items_by_id = {item.item_id: item for item in items}

            # Step 2: Allocate one bill ID for the whole call
            bill_id = await self.id_generator.allocate(BILL_SERIES, self.entry_repo.exists_bill_id)

            # Step 3: Validate and apply each item independently
            now = self.clock.now()
            date, time = self.clock.date_str(now), self.clock.time_str(now)

            applied: List[BillingEntry] = []
            failures: List[ItemFailureDTO] = []
            touched = {}

            for requested in command.items:
                order_item = items_by_id.get(requested.item_id)
                failure = await self._check_item(order, order_item, requested)
                if failure is None and not await self.inventory_repo.decrement(
                    requested.item_id, requested.quantity
                ):
                    # Stock changed between the read and the conditional update
                    failure = ItemFailureDTO(
                        item_id=requested.item_id,
                        code=ErrorCode.INSUFFICIENT_STOCK,
                        message=f"Insufficient stock for item {requested.item_id}",
                    )

                if failure is not None:
                    logger.warning(
                        f"Billing {order.order_id}: rejected item {failure.item_id} ({failure.code})"
                    )
                    failures.append(failure)
                    continue

                order_item.billed_quantity += requested.quantity
                touched[order_item.item_id] = order_item

                entry = BillingEntry(
                    bill_id=bill_id,
                    order_id=order.id,
                    order_business_id=order.order_id,
                    item_id=order_item.item_id,
                    item_name=order_item.item_name,
                    client_name=order.client_name,
                    quantity=requested.quantity,
                    unit_price=requested.unit_price,
                    total_amount=requested.unit_price * requested.quantity,
                    date=date,
                    time=time,
                    created_at=now,
                )
                applied.append(await self.entry_repo.create(entry))

            if not applied:
                await self.uow.rollback()
                return Return.err(
                    failure_error(failures, f"No item of order {command.order_id} could be billed")
                )

            # Step 4: Recompute status over all items
            await self.order_repo.save_items(list(touched.values()))
            order.status = derive_order_status(items)
            order = await self.order_repo.update(order)

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Billed {len(applied)} item(s) of {order.order_id} as {bill_id} "
                f"({len(failures)} rejected), status={order.status.value}"
            )

            # Step 6: Build response
            return Return.ok(
                BillOrderResponseDTO(
                    bill_id=bill_id,
                    order_id=order.order_id,
                    order_status=order.status.value,
                    total_amount=sum((entry.total_amount for entry in applied), Decimal("0")),
                    applied_entries=[
                        BillingEntryDTO.model_validate(entry, from_attributes=True)
                        for entry in applied
                    ],
                    failures=failures,
                )
            )

        except SeriesExhausted as e:
            await self.uow.rollback()
            logger.error(f"Billing {command.order_id} aborted: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.SERIES_EXHAUSTED,
                    message="Bill ID series is exhausted",
                    reason=str(e),
                )
            )
        except IdAllocationFailed as e:
            await self.uow.rollback()
            logger.error(f"Billing {command.order_id} aborted: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.ID_ALLOCATION_FAILED,
                    message="Could not allocate a unique bill ID",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Billing {command.order_id} failed: {e}")
            return Return.err(
                Error(
                    code="BILL_ORDER_FAILED",
                    message="Failed to bill order",
                    reason=str(e),
                )
            )

    async def _check_item(
        self, order: Order, order_item: Optional[OrderItem], requested: BillItemDTO
    ) -> Optional[ItemFailureDTO]:
        """Business checks for one item; None when it can be applied"""
        if order_item is None:
            return ItemFailureDTO(
                item_id=requested.item_id,
                code=ErrorCode.ITEM_NOT_ON_ORDER,
                message=f"Item {requested.item_id} is not on order {order.order_id}",
            )

        record = await self.inventory_repo.get_by_item_id(requested.item_id)
        if record is None or record.archived:
            return ItemFailureDTO(
                item_id=requested.item_id,
                code=ErrorCode.INSUFFICIENT_STOCK,
                message=f"No inventory for item {requested.item_id}",
            )
        if record.available_quantity < requested.quantity:
            return ItemFailureDTO(
                item_id=requested.item_id,
                code=ErrorCode.INSUFFICIENT_STOCK,
                message=(
                    f"Insufficient stock for item {requested.item_id}. "
                    f"Required: {requested.quantity}, Available: {record.available_quantity}"
                ),
            )

        if order_item.billed_quantity + requested.quantity > order_item.ordered_quantity:
            return ItemFailureDTO(
                item_id=requested.item_id,
                code=ErrorCode.EXCEEDS_ORDERED_QUANTITY,
                message=(
                    f"Item {requested.item_id} would exceed its ordered quantity. "
                    f"Ordered: {order_item.ordered_quantity}, Billed: {order_item.billed_quantity}, "
                    f"Requested: {requested.quantity}"
                ),
            )
        return None
