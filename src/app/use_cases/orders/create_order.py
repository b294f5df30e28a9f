"""CreateOrder Use Case

Creates an order with a freshly allocated ORD-YYYY-NNN identifier.
"""

import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.clock import BusinessClock
from src.app.services.id_generator import SequentialIdGenerator
from src.app.repositories.order_repository import OrderRepository
from src.domain.errors import ErrorCode, IdAllocationFailed, SeriesExhausted
from src.domain.order import Order, OrderItem, OrderStatus
from src.domain.sequence import ORDER_SERIES
from .dtos import CreateOrderCommandDTO, OrderResponseDTO, build_order_response

logger = logging.getLogger(__name__)


class CreateOrder:
    """
    Use Case: Create an order

    Business Rules:
    1. Order ID continues the current year's series (business clock year)
    2. A unique-constraint conflict at insert counts as an ID collision and
       is retried, within the generator's attempt budget
    3. A new order starts uncompleted; only billing moves its status
    4. date/time are stamped by the business clock

    Flow:
    1. Allocate a verified-unused order ID
    2. Insert order and items
    3. Commit transaction (retry from step 1 on a unique conflict)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        id_generator: SequentialIdGenerator,
        clock: Optional[BusinessClock] = None,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.id_generator = id_generator
        self.clock = clock or BusinessClock()

    async def execute(self, command: CreateOrderCommandDTO) -> Result[OrderResponseDTO]:
        try:
            attempts = self.id_generator.max_attempts
            for attempt in range(1, attempts + 1):
                # Step 1: Allocate order ID
                order_id = await self.id_generator.allocate(
                    ORDER_SERIES, self.order_repo.exists_order_id
                )

                now = self.clock.now()
                items = [
                    OrderItem(
                        item_id=item.item_id,
                        item_name=item.item_name,
                        ordered_quantity=item.ordered_quantity,
                        billed_quantity=0,
                    )
                    for item in command.items
                ]
                order = Order(
                    order_id=order_id,
                    client_name=command.client_name,
                    status=OrderStatus.UNCOMPLETED,
                    date=self.clock.date_str(now),
                    time=self.clock.time_str(now),
                    created_at=now,
                    updated_at=now,
                )

                # Step 2: Insert; a concurrent writer may have taken the ID meanwhile
                try:
                    created = await self.order_repo.create(order, items)
                except IntegrityError:
                    await self.uow.rollback()
                    logger.warning(
                        f"Order ID {order_id} taken at insert (attempt {attempt}/{attempts})"
                    )
                    continue

                # Step 3: Commit transaction
                await self.uow.commit()
                logger.info(f"Created order {created.order_id} for {created.client_name}")
                return Return.ok(build_order_response(created, items))

            return Return.err(
                Error(
                    code=ErrorCode.ID_ALLOCATION_FAILED,
                    message="Could not allocate a unique order ID",
                    reason=f"Insert conflicted {attempts} times",
                )
            )

        except SeriesExhausted as e:
            await self.uow.rollback()
            logger.error(f"Order creation aborted: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.SERIES_EXHAUSTED,
                    message="Order ID series for this year is exhausted",
                    reason=str(e),
                )
            )
        except IdAllocationFailed as e:
            await self.uow.rollback()
            logger.error(f"Order creation aborted: {e}")
            return Return.err(
                Error(
                    code=ErrorCode.ID_ALLOCATION_FAILED,
                    message="Could not allocate a unique order ID",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Order creation failed: {e}")
            return Return.err(
                Error(
                    code="CREATE_ORDER_FAILED",
                    message="Failed to create order",
                    reason=str(e),
                )
            )
