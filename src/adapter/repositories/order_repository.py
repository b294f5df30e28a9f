"""SQLAlchemy implementation of OrderRepository

Orders and their items live in two tables; items are written and loaded
through this repository only.
"""

from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import delete, update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_repository import OrderRepository
from src.domain.base import utc_now
from src.domain.order import Order, OrderItem, OrderStatus
from src.domain.sequence import order_id_pattern

ORDER_FIELDS = ("client_name",)
ITEM_FIELDS = ("item_id", "item_name")


def _filtered(
    stmt,
    order_id: Optional[str] = None,
    item_id: Optional[str] = None,
    item_name: Optional[str] = None,
    client_name: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    created_from: Optional[datetime] = None,
    created_to: Optional[datetime] = None,
    include_archived: bool = False,
):
    if not include_archived:
        stmt = stmt.where(Order.archived.is_(False))
    if order_id:
        stmt = stmt.where(Order.order_id.icontains(order_id, autoescape=True))
    if client_name:
        stmt = stmt.where(Order.client_name.icontains(client_name, autoescape=True))
    if status:
        stmt = stmt.where(Order.status == status)
    if created_from:
        stmt = stmt.where(Order.created_at >= created_from)
    if created_to:
        stmt = stmt.where(Order.created_at <= created_to)
    if item_id:
        stmt = stmt.where(
            Order.id.in_(
                select(OrderItem.order_pk).where(OrderItem.item_id.icontains(item_id, autoescape=True))
            )
        )
    if item_name:
        stmt = stmt.where(
            Order.id.in_(
                select(OrderItem.order_pk).where(OrderItem.item_name.icontains(item_name, autoescape=True))
            )
        )
    return stmt


class SqlAlchemyOrderRepository(OrderRepository):
    """
    SQLAlchemy implementation of OrderRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE on the order row
    - Year-scoped lookup of the greatest business order ID
    - Unique order_id enforced by the database
    - Filtered, paginated listing; item filters match any item of the order
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_order_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        # populate_existing: archive_created_before updates rows behind the identity map
        stmt = (
            select(Order)
            .where(Order.order_id == order_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_items(self, order_pk: int) -> List[OrderItem]:
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_pk == order_pk)
            .order_by(OrderItem.position, OrderItem.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_latest_order_id(self, year: int) -> Optional[str]:
        # Fixed-width sequence, so the lexicographic max is the numeric max
        stmt = select(func.max(Order.order_id)).where(
            Order.order_id.regexp_match(order_id_pattern(year))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists_order_id(self, order_id: str) -> bool:
        stmt = select(func.count()).select_from(Order).where(Order.order_id == order_id)
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def create(self, order: Order, items: List[OrderItem]) -> Order:
        """
        Create an order and its items

        Args:
            order: Order entity to persist
            items: Items in line order

        Returns:
            Created Order with generated ID

        Raises:
            IntegrityError: If order_id already exists
        """
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)

        for position, item in enumerate(items):
            item.order_pk = order.id
            item.position = position
            self.session.add(item)
        await self.session.flush()
        return order

    async def update(self, order: Order) -> Order:
        order.updated_at = utc_now()
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def save_items(self, items: List[OrderItem]) -> None:
        for item in items:
            self.session.add(item)
        await self.session.flush()

    async def delete_items(self, items: List[OrderItem]) -> None:
        for item in items:
            await self.session.delete(item)
        await self.session.flush()

    async def delete(self, order: Order) -> None:
        await self.session.execute(delete(OrderItem).where(OrderItem.order_pk == order.id))
        await self.session.delete(order)
        await self.session.flush()

    async def find(
        self,
        order_id: Optional[str] = None,
        item_id: Optional[str] = None,
        item_name: Optional[str] = None,
        client_name: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        include_archived: bool = False,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Order]:
        stmt = _filtered(
            select(Order),
            order_id=order_id,
            item_id=item_id,
            item_name=item_name,
            client_name=client_name,
            status=status,
            created_from=created_from,
            created_to=created_to,
            include_archived=include_archived,
        )
        stmt = (
            stmt.order_by(Order.created_at.desc(), Order.id.desc())
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(
        self,
        order_id: Optional[str] = None,
        item_id: Optional[str] = None,
        item_name: Optional[str] = None,
        client_name: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        include_archived: bool = False,
    ) -> int:
        stmt = _filtered(
            select(func.count()).select_from(Order),
            order_id=order_id,
            item_id=item_id,
            item_name=item_name,
            client_name=client_name,
            status=status,
            created_from=created_from,
            created_to=created_to,
            include_archived=include_archived,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_items_for_orders(self, order_pks: List[int]) -> Dict[int, List[OrderItem]]:
        items_by_order: Dict[int, List[OrderItem]] = {pk: [] for pk in order_pks}
        if not order_pks:
            return items_by_order
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_pk.in_(order_pks))
            .order_by(OrderItem.order_pk, OrderItem.position, OrderItem.id)
        )
        result = await self.session.execute(stmt)
        for item in result.scalars().all():
            items_by_order[item.order_pk].append(item)
        return items_by_order

    async def get_distinct_values(self, field_name: str) -> List[str]:
        if field_name in ORDER_FIELDS:
            column = getattr(Order, field_name)
            stmt = select(column).where(Order.archived.is_(False))
        elif field_name in ITEM_FIELDS:
            column = getattr(OrderItem, field_name)
            stmt = (
                select(column)
                .join(Order, Order.id == OrderItem.order_pk)
                .where(Order.archived.is_(False))
            )
        else:
            raise ValueError(f"Unsupported filter field '{field_name}'")

        stmt = stmt.where(column != "").distinct().order_by(column)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def archive_created_before(self, cutoff: datetime) -> int:
        stmt = (
            update(Order)
            .where(Order.archived.is_(False))
            .where(Order.created_at < cutoff)
            .values(archived=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
