"""
SQL Record Access

SQLAlchemy implementation of the analytics record port. Every query runs
in its own session so the engine can await several of them concurrently.
Database errors are logged and re-raised as DataAccessError; nothing is
retried here.
"""

import uuid
from contextlib import asynccontextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional, Tuple

import structlog
from sqlalchemy import Select, and_, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from storefront_analytics.analytics.exceptions import DataAccessError
from storefront_analytics.analytics.ports import OrderCriteria
from storefront_analytics.analytics.records import (
    DailyTotal,
    OrderLine,
    OrderRecord,
    ProductRecord,
    RevenueTotals,
)
from .models import DeliveryType, Order, OrderItem, Product

logger = structlog.get_logger(__name__)


# =============================================================================
# ROW MAPPING
# =============================================================================

def _enum_value(value) -> str:
    return value.value if hasattr(value, "value") else str(value)


def _as_date(value) -> date:
    """func.date() yields a date on PostgreSQL and an ISO string on SQLite."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def to_product_record(product: Product) -> ProductRecord:
    return ProductRecord(
        id=str(product.id),
        name=product.name,
        category=product.category,
        price=product.price if product.price is not None else Decimal("0"),
        created_at=product.created_at,
        stock=product.stock or 0,
        views=product.views or 0,
        add_to_cart_count=product.add_to_cart_count or 0,
        total_sold=product.total_sold or 0,
        image=product.image,
    )


def to_order_record(order: Order) -> OrderRecord:
    return OrderRecord(
        id=str(order.id),
        order_number=order.order_number,
        created_at=order.created_at,
        status=_enum_value(order.status),
        delivery_type=_enum_value(order.delivery_type),
        total_amount=order.total_amount,
        phone=order.phone,
        original_amount=order.original_amount,
        discount_amount=order.discount_amount,
        user_id=order.user_id,
        customer_name=order.customer_name,
        address=order.address,
        items=tuple(
            OrderLine(
                product_id=str(item.product_id) if item.product_id else None,
                quantity=item.quantity,
                price=item.price,
                product_name=item.product.name if item.product else None,
                category=item.product.category if item.product else None,
            )
            for item in order.items
        ),
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def order_conditions(criteria: OrderCriteria) -> list:
    """Translate order criteria into SQL conditions."""
    conditions = []
    if criteria.interval is not None:
        conditions.append(Order.created_at >= criteria.interval.start)
        conditions.append(Order.created_at <= criteria.interval.end)
    if criteria.channel:
        conditions.append(Order.delivery_type == DeliveryType(criteria.channel))
    if criteria.location:
        conditions.append(
            Order.address.ilike(f"%{_escape_like(criteria.location)}%", escape="\\")
        )
    if criteria.status:
        conditions.append(Order.status == criteria.status)
    if criteria.delivery_with_address:
        conditions.append(Order.delivery_type == DeliveryType.DELIVERY)
        conditions.append(Order.address.is_not(None))
        conditions.append(func.trim(Order.address) != "")
    return conditions


def _filtered(query: Select, criteria: OrderCriteria) -> Select:
    conditions = order_conditions(criteria)
    if conditions:
        query = query.where(and_(*conditions))
    return query


# =============================================================================
# PORT
# =============================================================================

class SqlRecordPort:
    """
    Record access port backed by the storefront database.

    Example:
        port = SqlRecordPort(get_session_factory())
        products = await port.find_products(category="Grains")
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        session = self.session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error(
                "Record query failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DataAccessError(operation, str(e)) from e
        finally:
            await session.close()

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    async def find_products(
        self,
        category: Optional[str] = None,
        product_id: Optional[str] = None,
    ) -> List[ProductRecord]:
        query = select(Product)
        if category:
            query = query.where(Product.category == category)
        if product_id:
            query = query.where(Product.id == uuid.UUID(product_id))
        query = query.order_by(Product.created_at, Product.id)

        async with self._session("find_products") as db:
            result = await db.execute(query)
            return [to_product_record(p) for p in result.scalars().all()]

    async def low_stock_products(self, threshold: int) -> List[ProductRecord]:
        query = (
            select(Product)
            .where(Product.stock < threshold)
            .order_by(Product.stock, Product.name)
        )
        async with self._session("low_stock_products") as db:
            result = await db.execute(query)
            return [to_product_record(p) for p in result.scalars().all()]

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    async def find_orders(self, criteria: OrderCriteria) -> List[OrderRecord]:
        query = _filtered(
            select(Order).options(selectinload(Order.items).selectinload(OrderItem.product)),
            criteria,
        ).order_by(Order.created_at, Order.id)

        async with self._session("find_orders") as db:
            result = await db.execute(query)
            return [to_order_record(o) for o in result.scalars().all()]

    async def latest_orders(self, limit: int) -> List[OrderRecord]:
        query = (
            select(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .order_by(Order.created_at.desc(), Order.id)
            .limit(limit)
        )
        async with self._session("latest_orders") as db:
            result = await db.execute(query)
            return [to_order_record(o) for o in result.scalars().all()]

    async def count_orders(self, criteria: OrderCriteria) -> int:
        query = _filtered(select(func.count(Order.id)), criteria)
        async with self._session("count_orders") as db:
            result = await db.execute(query)
            return result.scalar() or 0

    async def sum_revenue(self, criteria: OrderCriteria) -> RevenueTotals:
        query = _filtered(
            select(
                func.sum(Order.total_amount).label("gross"),
                func.sum(func.coalesce(Order.original_amount, Order.total_amount)).label("original"),
                func.sum(func.coalesce(Order.discount_amount, 0)).label("discount"),
            ),
            criteria,
        )
        async with self._session("sum_revenue") as db:
            row = (await db.execute(query)).one()

        return RevenueTotals(
            gross=Decimal(str(row.gross or 0)),
            original=Decimal(str(row.original or 0)),
            discount=Decimal(str(row.discount or 0)),
        )

    async def customer_keys(self, criteria: OrderCriteria) -> List[Tuple[Optional[str], Optional[str]]]:
        query = _filtered(select(Order.user_id, Order.phone).distinct(), criteria)
        async with self._session("customer_keys") as db:
            result = await db.execute(query)
            return [(row.user_id, row.phone) for row in result.all()]

    async def status_counts(self, criteria: OrderCriteria) -> Dict[str, int]:
        query = _filtered(
            select(Order.status, func.count(Order.id).label("count")),
            criteria,
        ).group_by(Order.status)

        async with self._session("status_counts") as db:
            result = await db.execute(query)
            return {_enum_value(row.status): row.count for row in result.all()}

    async def daily_totals(self, criteria: OrderCriteria) -> List[DailyTotal]:
        day = func.date(Order.created_at)
        query = _filtered(
            select(
                day.label("day"),
                func.sum(Order.total_amount).label("revenue"),
                func.count(Order.id).label("orders"),
            ),
            criteria,
        ).group_by(day).order_by(day)

        async with self._session("daily_totals") as db:
            result = await db.execute(query)
            return [
                DailyTotal(
                    day=_as_date(row.day),
                    revenue=Decimal(str(row.revenue or 0)),
                    order_count=row.orders,
                )
                for row in result.all()
            ]

    async def order_addresses(self, criteria: OrderCriteria) -> List[str]:
        query = _filtered(select(Order.address), criteria).order_by(Order.created_at, Order.id)
        async with self._session("order_addresses") as db:
            result = await db.execute(query)
            return [address for address in result.scalars().all() if address]

    async def earliest_order_date(self) -> Optional[datetime]:
        async with self._session("earliest_order_date") as db:
            result = await db.execute(select(func.min(Order.created_at)))
            value = result.scalar()

        if isinstance(value, str):
            return datetime.fromisoformat(value)
        return value
