"""
Test Suite Configuration
"""
import itertools
import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Callable, Dict, List, Optional, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from storefront_analytics.analytics import AnalyticsEngine, OrderCriteria
from storefront_analytics.analytics.records import (
    DailyTotal,
    OrderLine,
    OrderRecord,
    ProductRecord,
    RevenueTotals,
)
from storefront_analytics.config import Settings
from storefront_analytics.config.settings import AnalyticsSettings
from storefront_analytics.database.connection import create_session_factory
from storefront_analytics.database.models import Base, Order, OrderItem, Product
from storefront_analytics.database.repository import SqlRecordPort

NOW = datetime(2025, 6, 15, 14, 30)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time: Sunday 15 June 2025, 14:30 local"""
    return NOW


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def analytics_settings() -> AnalyticsSettings:
    return AnalyticsSettings()


# =============================================================================
# RECORD FACTORIES
# =============================================================================

@pytest.fixture
def make_product(now) -> Callable[..., ProductRecord]:
    """Factory for product records; created 10 days before `now` by default"""
    counter = itertools.count(1)

    def factory(**overrides) -> ProductRecord:
        n = next(counter)
        values = {
            "id": str(uuid.UUID(int=n)),
            "name": f"Product {n}",
            "category": "Grains",
            "price": Decimal("10.00"),
            "created_at": now - timedelta(days=10),
            "stock": 50,
            "views": 0,
            "add_to_cart_count": 0,
            "total_sold": 0,
        }
        values.update(overrides)
        return ProductRecord(**values)

    return factory


@pytest.fixture
def make_order(now) -> Callable[..., OrderRecord]:
    """Factory for order records; placed one hour before `now` by default"""
    counter = itertools.count(1)

    def factory(**overrides) -> OrderRecord:
        n = next(counter)
        values = {
            "id": str(uuid.UUID(int=1000 + n)),
            "order_number": f"ORD-{n:04d}",
            "created_at": now - timedelta(hours=1),
            "status": "pending",
            "delivery_type": "delivery",
            "total_amount": Decimal("100.00"),
            "phone": f"024000{n:04d}",
            "address": "Tamale, 12 Market Road",
        }
        values.update(overrides)
        return OrderRecord(**values)

    return factory


def line(product: ProductRecord, quantity: int = 1, price: Optional[Decimal] = None) -> OrderLine:
    return OrderLine(
        product_id=product.id,
        quantity=quantity,
        price=product.price if price is None else price,
        product_name=product.name,
        category=product.category,
    )


@pytest.fixture
def make_line() -> Callable[..., OrderLine]:
    return line


# =============================================================================
# IN-MEMORY PORT
# =============================================================================

class FakeRecordPort:
    """Record access port over in-memory records"""

    def __init__(self, products=(), orders=()):
        self.products: List[ProductRecord] = list(products)
        self.orders: List[OrderRecord] = list(orders)
        self.calls: List[str] = []

    def _matches(self, order: OrderRecord, criteria: OrderCriteria) -> bool:
        if criteria.interval is not None and not (
            criteria.interval.start <= order.created_at <= criteria.interval.end
        ):
            return False
        if criteria.channel and order.delivery_type != criteria.channel:
            return False
        if criteria.location and criteria.location.lower() not in (order.address or "").lower():
            return False
        if criteria.status and order.status != criteria.status:
            return False
        if criteria.delivery_with_address and (
            order.delivery_type != "delivery" or not (order.address or "").strip()
        ):
            return False
        return True

    def _select(self, criteria: OrderCriteria) -> List[OrderRecord]:
        return [o for o in self.orders if self._matches(o, criteria)]

    async def find_products(self, category=None, product_id=None) -> List[ProductRecord]:
        self.calls.append("find_products")
        return [
            p for p in self.products
            if (category is None or p.category == category)
            and (product_id is None or p.id == product_id)
        ]

    async def low_stock_products(self, threshold: int) -> List[ProductRecord]:
        self.calls.append("low_stock_products")
        return sorted(
            (p for p in self.products if p.stock < threshold),
            key=lambda p: (p.stock, p.name),
        )

    async def find_orders(self, criteria: OrderCriteria) -> List[OrderRecord]:
        self.calls.append("find_orders")
        return self._select(criteria)

    async def latest_orders(self, limit: int) -> List[OrderRecord]:
        self.calls.append("latest_orders")
        return sorted(self.orders, key=lambda o: o.created_at, reverse=True)[:limit]

    async def count_orders(self, criteria: OrderCriteria) -> int:
        self.calls.append("count_orders")
        return len(self._select(criteria))

    async def sum_revenue(self, criteria: OrderCriteria) -> RevenueTotals:
        self.calls.append("sum_revenue")
        orders = self._select(criteria)
        return RevenueTotals(
            gross=sum((o.total_amount for o in orders), Decimal("0")),
            original=sum(
                (o.original_amount if o.original_amount is not None else o.total_amount for o in orders),
                Decimal("0"),
            ),
            discount=sum((o.discount_amount or Decimal("0") for o in orders), Decimal("0")),
        )

    async def customer_keys(self, criteria: OrderCriteria) -> List[Tuple[Optional[str], Optional[str]]]:
        self.calls.append("customer_keys")
        return sorted({(o.user_id, o.phone) for o in self._select(criteria)}, key=str)

    async def status_counts(self, criteria: OrderCriteria) -> Dict[str, int]:
        self.calls.append("status_counts")
        counts: Dict[str, int] = {}
        for order in self._select(criteria):
            counts[order.status] = counts.get(order.status, 0) + 1
        return counts

    async def daily_totals(self, criteria: OrderCriteria) -> List[DailyTotal]:
        self.calls.append("daily_totals")
        days: Dict = {}
        for order in self._select(criteria):
            revenue, count = days.get(order.created_at.date(), (Decimal("0"), 0))
            days[order.created_at.date()] = (revenue + order.total_amount, count + 1)
        return [DailyTotal(day, revenue, count) for day, (revenue, count) in sorted(days.items())]

    async def order_addresses(self, criteria: OrderCriteria) -> List[str]:
        self.calls.append("order_addresses")
        return [o.address for o in self._select(criteria) if o.address]

    async def earliest_order_date(self) -> Optional[datetime]:
        self.calls.append("earliest_order_date")
        return min((o.created_at for o in self.orders), default=None)


@pytest.fixture
def fake_port() -> FakeRecordPort:
    return FakeRecordPort()


@pytest.fixture
def engine(fake_port, analytics_settings, now) -> AnalyticsEngine:
    """Analytics engine over the in-memory port with a pinned clock"""
    return AnalyticsEngine(fake_port, analytics_settings, clock=lambda: now)


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite database per test"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def record_port(session_factory) -> SqlRecordPort:
    return SqlRecordPort(session_factory)


@pytest.fixture
def add_records(session_factory):
    """Persist ORM objects and return them"""

    async def add(*records):
        async with session_factory() as session:
            session.add_all(records)
            await session.commit()
        return records

    return add


@pytest.fixture
def product_row(now) -> Callable[..., Product]:
    """Factory for Product rows"""
    counter = itertools.count(1)

    def factory(**overrides) -> Product:
        n = next(counter)
        values = {
            "id": uuid.uuid4(),
            "name": f"Product {n}",
            "category": "Grains",
            "price": Decimal("10.00"),
            "stock": 50,
            "views": 0,
            "add_to_cart_count": 0,
            "total_sold": 0,
            "created_at": now - timedelta(days=10),
        }
        values.update(overrides)
        return Product(**values)

    return factory


@pytest.fixture
def order_row(now) -> Callable[..., Order]:
    """Factory for Order rows; `items` takes (Product, quantity) pairs"""
    counter = itertools.count(1)

    def factory(items=(), **overrides) -> Order:
        n = next(counter)
        values = {
            "id": uuid.uuid4(),
            "order_number": f"ORD-{n:04d}",
            "phone": f"024000{n:04d}",
            "customer_name": f"Customer {n}",
            "status": "pending",
            "delivery_type": "delivery",
            "address": "Tamale, 12 Market Road",
            "total_amount": Decimal("100.00"),
            "created_at": now - timedelta(hours=1),
        }
        values.update(overrides)
        order = Order(**values)
        order.items = [
            OrderItem(product=product, quantity=quantity, price=product.price)
            for product, quantity in items
        ]
        return order

    return factory


# =============================================================================
# API
# =============================================================================

@pytest.fixture
async def client(record_port, analytics_settings, now) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, analytics bound to the test database"""
    from storefront_analytics.main import create_app
    from storefront_analytics.serving.api.routes.analytics import get_analytics_engine

    app = create_app()
    app.dependency_overrides[get_analytics_engine] = lambda: AnalyticsEngine(
        record_port, analytics_settings, clock=lambda: now
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
