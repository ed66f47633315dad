"""
Integration Tests - Demo Database Seeder
"""
import pytest

from storefront_analytics.analytics import AnalyticsEngine, AnalyticsFilters, OrderCriteria
from storefront_analytics.database import connection
from storefront_analytics.database.repository import SqlRecordPort
from storefront_analytics.ingestion.seed_db import seed_database


@pytest.fixture
async def database(tmp_path):
    await connection.init_database(f"sqlite+aiosqlite:///{tmp_path / 'seed.db'}")
    yield connection.get_session_factory()
    await connection.close_database()


class TestSeedDatabase:

    async def test_seeded_store_is_analyzable(self, database, now):
        counts = await seed_database(n_products=10, n_orders=80, days=45, seed=3, now=now)

        port = SqlRecordPort(database)
        engine = AnalyticsEngine(port, clock=lambda: now)
        stats = await engine.dashboard()
        advanced = await engine.advanced(AnalyticsFilters(date_range="30days", comparison_mode="month"))

        assert counts["products"] == 10
        assert stats.order_count == 80
        assert len(advanced.product_performance) == 10
        assert advanced.comparison is not None
        assert 0 <= advanced.order_insights.delivery_performance <= 100

    async def test_reset_replaces_records(self, database, now):
        await seed_database(n_products=5, n_orders=20, seed=1, now=now)
        await seed_database(n_products=5, n_orders=30, seed=2, reset=True, now=now)

        port = SqlRecordPort(database)

        assert await port.count_orders(OrderCriteria()) == 30
