"""
Unit Tests - Inventory Risk
"""
from datetime import timedelta

import pytest

from storefront_analytics.analytics.inventory import (
    LOW_STOCK_ALERT,
    OUT_OF_STOCK_ALERT,
    assess_product,
    build_inventory_health,
    days_since_created,
)
from storefront_analytics.analytics.schemas import RiskLevel


class TestAssessProduct:
    """Tests for assess_product"""

    def test_unsold_product_becomes_overstock(self, make_product, now):
        """Created 40 days ago, nothing sold, stock 20"""
        product = make_product(created_at=now - timedelta(days=40), total_sold=0, stock=20)

        row = assess_product(product, now)

        assert row.risk_level == RiskLevel.OVERSTOCK
        assert "No sales in over 30 days" in row.alerts
        assert row.days_until_stockout is None

    def test_fast_seller_is_high_risk(self, make_product, now):
        """Created 10 days ago, 30 sold, 5 left"""
        product = make_product(created_at=now - timedelta(days=10), total_sold=30, stock=5)

        row = assess_product(product, now)

        assert row.average_daily_sales == 3.0
        assert row.days_until_stockout == 1.67
        assert row.risk_level == RiskLevel.HIGH_RISK
        assert row.alerts == [LOW_STOCK_ALERT]

    def test_sold_out_product_alerts_without_risk(self, make_product, now):
        product = make_product(total_sold=12, stock=0)

        row = assess_product(product, now)

        assert row.risk_level == RiskLevel.NORMAL
        assert row.alerts == [OUT_OF_STOCK_ALERT]
        assert row.days_until_stockout == 0.0

    def test_healthy_product(self, make_product, now):
        product = make_product(total_sold=10, stock=500)

        row = assess_product(product, now)

        assert row.risk_level == RiskLevel.NORMAL
        assert row.alerts == []
        assert row.days_until_stockout == 500.0

    def test_new_product_counts_as_one_day(self, make_product, now):
        product = make_product(created_at=now - timedelta(hours=3), total_sold=4, stock=100)

        row = assess_product(product, now)

        assert row.days_since_created == 1
        assert row.average_daily_sales == 4.0

    def test_thresholds_are_configurable(self, make_product, now):
        product = make_product(created_at=now - timedelta(days=10), total_sold=0)

        row = assess_product(product, now, overstock_idle_days=5)

        assert row.risk_level == RiskLevel.OVERSTOCK
        assert row.alerts == ["No sales in over 5 days"]

    def test_stockout_boundary_exactly_at_window(self, make_product, now):
        # 70 sold over 10 days, 49 left: exactly 7 days of stock
        product = make_product(created_at=now - timedelta(days=10), total_sold=70, stock=49)

        row = assess_product(product, now)

        assert row.days_until_stockout == 7.0
        assert row.risk_level == RiskLevel.NORMAL

    def test_stockout_just_below_window_is_high_risk(self, make_product, now):
        # 7 * 2000 / 2001 = 6.9965 days, displayed as 7.0
        product = make_product(created_at=now - timedelta(days=2000), total_sold=2001, stock=7)

        row = assess_product(product, now)

        assert row.days_until_stockout == 7.0
        assert row.risk_level == RiskLevel.HIGH_RISK
        assert row.alerts == ["Low stock - reorder soon"]


class TestInventoryInvariants:

    @pytest.mark.parametrize("age,sold,stock", [
        (1, 0, 0), (5, 0, 10), (31, 0, 0), (45, 0, 3), (10, 30, 5),
        (10, 30, 0), (60, 1, 1), (2, 100, 1), (400, 5, 900),
    ])
    def test_risk_labels_match_their_conditions(self, make_product, now, age, sold, stock):
        product = make_product(created_at=now - timedelta(days=age), total_sold=sold, stock=stock)

        [row] = build_inventory_health([product], now)

        if row.risk_level == RiskLevel.OVERSTOCK:
            assert row.total_sold == 0 and row.days_since_created > 30
        if row.risk_level == RiskLevel.HIGH_RISK:
            assert row.stock > 0 and row.days_until_stockout <= 7

    def test_days_since_created(self, now):
        assert days_since_created(now - timedelta(days=3, hours=5), now) == 3
        assert days_since_created(now, now) == 1
