"""
Analytics Engine

Entry point for the three analytics views. Resolves the request filters,
fans the independent record queries out concurrently, and hands the
results to the metric calculators.
"""

import asyncio
import uuid
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional

import structlog
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront_analytics.config.settings import AnalyticsSettings
from storefront_analytics.database.models import DeliveryType, OrderStatus

from .categories import build_category_detail, empty_category
from .comparison import comparison_criteria, fetch_comparison, revenue_growth
from .dashboard import build_dashboard
from .date_ranges import ComparisonMode, DateRangeSelector, resolve_date_range
from .exceptions import InvalidFilterError, InvalidIdentifierError
from .inventory import build_inventory_health
from .orders import OrderQueryResults, build_order_insights
from .ports import OrderCriteria, RecordAccessPort
from .products import build_product_performance
from .schemas import AdvancedAnalytics, CategoryDetail, DashboardStats, SalesTrends
from .trends import category_revenue, daily_trend, peak_hours, trend_interval

logger = structlog.get_logger(__name__)

ALL = "all"
CHANNELS = [channel.value for channel in DeliveryType]


class AnalyticsFilters(BaseModel):
    """Filters of the advanced analytics view, as received"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date_range: str = ALL
    custom_start: Optional[str] = None
    custom_end: Optional[str] = None
    category_filter: Optional[str] = None
    product_filter: Optional[str] = None
    location_filter: Optional[str] = None
    channel_filter: Optional[str] = ALL
    comparison_mode: Optional[str] = None


def _active(value: Optional[str]) -> Optional[str]:
    """None for missing, blank or `all` filter values."""
    if value is None or not value.strip() or value.strip().lower() == ALL:
        return None
    return value.strip()


def _parse_channel(value: Optional[str]) -> Optional[str]:
    channel = _active(value)
    if channel is None:
        return None
    channel = channel.lower()
    if channel not in CHANNELS:
        raise InvalidFilterError("channelFilter", channel, [ALL] + CHANNELS)
    return channel


def _parse_product_id(value: Optional[str]) -> Optional[str]:
    product_id = _active(value)
    if product_id is None:
        return None
    try:
        return str(uuid.UUID(product_id))
    except ValueError:
        raise InvalidIdentifierError("productFilter", product_id)


async def _nothing() -> None:
    return None


class AnalyticsEngine:
    """
    Stateless analytics over a record access port.

    Example:
        engine = AnalyticsEngine(port, settings.analytics)
        stats = await engine.dashboard()
    """

    def __init__(
        self,
        port: RecordAccessPort,
        settings: Optional[AnalyticsSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.port = port
        self.settings = settings or AnalyticsSettings()
        self.clock = clock

    async def dashboard(self) -> DashboardStats:
        """Headline figures for the admin landing page."""
        everything = OrderCriteria()

        revenue, order_count, pending, low_stock, latest, totals = await asyncio.gather(
            self.port.sum_revenue(everything),
            self.port.count_orders(everything),
            self.port.count_orders(everything.with_status(OrderStatus.PENDING.value)),
            self.port.low_stock_products(self.settings.low_stock_threshold),
            self.port.latest_orders(self.settings.latest_orders_limit),
            self.port.daily_totals(everything),
        )

        logger.info(
            "Dashboard computed",
            orders=order_count,
            pending=pending,
            low_stock=len(low_stock),
        )
        return build_dashboard(
            revenue,
            order_count,
            pending,
            low_stock,
            latest,
            totals,
            self.settings.sales_over_time_points,
        )

    async def advanced(self, filters: AnalyticsFilters) -> AdvancedAnalytics:
        """Product, inventory, trend and order analytics under the given filters."""
        now = self.clock()
        cfg = self.settings

        selector = DateRangeSelector.parse(filters.date_range)
        interval = resolve_date_range(
            selector,
            filters.custom_start,
            filters.custom_end,
            now=now,
            lookback_days=cfg.custom_range_lookback_days,
        )
        criteria = OrderCriteria(
            interval=interval,
            channel=_parse_channel(filters.channel_filter),
            location=_active(filters.location_filter),
        )
        product_id = _parse_product_id(filters.product_filter)
        category = _active(filters.category_filter)
        previous = comparison_criteria(criteria, ComparisonMode.parse(filters.comparison_mode), now)
        trend_window = trend_interval(selector, interval, now, cfg.trend_window_days)

        logger.info(
            "Advanced analytics requested",
            date_range=selector.value,
            start=interval.start.isoformat() if interval else None,
            end=interval.end.isoformat() if interval else None,
            channel=criteria.channel,
            location=criteria.location,
            category=category,
            product_id=product_id,
            comparison=previous is not None,
        )

        queries: List[Awaitable[Any]] = [
            self.port.find_products(category=category, product_id=product_id),
            self.port.find_orders(criteria),
            self.port.count_orders(criteria),
            self.port.count_orders(criteria.with_status(OrderStatus.DELIVERED.value)),
            self.port.count_orders(criteria.with_status(OrderStatus.PENDING.value)),
            self.port.sum_revenue(criteria),
            self.port.customer_keys(criteria),
            self.port.status_counts(criteria),
            self.port.order_addresses(criteria.deliveries_with_address()),
            self.port.daily_totals(criteria.with_interval(trend_window)),
            self.port.earliest_order_date() if interval is None else _nothing(),
            fetch_comparison(self.port, previous) if previous is not None else _nothing(),
        ]
        (
            products,
            orders,
            total_orders,
            delivered,
            pending,
            revenue,
            customer_keys,
            statuses,
            addresses,
            totals,
            earliest,
            comparison,
        ) = await asyncio.gather(*queries)

        logger.debug("Record queries completed", products=len(products), orders=len(orders))

        revenue_trend, orders_trend = daily_trend(totals, cfg.trend_window_days)
        results = OrderQueryResults(
            revenue=revenue,
            total_orders=total_orders,
            delivered_orders=delivered,
            pending_orders=pending,
            customer_keys=customer_keys,
            status_counts=statuses,
            delivery_addresses=addresses,
            earliest_order_at=earliest,
        )

        return AdvancedAnalytics(
            product_performance=build_product_performance(
                products, orders if interval is not None else None
            ),
            inventory_health=build_inventory_health(
                products, now, cfg.stockout_warning_days, cfg.overstock_idle_days
            ),
            sales_trends=SalesTrends(
                peak_hours=peak_hours(orders),
                top_categories=category_revenue(orders),
                revenue_trend=revenue_trend,
                orders_trend=orders_trend,
            ),
            order_insights=build_order_insights(
                results,
                interval,
                now,
                revenue_growth=revenue_growth(revenue.gross, comparison),
                top_locations=cfg.top_locations_limit,
                location_key_length=cfg.location_key_length,
            ),
            comparison=comparison,
        )

    async def category_detail(self, category_name: str) -> CategoryDetail:
        """Summary of one category; unknown categories yield a zeroed detail."""
        name = (category_name or "").strip()
        if not name:
            return empty_category(name)

        products, store_revenue = await asyncio.gather(
            self.port.find_products(category=name),
            self.port.sum_revenue(OrderCriteria()),
        )

        logger.info("Category detail computed", category=name, products=len(products))
        return build_category_detail(
            name, products, store_revenue.gross, self.settings.top_category_products
        )
