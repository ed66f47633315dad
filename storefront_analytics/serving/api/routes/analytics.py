"""
Analytics API Endpoints

Dashboard, advanced analytics and category detail for the admin UI.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
import structlog

from storefront_analytics.analytics import AnalyticsEngine, AnalyticsFilters, RecordAccessPort
from storefront_analytics.analytics.schemas import AdvancedAnalytics, CategoryDetail, DashboardStats
from storefront_analytics.config import get_settings
from storefront_analytics.database.connection import get_session_factory
from storefront_analytics.database.repository import SqlRecordPort

router = APIRouter()
logger = structlog.get_logger(__name__)


def get_record_port() -> RecordAccessPort:
    """Record access port bound to the application's session factory."""
    return SqlRecordPort(get_session_factory())


def get_analytics_engine(port: RecordAccessPort = Depends(get_record_port)) -> AnalyticsEngine:
    return AnalyticsEngine(port, get_settings().analytics)


def get_filters(
    date_range: str = Query("all", alias="dateRange"),
    custom_start: Optional[str] = Query(None, alias="customStart"),
    custom_end: Optional[str] = Query(None, alias="customEnd"),
    category_filter: Optional[str] = Query(None, alias="categoryFilter"),
    product_filter: Optional[str] = Query(None, alias="productFilter"),
    location_filter: Optional[str] = Query(None, alias="locationFilter"),
    channel_filter: Optional[str] = Query("all", alias="channelFilter"),
    comparison_mode: Optional[str] = Query(None, alias="comparisonMode"),
) -> AnalyticsFilters:
    return AnalyticsFilters(
        date_range=date_range,
        custom_start=custom_start,
        custom_end=custom_end,
        category_filter=category_filter,
        product_filter=product_filter,
        location_filter=location_filter,
        channel_filter=channel_filter,
        comparison_mode=comparison_mode,
    )


@router.get("", response_model=DashboardStats, response_model_by_alias=True)
async def get_dashboard(
    engine: AnalyticsEngine = Depends(get_analytics_engine),
) -> DashboardStats:
    """
    Dashboard statistics.

    Total sales, order counts, low-stock products, latest orders
    and daily sales over time.
    """
    return await engine.dashboard()


@router.get("/advanced", response_model=AdvancedAnalytics, response_model_by_alias=True)
async def get_advanced_analytics(
    filters: AnalyticsFilters = Depends(get_filters),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
) -> AdvancedAnalytics:
    """
    Advanced analytics under the given filters.

    Product performance, inventory health, sales trends, order insights
    and an optional comparison against a previous period.
    """
    return await engine.advanced(filters)


@router.get("/category/{category_name:path}", response_model=CategoryDetail, response_model_by_alias=True)
async def get_category_detail(
    category_name: str,
    engine: AnalyticsEngine = Depends(get_analytics_engine),
) -> CategoryDetail:
    """Revenue, inventory value and top products of one category."""
    return await engine.category_detail(category_name)
