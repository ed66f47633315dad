"""
Analytics Response Models

Value objects produced by the engine. They are built fresh for every
request and serialized with camelCase field names.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AnalyticsModel(BaseModel):
    """Base model with camelCase aliases"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class RiskLevel(str, Enum):
    """Inventory health classification"""
    NORMAL = "Normal"
    HIGH_RISK = "High Risk"
    OVERSTOCK = "Overstock"


# =============================================================================
# PRODUCTS & INVENTORY
# =============================================================================

class ProductPerformanceRow(AnalyticsModel):
    """Engagement and sales of one product"""
    product_id: str
    name: str
    category: str
    image: Optional[str] = None
    price: float
    views: int
    add_to_cart_count: int
    total_sold: int
    conversion_rate: float
    revenue_generated: float


class InventoryHealthRow(AnalyticsModel):
    """Stock velocity and risk of one product"""
    product_id: str
    name: str
    category: str
    stock: int
    total_sold: int
    days_since_created: int
    average_daily_sales: float
    days_until_stockout: Optional[float]
    risk_level: RiskLevel
    alerts: List[str]


# =============================================================================
# SALES TRENDS
# =============================================================================

class PeakHourBucket(AnalyticsModel):
    hour: int
    order_count: int


class CategoryTrendRow(AnalyticsModel):
    category: str
    order_count: int
    total_revenue: float


class DailyTrendPoint(AnalyticsModel):
    date: str
    revenue: float
    order_count: int


class OrdersTrendPoint(AnalyticsModel):
    date: str
    order_count: int


class SalesTrends(AnalyticsModel):
    peak_hours: List[PeakHourBucket]
    top_categories: List[CategoryTrendRow]
    revenue_trend: List[DailyTrendPoint]
    orders_trend: List[OrdersTrendPoint]


# =============================================================================
# ORDER INSIGHTS
# =============================================================================

class StatusCount(AnalyticsModel):
    status: str
    count: int


class LocationCount(AnalyticsModel):
    location: str
    count: int


class OrderInsightsSummary(AnalyticsModel):
    """Revenue reconciliation and fulfilment metrics of the in-scope orders"""
    delivery_performance: float
    total_gross_revenue: float
    total_original_amount: float
    total_discount_amount: float
    net_revenue: float
    total_orders: int
    delivered_orders: int
    pending_orders: int
    unique_customers: int
    avg_revenue_per_day: float
    revenue_growth: float
    status_breakdown: List[StatusCount]
    top_delivery_locations: List[LocationCount]


class ComparisonSnapshot(AnalyticsModel):
    """Headline figures of the prior period"""
    previous_revenue: float
    previous_orders: int
    previous_customers: int


class AdvancedAnalytics(AnalyticsModel):
    product_performance: List[ProductPerformanceRow]
    inventory_health: List[InventoryHealthRow]
    sales_trends: SalesTrends
    order_insights: OrderInsightsSummary
    comparison: Optional[ComparisonSnapshot] = None


# =============================================================================
# CATEGORY DETAIL
# =============================================================================

class CategoryProduct(AnalyticsModel):
    product_id: str
    name: str
    image: Optional[str] = None
    price: float
    total_sold: int
    revenue: float


class CategoryDetail(AnalyticsModel):
    category_name: str
    category_revenue: float
    total_inventory_value: float
    sales_velocity: int
    top_products: List[CategoryProduct]
    performance_score: float
    product_count: int


# =============================================================================
# DASHBOARD
# =============================================================================

class LowStockProduct(AnalyticsModel):
    product_id: str
    name: str
    stock: int


class OrderLineSummary(AnalyticsModel):
    product_id: Optional[str]
    product_name: Optional[str]
    quantity: int
    price: float


class CustomerRef(AnalyticsModel):
    """Who placed an order: an account holder or a guest known by phone"""
    kind: str
    user_id: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None


class LatestOrder(AnalyticsModel):
    order_id: str
    order_number: str
    customer: CustomerRef
    status: str
    delivery_type: str
    total_amount: float
    created_at: datetime
    items: List[OrderLineSummary]


class SalesOverTimePoint(AnalyticsModel):
    date: str
    total_sales: float
    order_count: int


class DashboardStats(AnalyticsModel):
    total_sales: float
    order_count: int
    pending_orders_count: int
    low_stock_products: List[LowStockProduct]
    latest_orders: List[LatestOrder]
    sales_over_time: List[SalesOverTimePoint]
