"""
Dashboard Summary

Headline store figures for the admin landing page.
"""

from typing import Iterable, List

from .numbers import round2
from .records import DailyTotal, Guest, OrderRecord, ProductRecord, RevenueTotals, customer_identity
from .schemas import (
    CustomerRef,
    DashboardStats,
    LatestOrder,
    LowStockProduct,
    OrderLineSummary,
    SalesOverTimePoint,
)


def customer_ref(order: OrderRecord) -> CustomerRef:
    identity = customer_identity(order.user_id, order.phone)
    if isinstance(identity, Guest):
        return CustomerRef(kind="guest", name=order.customer_name, phone=order.phone)
    return CustomerRef(
        kind="identified",
        user_id=identity.user_id,
        name=order.customer_name,
        phone=order.phone,
    )


def latest_order(order: OrderRecord) -> LatestOrder:
    return LatestOrder(
        order_id=order.id,
        order_number=order.order_number,
        customer=customer_ref(order),
        status=order.status,
        delivery_type=order.delivery_type,
        total_amount=round2(order.total_amount),
        created_at=order.created_at,
        items=[
            OrderLineSummary(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price=round2(item.price),
            )
            for item in order.items
        ],
    )


def sales_over_time(totals: Iterable[DailyTotal], max_points: int = 30) -> List[SalesOverTimePoint]:
    """Most recent `max_points` days with orders, ascending by date."""
    points = sorted(totals, key=lambda total: total.day)[-max_points:] if max_points > 0 else []
    return [
        SalesOverTimePoint(
            date=point.day.isoformat(),
            total_sales=round2(point.revenue),
            order_count=point.order_count,
        )
        for point in points
    ]


def build_dashboard(
    revenue: RevenueTotals,
    order_count: int,
    pending_orders: int,
    low_stock: Iterable[ProductRecord],
    latest: Iterable[OrderRecord],
    daily_totals: Iterable[DailyTotal],
    max_points: int = 30,
) -> DashboardStats:
    return DashboardStats(
        total_sales=round2(revenue.gross),
        order_count=order_count,
        pending_orders_count=pending_orders,
        low_stock_products=[
            LowStockProduct(product_id=product.id, name=product.name, stock=product.stock)
            for product in low_stock
        ],
        latest_orders=[latest_order(order) for order in latest],
        sales_over_time=sales_over_time(daily_totals, max_points),
    )
