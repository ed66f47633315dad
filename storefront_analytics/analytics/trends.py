"""
Sales Trends

Peak ordering hours, revenue by category, and the daily revenue/order
series for the dashboard charts.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from .date_ranges import DateInterval, DateRangeSelector
from .numbers import ZERO, round2
from .records import DailyTotal, OrderRecord
from .schemas import CategoryTrendRow, DailyTrendPoint, OrdersTrendPoint, PeakHourBucket

# Days of history implied by a selector when drawing the daily trend
TREND_DAYS = {
    DateRangeSelector.TODAY: 1,
    DateRangeSelector.WEEK: 7,
    DateRangeSelector.THIRTY_DAYS: 30,
}


@dataclass
class CategoryAccumulator:
    order_count: int = 0
    revenue: Decimal = ZERO


def peak_hours(orders: Iterable[OrderRecord]) -> List[PeakHourBucket]:
    """
    Order counts per local hour of day, busiest first.

    Hours without orders are omitted. Equal counts are ordered by hour.
    """
    counts: Dict[int, int] = {}
    for order in orders:
        hour = order.created_at.hour
        counts[hour] = counts.get(hour, 0) + 1

    ranked = sorted(counts.items(), key=lambda entry: (-entry[1], entry[0]))
    return [PeakHourBucket(hour=hour, order_count=count) for hour, count in ranked]


def category_revenue(orders: Iterable[OrderRecord]) -> List[CategoryTrendRow]:
    """
    Revenue per product category from line items, highest first.

    Every line item counts as one occurrence of its category, so an order
    with two items of the same category contributes 2 to `order_count`.
    Items whose product no longer resolves to a category are skipped.
    """
    totals: Dict[str, CategoryAccumulator] = {}
    for order in orders:
        for item in order.items:
            if not item.category:
                continue
            entry = totals.setdefault(item.category, CategoryAccumulator())
            entry.order_count += 1
            entry.revenue += (item.price or ZERO) * (item.quantity or 0)

    ranked = sorted(totals.items(), key=lambda entry: (-entry[1].revenue, entry[0]))
    return [
        CategoryTrendRow(
            category=category,
            order_count=entry.order_count,
            total_revenue=round2(entry.revenue),
        )
        for category, entry in ranked
    ]


def trend_interval(
    selector: DateRangeSelector,
    interval: Optional[DateInterval],
    now: datetime,
    max_days: int = 30,
) -> DateInterval:
    """
    Window of the daily trend.

    Starts at the later of the active filter's start and `now` minus the
    selector's implied days (never more than `max_days`), and ends at the
    filter's end (or `now` when unfiltered).
    """
    days = min(TREND_DAYS.get(selector, max_days), max_days)
    earliest = now - timedelta(days=days)

    if interval is None:
        return DateInterval(start=earliest, end=now)
    return DateInterval(start=max(interval.start, earliest), end=interval.end)


def daily_trend(
    totals: Iterable[DailyTotal],
    max_points: int = 30,
) -> Tuple[List[DailyTrendPoint], List[OrdersTrendPoint]]:
    """
    Revenue and order series, ascending by date, keeping the most recent
    `max_points` days.
    """
    points = sorted(totals, key=lambda total: total.day)[-max_points:] if max_points > 0 else []

    revenue_trend = [
        DailyTrendPoint(
            date=point.day.isoformat(),
            revenue=round2(point.revenue),
            order_count=point.order_count,
        )
        for point in points
    ]
    orders_trend = [
        OrdersTrendPoint(date=point.date, order_count=point.order_count)
        for point in revenue_trend
    ]
    return revenue_trend, orders_trend
