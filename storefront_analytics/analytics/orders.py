"""
Order Insights

Revenue reconciliation, fulfilment ratio, customer counting and delivery
location ranking over the orders matching the active filters.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .date_ranges import DateInterval
from .numbers import percentage, round2, safe_divide
from .records import RevenueTotals, count_unique_customers
from .schemas import LocationCount, OrderInsightsSummary, StatusCount

# Divisor for the per-day average when the store has no orders at all
DEFAULT_AVERAGE_DAYS = 30


@dataclass
class OrderQueryResults:
    """Raw figures gathered from the record store for one filter set"""
    revenue: RevenueTotals
    total_orders: int
    delivered_orders: int
    pending_orders: int
    customer_keys: List[Tuple[Optional[str], Optional[str]]]
    status_counts: Dict[str, int]
    delivery_addresses: List[str] = field(default_factory=list)
    earliest_order_at: Optional[datetime] = None


def location_key(address: Optional[str], key_length: int = 30) -> Optional[str]:
    """
    Coarse delivery location of an address.

    The part before the first comma, or the first `key_length` characters
    when there is no comma (or nothing before it).
    """
    if not address or not address.strip():
        return None
    address = address.strip()
    if "," in address:
        head = address.split(",", 1)[0].strip()
        if head:
            return head
    return address[:key_length].strip() or None


def top_delivery_locations(
    addresses: Iterable[str],
    limit: int = 10,
    key_length: int = 30,
) -> List[LocationCount]:
    """Most frequent delivery locations; ties ordered by location name."""
    counts: Dict[str, int] = {}
    for address in addresses:
        key = location_key(address, key_length)
        if key is None:
            continue
        counts[key] = counts.get(key, 0) + 1

    ranked = sorted(counts.items(), key=lambda entry: (-entry[1], entry[0]))[:limit]
    return [LocationCount(location=location, count=count) for location, count in ranked]


def status_breakdown(counts: Dict[str, int]) -> List[StatusCount]:
    ranked = sorted(counts.items(), key=lambda entry: (-entry[1], entry[0]))
    return [StatusCount(status=status, count=count) for status, count in ranked]


def average_revenue_per_day(
    gross_revenue,
    interval: Optional[DateInterval],
    earliest_order_at: Optional[datetime],
    now: datetime,
) -> float:
    """
    Gross revenue spread over the filtered window, or over the days since
    the first order when unfiltered.
    """
    if interval is not None:
        days = max(1, math.ceil(interval.days))
    elif earliest_order_at is not None:
        days = max(1, math.ceil((now - earliest_order_at).total_seconds() / 86400))
    else:
        days = DEFAULT_AVERAGE_DAYS
    return round2(safe_divide(gross_revenue, days))


def build_order_insights(
    results: OrderQueryResults,
    interval: Optional[DateInterval],
    now: datetime,
    revenue_growth: float = 0.0,
    top_locations: int = 10,
    location_key_length: int = 30,
) -> OrderInsightsSummary:
    """Assemble the order insight summary from the gathered figures."""
    revenue = results.revenue

    return OrderInsightsSummary(
        delivery_performance=percentage(results.delivered_orders, results.total_orders),
        total_gross_revenue=round2(revenue.gross),
        total_original_amount=round2(revenue.original),
        total_discount_amount=round2(revenue.discount),
        net_revenue=round2(revenue.net),
        total_orders=results.total_orders,
        delivered_orders=results.delivered_orders,
        pending_orders=results.pending_orders,
        unique_customers=count_unique_customers(results.customer_keys),
        avg_revenue_per_day=average_revenue_per_day(
            revenue.gross, interval, results.earliest_order_at, now
        ),
        revenue_growth=revenue_growth,
        status_breakdown=status_breakdown(results.status_counts),
        top_delivery_locations=top_delivery_locations(
            results.delivery_addresses, top_locations, location_key_length
        ),
    )
