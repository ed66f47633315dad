"""
Period Comparison

Re-runs the headline order queries against the prior period of the same
granularity and derives revenue growth.
"""

import asyncio
from datetime import datetime
from typing import Optional

import structlog

from .date_ranges import ComparisonMode, DateInterval, resolve_comparison_range
from .numbers import ZERO, percentage, round2, to_decimal
from .ports import OrderCriteria, RecordAccessPort
from .records import count_unique_customers
from .schemas import ComparisonSnapshot

logger = structlog.get_logger(__name__)


def comparison_criteria(
    criteria: OrderCriteria,
    mode: Optional[ComparisonMode],
    now: datetime,
) -> Optional[OrderCriteria]:
    """
    Criteria of the prior period, or None when no comparison applies.

    A comparison needs both a mode and a concrete primary interval. The
    channel and location filters carry over; the date bound is replaced.
    """
    if mode is None or criteria.interval is None:
        return None
    previous: Optional[DateInterval] = resolve_comparison_range(mode, now)
    if previous is None:
        return None
    return criteria.with_interval(previous)


async def fetch_comparison(
    port: RecordAccessPort,
    criteria: OrderCriteria,
) -> ComparisonSnapshot:
    """Revenue, order count and unique customers of the prior period."""
    revenue, orders, keys = await asyncio.gather(
        port.sum_revenue(criteria),
        port.count_orders(criteria),
        port.customer_keys(criteria),
    )
    logger.debug(
        "Comparison period loaded",
        start=criteria.interval.start.isoformat(),
        end=criteria.interval.end.isoformat(),
        orders=orders,
    )
    return ComparisonSnapshot(
        previous_revenue=round2(revenue.gross),
        previous_orders=orders,
        previous_customers=count_unique_customers(keys),
    )


def revenue_growth(current, snapshot: Optional[ComparisonSnapshot]) -> float:
    """(current - previous) / previous * 100, 0 without a positive previous revenue."""
    if snapshot is None:
        return 0.0
    previous = to_decimal(snapshot.previous_revenue)
    if previous <= ZERO:
        return 0.0
    return percentage(to_decimal(current) - previous, previous)
