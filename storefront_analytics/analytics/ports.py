"""
Record Access Port

Read-only query surface the analytics engine needs from the record store.
Implementations must allow several calls to be awaited concurrently.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Tuple

from .date_ranges import DateInterval
from .records import DailyTotal, OrderRecord, ProductRecord, RevenueTotals


@dataclass(frozen=True)
class OrderCriteria:
    """
    Order-level filter shared by every order query.

    Attributes:
        interval: Inclusive created_at bounds, None for no date filter
        channel: Delivery type to keep (`delivery` or `pickup`)
        location: Case-insensitive substring of the order address
        status: Order status to keep
        delivery_with_address: Keep only delivery orders with a non-empty address
    """
    interval: Optional[DateInterval] = None
    channel: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None
    delivery_with_address: bool = False

    def with_status(self, status: str) -> "OrderCriteria":
        return replace(self, status=status)

    def with_interval(self, interval: Optional[DateInterval]) -> "OrderCriteria":
        return replace(self, interval=interval)

    def deliveries_with_address(self) -> "OrderCriteria":
        return replace(self, delivery_with_address=True)


class RecordAccessPort(Protocol):
    """Read port over product and order records."""

    async def find_products(
        self,
        category: Optional[str] = None,
        product_id: Optional[str] = None,
    ) -> List[ProductRecord]:
        """Products, optionally restricted to a category and/or one id."""
        ...

    async def low_stock_products(self, threshold: int) -> List[ProductRecord]:
        """Products with stock below `threshold`, lowest stock first."""
        ...

    async def find_orders(self, criteria: OrderCriteria) -> List[OrderRecord]:
        """Orders matching the criteria, with line items."""
        ...

    async def latest_orders(self, limit: int) -> List[OrderRecord]:
        """The `limit` most recent orders, newest first."""
        ...

    async def count_orders(self, criteria: OrderCriteria) -> int:
        ...

    async def sum_revenue(self, criteria: OrderCriteria) -> RevenueTotals:
        """Gross, original (defaulting to gross) and discount sums."""
        ...

    async def customer_keys(self, criteria: OrderCriteria) -> List[Tuple[Optional[str], Optional[str]]]:
        """Distinct (user_id, phone) pairs of matching orders."""
        ...

    async def status_counts(self, criteria: OrderCriteria) -> Dict[str, int]:
        ...

    async def daily_totals(self, criteria: OrderCriteria) -> List[DailyTotal]:
        """Revenue and order count per calendar day, ascending."""
        ...

    async def order_addresses(self, criteria: OrderCriteria) -> List[str]:
        ...

    async def earliest_order_date(self) -> Optional[datetime]:
        ...
