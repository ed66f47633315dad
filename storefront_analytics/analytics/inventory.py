"""
Inventory Risk

Projects how long each product's stock lasts at its historical sales rate
and classifies the product as Normal, High Risk or Overstock.

Rules are evaluated in order and the risk level of a later rule replaces
that of an earlier one, while alerts accumulate:

1. projected stockout within the warning window and stock left -> High Risk
2. nothing ever sold and listed longer than the idle window -> Overstock
3. stock exhausted after selling -> "Out of stock" alert only
"""

from datetime import datetime
from typing import Iterable, List

from .numbers import round2, safe_divide, to_decimal
from .records import ProductRecord
from .schemas import InventoryHealthRow, RiskLevel

LOW_STOCK_ALERT = "Low stock - reorder soon"
NO_SALES_ALERT = "No sales in over {days} days"
OUT_OF_STOCK_ALERT = "Out of stock"


def days_since_created(created_at: datetime, now: datetime) -> int:
    """Whole days a product has been listed, at least 1."""
    return max(1, (now - created_at).days)


def assess_product(
    product: ProductRecord,
    now: datetime,
    stockout_warning_days: int = 7,
    overstock_idle_days: int = 30,
) -> InventoryHealthRow:
    """Compute stock velocity and risk for one product."""
    stock = product.stock or 0
    total_sold = product.total_sold or 0
    listed_days = days_since_created(product.created_at, now)

    average_daily_sales = safe_divide(total_sold, listed_days)
    projected_days = to_decimal(stock) / average_daily_sales if average_daily_sales > 0 else None

    risk_level = RiskLevel.NORMAL
    alerts: List[str] = []

    if projected_days is not None and projected_days < stockout_warning_days and stock > 0:
        risk_level = RiskLevel.HIGH_RISK
        alerts.append(LOW_STOCK_ALERT)

    if total_sold == 0 and listed_days > overstock_idle_days:
        risk_level = RiskLevel.OVERSTOCK
        alerts.append(NO_SALES_ALERT.format(days=overstock_idle_days))

    if stock == 0 and total_sold > 0:
        alerts.append(OUT_OF_STOCK_ALERT)

    return InventoryHealthRow(
        product_id=product.id,
        name=product.name,
        category=product.category,
        stock=stock,
        total_sold=total_sold,
        days_since_created=listed_days,
        average_daily_sales=round2(average_daily_sales),
        days_until_stockout=round2(projected_days) if projected_days is not None else None,
        risk_level=risk_level,
        alerts=alerts,
    )


def build_inventory_health(
    products: Iterable[ProductRecord],
    now: datetime,
    stockout_warning_days: int = 7,
    overstock_idle_days: int = 30,
) -> List[InventoryHealthRow]:
    return [
        assess_product(product, now, stockout_warning_days, overstock_idle_days)
        for product in products
    ]
