"""
Product Performance

Per-product engagement, sales and conversion. Without a date filter the
product's lifetime counters are used; with one, units and revenue are
re-derived from the line items of orders inside the interval.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from .numbers import ZERO, percentage, round2
from .records import OrderRecord, ProductRecord
from .schemas import ProductPerformanceRow


@dataclass
class ProductSales:
    """Units and revenue of one product within a set of orders"""
    quantity: int = 0
    revenue: Decimal = ZERO


def aggregate_sales_by_product(orders: Iterable[OrderRecord]) -> Dict[str, ProductSales]:
    """Sum line-item quantity and price * quantity per product id."""
    sales: Dict[str, ProductSales] = {}
    for order in orders:
        for item in order.items:
            if not item.product_id:
                continue
            entry = sales.setdefault(item.product_id, ProductSales())
            entry.quantity += item.quantity or 0
            entry.revenue += (item.price or ZERO) * (item.quantity or 0)
    return sales


def product_performance_row(
    product: ProductRecord,
    sales: Optional[ProductSales] = None,
    filtered: bool = False,
) -> ProductPerformanceRow:
    """
    Build the performance row of one product.

    Args:
        product: Catalog record
        sales: In-range sales of the product, if any
        filtered: Whether a date filter is active
    """
    if filtered:
        sales = sales or ProductSales()
        total_sold = sales.quantity
        revenue = sales.revenue
    else:
        total_sold = product.total_sold or 0
        revenue = product.price * total_sold

    views = product.views or 0

    return ProductPerformanceRow(
        product_id=product.id,
        name=product.name,
        category=product.category,
        image=product.image,
        price=round2(product.price),
        views=views,
        add_to_cart_count=product.add_to_cart_count or 0,
        total_sold=total_sold,
        conversion_rate=percentage(total_sold, views),
        revenue_generated=round2(revenue),
    )


def build_product_performance(
    products: Iterable[ProductRecord],
    orders_in_range: Optional[Iterable[OrderRecord]] = None,
) -> List[ProductPerformanceRow]:
    """
    Performance rows sorted by revenue, highest first.

    Args:
        products: Products to report on
        orders_in_range: Orders inside the active date filter, or None when
            no date filter is active

    Returns:
        Rows ordered by revenue; products with equal revenue keep their
        input order
    """
    filtered = orders_in_range is not None
    sales = aggregate_sales_by_product(orders_in_range) if filtered else {}

    rows = [
        product_performance_row(product, sales.get(product.id), filtered)
        for product in products
    ]
    return sorted(rows, key=lambda row: row.revenue_generated, reverse=True)
