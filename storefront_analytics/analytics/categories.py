"""
Category Detail

Revenue, inventory value and sales velocity of a single category, with its
best sellers and its share of total store revenue.
"""

from typing import List

from .numbers import ZERO, percentage, round2, to_decimal
from .records import ProductRecord
from .schemas import CategoryDetail, CategoryProduct


def empty_category(name: str) -> CategoryDetail:
    return CategoryDetail(
        category_name=name,
        category_revenue=0.0,
        total_inventory_value=0.0,
        sales_velocity=0,
        top_products=[],
        performance_score=0.0,
        product_count=0,
    )


def build_category_detail(
    name: str,
    products: List[ProductRecord],
    total_store_revenue,
    top_n: int = 3,
) -> CategoryDetail:
    """
    Summarize a category from its products' lifetime counters.

    Args:
        name: Category name as requested
        products: Products of the category
        total_store_revenue: Sum of all order totals, ever
        top_n: Number of best-selling products to include
    """
    if not products:
        return empty_category(name)

    category_revenue = ZERO
    inventory_value = ZERO
    units_sold = 0
    ranked = []

    for product in products:
        price = to_decimal(product.price)
        sold = product.total_sold or 0
        revenue = price * sold

        category_revenue += revenue
        inventory_value += price * (product.stock or 0)
        units_sold += sold
        ranked.append((revenue, product))

    ranked.sort(key=lambda entry: entry[0], reverse=True)
    top_products = [
        CategoryProduct(
            product_id=product.id,
            name=product.name,
            image=product.image,
            price=round2(product.price),
            total_sold=product.total_sold or 0,
            revenue=round2(revenue),
        )
        for revenue, product in ranked[:top_n]
    ]

    score = 0.0
    if category_revenue > 0 and to_decimal(total_store_revenue) > 0:
        score = percentage(category_revenue, total_store_revenue)

    return CategoryDetail(
        category_name=name,
        category_revenue=round2(category_revenue),
        total_inventory_value=round2(inventory_value),
        sales_velocity=units_sold,
        top_products=top_products,
        performance_score=score,
        product_count=len(products),
    )
