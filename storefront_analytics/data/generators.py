"""
Synthetic Data Generator

Generates a reproducible storefront catalog and order history for local
development and demos.
Includes:
- Products across grocery categories
- Orders with guest checkouts, promo discounts, pickup and delivery
- Line items, with product counters consistent with the generated orders
"""

import random
import uuid
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

import polars as pl
from faker import Faker
import numpy as np


# =============================================================================
# CONFIGURATION
# =============================================================================

CATALOG = [
    ("Grains", [("Hausa Koko Paste", "Bucket"), ("Tuo Zaafi Flour", "Bag"), ("Millet Flour", "Bag"), ("Local Rice", "5kg Bag")]),
    ("Dairy/Grains", [("Millet Fula Balls", "Pack of 5"), ("Wagashi Cheese", "Piece")]),
    ("Oils", [("Zomi Palm Oil", "1 Liter"), ("Groundnut Paste", "500g Jar"), ("Shea Butter Oil", "1 Liter")]),
    ("Spices", [("Dawadawa Condiment", "Bag"), ("Suya Spice", "Jar"), ("Dried Pepper", "Bag")]),
    ("Meats", [("Smoked Guinea Fowl", "Whole"), ("Kilishi", "Pack"), ("Dried Fish", "Bundle")]),
    ("Vegetables", [("Dried Okro", "Bundle"), ("Ayoyo Leaves", "Bundle"), ("Bitter Leaf", "Bundle")]),
]

PRICE_RANGES = {
    "Grains": (10, 60),
    "Dairy/Grains": (8, 40),
    "Oils": (20, 90),
    "Spices": (5, 30),
    "Meats": (40, 150),
    "Vegetables": (5, 25),
}

ORDER_STATUSES = [
    ("pending", 0.10),
    ("processing", 0.10),
    ("shipped", 0.10),
    ("delivered", 0.62),
    ("cancelled", 0.08),
]

# Relative order volume per hour of day: a lunch peak and an evening peak
HOURLY_WEIGHTS = np.array([
    1, 1, 1, 1, 1, 2, 3, 5, 7, 8, 9, 11,
    13, 11, 9, 8, 9, 11, 13, 12, 9, 6, 3, 2,
], dtype=float)

PROMO_CODES = ["WELCOME10", "FESTIVE15", "BULK20"]

ORDER_SCHEMA = {
    "id": pl.Utf8,
    "order_number": pl.Utf8,
    "user_id": pl.Utf8,
    "customer_name": pl.Utf8,
    "phone": pl.Utf8,
    "status": pl.Utf8,
    "payment_status": pl.Utf8,
    "delivery_type": pl.Utf8,
    "address": pl.Utf8,
    "total_amount": pl.Float64,
    "original_amount": pl.Float64,
    "discount_amount": pl.Float64,
    "promo_code": pl.Utf8,
    "created_at": pl.Datetime,
}

ORDER_ITEM_SCHEMA = {
    "id": pl.Utf8,
    "order_id": pl.Utf8,
    "product_id": pl.Utf8,
    "quantity": pl.Int64,
    "price": pl.Float64,
}


# =============================================================================
# GENERATORS
# =============================================================================

class ProductGenerator:
    """Generate a product catalog"""

    def __init__(self, seed: int = 42):
        self.random = random.Random(seed)
        self.rng = np.random.default_rng(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)

    def generate(self, n: int = 40, now: Optional[datetime] = None) -> pl.DataFrame:
        """Generate n products created within the last year"""
        now = now or datetime.now()
        products = []

        for i in range(n):
            category, items = CATALOG[i % len(CATALOG)]
            name, unit = self.random.choice(items)
            low, high = PRICE_RANGES[category]
            price = round(self.random.uniform(low, high), 2)

            products.append({
                "id": str(uuid.UUID(int=self.random.getrandbits(128), version=4)),
                "name": f"{name} #{i + 1}",
                "category": category,
                "description": self.fake.sentence(nb_words=12),
                "unit": unit,
                "image": f"/images/products/{i + 1}.jpg",
                "price": price,
                "cost_price": round(price * self.random.uniform(0.4, 0.7), 2),
                # Some products start near or at zero stock
                "stock": int(self.rng.choice([0, 3, 8, 25, 60, 150], p=[0.05, 0.10, 0.15, 0.30, 0.25, 0.15])),
                "created_at": now - timedelta(
                    days=int(self.rng.integers(1, 365)),
                    hours=int(self.rng.integers(0, 24)),
                ),
            })

        return pl.DataFrame(products)


class OrderGenerator:
    """Generate orders and their line items over a product catalog"""

    def __init__(self, products_df: pl.DataFrame, seed: int = 42):
        self.product_data = products_df.select(["id", "price", "created_at"]).to_dicts()
        self.random = random.Random(seed)
        self.rng = np.random.default_rng(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)

        self.cities = [self.fake.unique.city() for _ in range(12)]
        self.customers = [
            {
                "user_id": str(uuid.UUID(int=self.random.getrandbits(128), version=4)),
                "name": self.fake.name(),
                "phone": self.fake.numerify("02########"),
            }
            for _ in range(60)
        ]

    def _customer(self) -> Dict[str, Optional[str]]:
        # 30% guest checkouts, some recorded with the literal "guest" marker
        if self.random.random() < 0.3:
            return {
                "user_id": self.random.choice([None, None, "guest"]),
                "name": self.fake.name(),
                "phone": self.fake.numerify("05########"),
            }
        return self.random.choice(self.customers)

    def _timestamp(self, start_date: datetime, end_date: datetime) -> datetime:
        span_days = max((end_date - start_date).days, 1)
        day = start_date + timedelta(days=int(self.rng.integers(0, span_days)))
        hour = int(self.rng.choice(24, p=HOURLY_WEIGHTS / HOURLY_WEIGHTS.sum()))
        moment = day.replace(hour=hour, minute=int(self.rng.integers(0, 60)), second=0, microsecond=0)
        return min(moment, end_date)

    def generate(
        self,
        n: int = 600,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[pl.DataFrame, pl.DataFrame]:
        """Generate n orders with items"""
        end_date = end_date or datetime.now()
        start_date = start_date or end_date - timedelta(days=120)

        orders = []
        order_items = []

        for i in range(n):
            order_id = str(uuid.UUID(int=self.random.getrandbits(128), version=4))
            created_at = self._timestamp(start_date, end_date)
            customer = self._customer()

            num_items = int(self.rng.choice([1, 2, 3, 4], p=[0.45, 0.30, 0.15, 0.10]))
            available = [p for p in self.product_data if p["created_at"] <= created_at] or self.product_data

            subtotal = 0.0
            for product in self.random.sample(available, min(num_items, len(available))):
                quantity = int(self.rng.choice([1, 2, 3, 5], p=[0.60, 0.25, 0.10, 0.05]))
                order_items.append({
                    "id": str(uuid.UUID(int=self.random.getrandbits(128), version=4)),
                    "order_id": order_id,
                    "product_id": product["id"],
                    "quantity": quantity,
                    "price": product["price"],
                })
                subtotal += product["price"] * quantity
            subtotal = round(subtotal, 2)

            promo_code = self.random.choice(PROMO_CODES) if self.random.random() < 0.2 else None
            if promo_code:
                percent = int(promo_code[-2:])
                discount = round(subtotal * percent / 100, 2)
            else:
                discount = 0.0

            if (end_date - created_at).days > 7:
                status = self.random.choices(
                    [s[0] for s in ORDER_STATUSES],
                    weights=[s[1] for s in ORDER_STATUSES],
                )[0]
            else:
                status = self.random.choice(["pending", "processing", "shipped"])

            delivery_type = "delivery" if self.random.random() < 0.75 else "pickup"
            address = None
            if delivery_type == "delivery":
                address = f"{self.random.choice(self.cities)}, {self.fake.street_address()}"

            orders.append({
                "id": order_id,
                "order_number": f"ORD-{created_at:%Y%m%d}-{i + 1:05d}",
                "user_id": customer["user_id"],
                "customer_name": customer["name"],
                "phone": customer["phone"],
                "status": status,
                "payment_status": "failed" if status == "cancelled" else (
                    "pending" if status == "pending" else "completed"
                ),
                "delivery_type": delivery_type,
                "address": address,
                "total_amount": round(subtotal - discount, 2),
                # Older orders predate discount tracking
                "original_amount": subtotal if self.random.random() > 0.1 else None,
                "discount_amount": discount,
                "promo_code": promo_code,
                "created_at": created_at,
            })

        return (
            pl.DataFrame(orders, schema=ORDER_SCHEMA),
            pl.DataFrame(order_items, schema=ORDER_ITEM_SCHEMA),
        )


def with_engagement(
    products_df: pl.DataFrame,
    order_items_df: pl.DataFrame,
    seed: int = 42,
) -> pl.DataFrame:
    """
    Fill the product counters from the generated line items.

    total_sold is the quantity ordered; add-to-cart and view counts are
    drawn above the number of orders containing the product, so that
    views >= add_to_cart_count >= orders for every product.
    """
    rng = np.random.default_rng(seed)

    sales = order_items_df.group_by("product_id").agg(
        pl.col("quantity").sum().alias("sold"),
        pl.col("order_id").n_unique().alias("orders"),
    )
    sold = dict(zip(sales["product_id"].to_list(), sales["sold"].to_list()))
    ordered = dict(zip(sales["product_id"].to_list(), sales["orders"].to_list()))

    ids = products_df["id"].to_list()
    total_sold = np.array([sold.get(pid, 0) for pid in ids], dtype=np.int64)
    orders = np.array([ordered.get(pid, 0) for pid in ids], dtype=np.int64)
    add_to_cart = orders + rng.integers(0, 25, size=len(ids))
    views = add_to_cart + rng.integers(0, 400, size=len(ids))

    return products_df.with_columns(
        pl.Series("total_sold", total_sold),
        pl.Series("add_to_cart_count", add_to_cart),
        pl.Series("views", views),
    )


# =============================================================================
# MAIN GENERATOR
# =============================================================================

class DataGenerator:
    """Main data generator orchestrator"""

    def __init__(self, seed: int = 42):
        self.seed = seed

    def generate_all(
        self,
        n_products: int = 40,
        n_orders: int = 600,
        days: int = 120,
        now: Optional[datetime] = None,
    ) -> Dict[str, pl.DataFrame]:
        """Generate the complete dataset"""
        now = now or datetime.now()

        products_df = ProductGenerator(self.seed).generate(n_products, now=now)
        orders_df, order_items_df = OrderGenerator(products_df, self.seed).generate(
            n_orders,
            start_date=now - timedelta(days=days),
            end_date=now,
        )

        return {
            "products": with_engagement(products_df, order_items_df, self.seed),
            "orders": orders_df,
            "order_items": order_items_df,
        }
