"""
Demo Database Seeder

Writes a synthetic catalog and order history into the storefront tables.
Development only: the analytics service never calls this.

Usage:
    python -m storefront_analytics.ingestion.seed_db --products 40 --orders 600 --reset
"""

import argparse
import asyncio
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import polars as pl
from sqlalchemy import delete, insert

from storefront_analytics.config.logging import configure_logging, get_logger
from storefront_analytics.data.generators import DataGenerator
from storefront_analytics.database.connection import close_database, get_db, get_engine, init_database
from storefront_analytics.database.models import Base, Order, OrderItem, Product

logger = get_logger(__name__)

CHUNK_SIZE = 1000

MONEY_COLUMNS = {"price", "cost_price", "total_amount", "original_amount", "discount_amount"}
UUID_COLUMNS = {"id", "order_id", "product_id"}


def to_rows(df: pl.DataFrame) -> List[Dict[str, Any]]:
    """Convert a generated frame into insertable rows."""
    rows = []
    for row in df.to_dicts():
        for column in MONEY_COLUMNS & row.keys():
            if row[column] is not None:
                row[column] = Decimal(str(row[column]))
        for column in UUID_COLUMNS & row.keys():
            if row[column] is not None:
                row[column] = uuid.UUID(row[column])
        rows.append(row)
    return rows


async def execute_batch_insert(model: Any, records: List[Dict[str, Any]]) -> None:
    """Insert records in chunks"""
    if not records:
        return

    async with get_db() as db:
        for i in range(0, len(records), CHUNK_SIZE):
            await db.execute(insert(model), records[i:i + CHUNK_SIZE])
    logger.info("Inserted records", table=model.__tablename__, count=len(records))


async def seed_database(
    n_products: int = 40,
    n_orders: int = 600,
    days: int = 120,
    seed: int = 42,
    reset: bool = False,
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """
    Generate and load the demo dataset.

    The database must already be initialized with init_database().

    Args:
        n_products: Catalog size
        n_orders: Number of orders
        days: Length of the order history ending at `now`
        seed: Random seed; the same seed yields the same dataset
        reset: Delete existing orders and products first

    Returns:
        Row counts per table
    """
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if reset:
        logger.warning("Deleting existing storefront records")
        async with get_db() as db:
            await db.execute(delete(OrderItem))
            await db.execute(delete(Order))
            await db.execute(delete(Product))

    data = DataGenerator(seed).generate_all(n_products, n_orders, days, now=now)

    await execute_batch_insert(Product, to_rows(data["products"]))
    await execute_batch_insert(Order, to_rows(data["orders"]))
    await execute_batch_insert(OrderItem, to_rows(data["order_items"]))

    counts = {name: len(df) for name, df in data.items()}
    logger.info("Database seeding completed", **counts)
    return counts


async def main(args: argparse.Namespace) -> None:
    configure_logging()
    await init_database(args.database_url)
    try:
        await seed_database(
            n_products=args.products,
            n_orders=args.orders,
            days=args.days,
            seed=args.seed,
            reset=args.reset,
        )
    except Exception as e:
        logger.error("Seeding failed", error=str(e), error_type=type(e).__name__)
        raise
    finally:
        await close_database()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed the storefront database with demo data")
    parser.add_argument("--products", type=int, default=40, help="Number of products (default: 40)")
    parser.add_argument("--orders", type=int, default=600, help="Number of orders (default: 600)")
    parser.add_argument("--days", type=int, default=120, help="Days of order history (default: 120)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--reset", action="store_true", help="Delete existing records first")
    parser.add_argument("--database-url", default=None, help="Override the configured database URL")
    return parser


def cli() -> None:
    asyncio.run(main(build_parser().parse_args()))


if __name__ == "__main__":
    cli()
