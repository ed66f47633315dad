"""
Unit Tests - Synthetic Data Generation
"""
import polars as pl
import pytest

from storefront_analytics.data.generators import DataGenerator, ProductGenerator


@pytest.fixture
def dataset(now):
    return DataGenerator(seed=7).generate_all(n_products=12, n_orders=150, days=60, now=now)


class TestDataGenerator:
    """Tests for DataGenerator"""

    def test_reproducible(self, now):
        first = DataGenerator(seed=7).generate_all(n_products=5, n_orders=20, now=now)
        second = DataGenerator(seed=7).generate_all(n_products=5, n_orders=20, now=now)

        for name in first:
            assert first[name].equals(second[name])

    def test_sizes(self, dataset):
        assert len(dataset["products"]) == 12
        assert len(dataset["orders"]) == 150
        assert len(dataset["order_items"]) >= 150

    def test_orders_within_history(self, dataset, now):
        created = dataset["orders"]["created_at"]

        assert created.max() <= now
        assert (now - created.min()).days <= 60

    def test_items_reference_products_and_orders(self, dataset):
        items = dataset["order_items"]

        assert set(items["product_id"].to_list()) <= set(dataset["products"]["id"].to_list())
        assert set(items["order_id"].to_list()) <= set(dataset["orders"]["id"].to_list())

    def test_counters_consistent_with_orders(self, dataset):
        products = dataset["products"]
        sold = dataset["order_items"].group_by("product_id").agg(pl.col("quantity").sum())
        expected = dict(zip(sold["product_id"].to_list(), sold["quantity"].to_list()))

        for row in products.to_dicts():
            assert row["total_sold"] == expected.get(row["id"], 0)
            assert row["views"] >= row["add_to_cart_count"]

    def test_amounts_reconcile(self, dataset):
        orders = dataset["orders"].filter(pl.col("original_amount").is_not_null())

        for row in orders.to_dicts():
            assert row["total_amount"] == pytest.approx(row["original_amount"] - row["discount_amount"], abs=0.01)

    def test_pickup_orders_have_no_address(self, dataset):
        pickups = dataset["orders"].filter(pl.col("delivery_type") == "pickup")

        assert pickups["address"].null_count() == len(pickups)

    def test_mix_of_guests_and_account_holders(self, dataset):
        user_ids = dataset["orders"]["user_id"].to_list()

        assert any(u is None or u == "guest" for u in user_ids)
        assert any(u not in (None, "guest") for u in user_ids)


class TestProductGenerator:

    def test_columns(self, now):
        df = ProductGenerator(seed=1).generate(6, now=now)

        assert {"id", "name", "category", "price", "stock", "created_at"} <= set(df.columns)
        assert df["category"].n_unique() == 6
