import logging
from datetime import datetime, timezone

import pytest

from connectors.base import MarketplaceDataSource
from connectors.dummy_marketplace_db import DummyMarketplaceDB
from models.enums import OrderStatus
from tests.mocks import build_marketplace


@pytest.fixture
def db() -> DummyMarketplaceDB:
    """Provides a seeded two-seller marketplace."""
    return build_marketplace()


def test_dummy_db_satisfies_data_source_protocol(db):
    assert isinstance(db, MarketplaceDataSource)


# --- Test seeding --- #


def test_add_order_defaults_total_to_all_lines():
    db = DummyMarketplaceDB()
    db.add_store("S1", "U1")
    order = db.add_order(
        "O1",
        "B1",
        datetime(2026, 1, 1, tzinfo=timezone.utc),
        [("P1", 2, "10.00"), ("P9", 1, 50.0)],
    )
    assert str(order.total_amount) == "70.00"


def test_add_product_requires_known_store():
    db = DummyMarketplaceDB()
    with pytest.raises(KeyError):
        db.add_product("P1", "S-MISSING", "Widget")


# --- Test queries --- #


@pytest.mark.asyncio
async def test_find_product_ids_by_store(db):
    assert sorted(await db.find_product_ids_by_store("S1")) == ["P1", "P2", "P3"]
    assert await db.find_product_ids_by_store("S-EMPTY") == []


@pytest.mark.asyncio
async def test_line_items_are_returned_as_json_rows(db):
    rows = await db.find_line_items_by_product_ids(["P9"])
    assert rows == [{"order_id": "O1", "product_id": "P9", "quantity": 1, "price": "50.00"}]


@pytest.mark.asyncio
async def test_deleted_products_keep_ownership_but_leave_catalog(db):
    db.delete_product("P3")
    assert "P3" in await db.find_product_ids_by_store("S1")
    rows = await db.find_products_by_ids(["P1", "P3"])
    assert [row["product_id"] for row in rows] == ["P1"]


@pytest.mark.asyncio
async def test_find_orders_by_ids_with_status_filter(db):
    rows = await db.find_orders_by_ids(["O1", "O3", "O-UNKNOWN"], OrderStatus.PENDING)
    assert [row["order_id"] for row in rows] == ["O3"]
    assert rows[0]["status"] == "pending"


@pytest.mark.asyncio
async def test_set_order_status(db):
    db.set_order_status("O2", OrderStatus.REFUNDED)
    rows = await db.find_orders_by_ids(["O2"])
    assert rows[0]["status"] == "refunded"


@pytest.mark.asyncio
async def test_find_buyers_skips_unknown(db):
    rows = await db.find_buyers_by_ids(["B1", "B-UNKNOWN"])
    assert rows == [{"buyer_id": "B1", "name": "Alice", "email": "alice@example.com"}]


@pytest.mark.asyncio
async def test_calls_are_recorded_and_logged(db, caplog):
    with caplog.at_level(logging.DEBUG, logger="connectors.dummy_marketplace_db"):
        await db.find_product_ids_by_store("S1")
        await db.find_orders_by_ids(["O1"])
    assert db.calls == [("find_product_ids_by_store", "S1"), ("find_orders_by_ids", ["O1"])]
    assert db.call_count("find_orders_by_ids") == 1
    assert "DUMMY: find_product_ids_by_store(S1)" in caplog.text


@pytest.mark.asyncio
async def test_find_store_ids_by_owner(db):
    db.add_store("S3", owner_id="U1")
    assert await db.find_store_ids_by_owner("U1") == ["S1", "S3"]
    assert await db.find_store_ids_by_owner("U-NOBODY") == []
    assert db.calls[-1] == ("find_store_ids_by_owner", "U-NOBODY")
