import logging
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from engines.line_items import LineItemResolver
from models.money import Money
from tests.mocks import NOW, NamelessProductsDataSource, build_marketplace
from utils.errors import DataAccessError


@pytest.fixture
def db():
    return build_marketplace()


@pytest.fixture
def resolver(db) -> LineItemResolver:
    return LineItemResolver(db)


@pytest.mark.asyncio
async def test_resolves_only_the_stores_lines_with_metadata(resolver):
    lines = await resolver.resolve("S1")
    assert {line.product_id for line in lines} == {"P1", "P2", "P3"}
    # O1 also contains P9 from store S2, which must not appear
    o1 = [line for line in lines if line.order_id == "O1"]
    assert len(o1) == 1
    assert o1[0].product_name == "Widget"
    assert o1[0].product_category == "Tools"
    assert o1[0].unit_price == Money("10.00")
    assert o1[0].line_total == Money("20.00")


@pytest.mark.asyncio
async def test_store_without_products_returns_empty_after_one_query(db, resolver):
    assert await resolver.resolve("S-EMPTY") == []
    assert [name for name, _ in db.calls] == ["find_product_ids_by_store"]


@pytest.mark.asyncio
async def test_products_without_sales_skip_metadata_lookup(db, resolver):
    db.add_store("S-NEW", "U9")
    db.add_product("P-NEW", "S-NEW", "Unsold")
    assert await resolver.resolve("S-NEW") == []
    assert db.call_count("find_products_by_ids") == 0


@pytest.mark.asyncio
async def test_three_sequential_flat_queries(db, resolver):
    await resolver.resolve("S1")
    assert [name for name, _ in db.calls] == [
        "find_product_ids_by_store",
        "find_line_items_by_product_ids",
        "find_products_by_ids",
    ]
    # Metadata is requested once per distinct referenced product
    _, metadata_ids = db.calls[2]
    assert sorted(metadata_ids) == ["P1", "P2", "P3"]


@pytest.mark.asyncio
async def test_deleted_product_lines_are_kept_with_placeholder_name(db, resolver):
    db.delete_product("P3")
    lines = await resolver.resolve("S1")
    mystery = [line for line in lines if line.product_id == "P3"]
    assert len(mystery) == 1
    assert mystery[0].product_name == "Unknown Product"
    assert mystery[0].product_category is None
    assert mystery[0].line_total == Money("15.00")


@pytest.mark.asyncio
async def test_non_positive_quantities_are_logged_and_skipped(db, resolver, caplog):
    db.add_order("O-BAD", "B1", NOW - timedelta(days=1), [("P1", 0, "10.00")])
    db.add_order("O-NEG", "B1", NOW - timedelta(days=1), [("P2", -2, "30.00")])
    with caplog.at_level(logging.WARNING):
        lines = await resolver.resolve("S1")
    assert not [line for line in lines if line.order_id in ("O-BAD", "O-NEG")]
    assert "Skipping line item O-BAD-P1 with non-positive quantity 0" in caplog.text
    assert "O-NEG-P2" in caplog.text


@pytest.mark.asyncio
async def test_storage_failure_propagates_as_data_access_error():
    source = AsyncMock()
    source.find_product_ids_by_store.return_value = ["P1"]
    source.find_line_items_by_product_ids.side_effect = ConnectionError("db down")
    resolver = LineItemResolver(source)

    with pytest.raises(DataAccessError) as excinfo:
        await resolver.resolve("S1")
    assert excinfo.value.operation == "find_line_items_by_product_ids"
    assert isinstance(excinfo.value.__cause__, ConnectionError)
    source.find_products_by_ids.assert_not_called()


@pytest.mark.asyncio
async def test_malformed_rows_are_a_data_access_error():
    source = AsyncMock()
    source.find_product_ids_by_store.return_value = ["P1"]
    source.find_line_items_by_product_ids.return_value = [
        {"order_id": "O1", "product_id": "P1", "quantity": "many", "price": "1.00"}
    ]
    with pytest.raises(DataAccessError, match="find_line_items_by_product_ids"):
        await LineItemResolver(source).resolve("S1")


@pytest.mark.asyncio
async def test_null_product_name_uses_placeholder_and_keeps_the_line():
    db = build_marketplace(db=NamelessProductsDataSource())
    lines = await LineItemResolver(db).resolve("S1")
    assert len(lines) == 7
    assert {line.product_name for line in lines} == {"Unknown Product"}
    widget = next(line for line in lines if line.order_id == "O1")
    # Category still comes through even when the name is missing
    assert widget.product_category == "Tools"
    assert widget.line_total == Money("20.00")
