from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from models.enums import OrderStatus
from models.marketplace import BuyerRecord, OrderItemRecord, OrderRecord, ProductRecord


def test_order_record_normalizes_loosely_typed_row():
    """String amounts, mixed-case status and ISO timestamps become typed fields."""
    order = OrderRecord.model_validate(
        {
            "order_id": "O1",
            "buyer_id": "B1",
            "total_amount": "70.00",
            "status": "Completed",
            "created_at": "2026-10-17T12:00:00Z",
        }
    )
    assert order.total_amount == Decimal("70.00")
    assert order.status is OrderStatus.COMPLETED
    assert order.created_at == datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)
    assert order.updated_at == order.created_at


def test_order_record_float_amount_keeps_decimal_precision():
    order = OrderRecord(
        order_id="O1",
        buyer_id="B1",
        total_amount=0.1,
        status=OrderStatus.PENDING,
        created_at=datetime(2026, 1, 1),
    )
    assert order.total_amount == Decimal("0.1")


def test_naive_timestamps_are_treated_as_utc():
    order = OrderRecord(
        order_id="O1",
        buyer_id="B1",
        total_amount="1.00",
        status="pending",
        created_at=datetime(2026, 1, 1, 8, 30),
        updated_at=datetime(2026, 1, 2, 9, 0),
    )
    assert order.created_at.tzinfo == timezone.utc
    assert order.updated_at == datetime(2026, 1, 2, 9, 0, tzinfo=timezone.utc)


def test_unknown_status_is_rejected():
    with pytest.raises(ValidationError):
        OrderRecord(
            order_id="O1",
            buyer_id="B1",
            total_amount="1.00",
            status="shipped",
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )


def test_order_item_accepts_price_alias_and_field_name():
    by_alias = OrderItemRecord.model_validate(
        {"order_id": "O1", "product_id": "P1", "quantity": 2, "price": "10.00"}
    )
    by_name = OrderItemRecord(order_id="O1", product_id="P1", quantity=2, unit_price=10.0)
    assert by_alias.unit_price == Decimal("10.00")
    assert by_name.unit_price == Decimal("10.0")
    assert by_alias.item_id == "O1-P1"


def test_product_record_defaults():
    product = ProductRecord(product_id="P1", store_id="S1", name="Widget")
    assert product.category is None
    assert product.is_deleted is False
    assert ProductRecord(product_id="P2", store_id="S1", name=None).name is None


def test_records_are_frozen():
    buyer = BuyerRecord(buyer_id="B1", name="Alice")
    with pytest.raises(ValidationError):
        buyer.name = "Mallory"
