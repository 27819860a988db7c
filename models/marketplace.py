"""
Row models for the marketplace tables read by the analytics engines.

Storage connectors may return plain dicts with amounts as strings or floats
and timestamps with or without a timezone. These models are the single
normalization step: every row is validated into one well-typed shape before
any business logic sees it.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import OrderStatus


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _float_safe_decimal(value: Any) -> Any:
    if isinstance(value, float):
        return str(value)
    return value


class StoreRecord(BaseModel):
    """A seller's store."""

    model_config = ConfigDict(frozen=True)

    store_id: str
    owner_id: str
    name: str | None = None


class ProductRecord(BaseModel):
    """Current catalog snapshot of a product. Every product belongs to one store."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    store_id: str
    name: str | None = None  # Storage may hold products without a name
    category: str | None = None
    is_deleted: bool = False  # Soft-deleted products keep their store ownership


class OrderRecord(BaseModel):
    """A customer order; total_amount spans all sellers' items."""

    model_config = ConfigDict(frozen=True)

    order_id: str
    buyer_id: str
    total_amount: Decimal
    status: OrderStatus
    created_at: datetime
    updated_at: datetime | None = None

    @field_validator("total_amount", mode="before")
    @classmethod
    def _normalize_amount(cls, v: Any) -> Any:
        return _float_safe_decimal(v)

    @field_validator("status", mode="before")
    @classmethod
    def _lowercase_status(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("created_at", "updated_at")
    @classmethod
    def _ensure_aware(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v) if v is not None else None

    @model_validator(mode="before")
    @classmethod
    def _default_updated_at(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("updated_at") is None:
            data = {**data, "updated_at": data.get("created_at")}
        return data


class OrderItemRecord(BaseModel):
    """A line of an order; unit_price is the price at time of purchase."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    order_id: str
    product_id: str
    quantity: int
    unit_price: Decimal = Field(alias="price")

    @field_validator("unit_price", mode="before")
    @classmethod
    def _normalize_price(cls, v: Any) -> Any:
        return _float_safe_decimal(v)

    @property
    def item_id(self) -> str:
        return f"{self.order_id}-{self.product_id}"


class BuyerRecord(BaseModel):
    """Contact details of the customer who placed an order."""

    model_config = ConfigDict(frozen=True)

    buyer_id: str
    name: str | None = None
    email: str | None = None
