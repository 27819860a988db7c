"""
Seller-scoped order views derived from marketplace rows.
These are computed on every call and never persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from .enums import OrderStatus
from .money import Money


@dataclass(frozen=True)
class ResolvedLineItem:
    """A line item for one of the seller's products, joined with product metadata."""

    order_id: str
    product_id: str
    quantity: int
    unit_price: Money
    product_name: str
    product_category: str | None = None

    @property
    def item_id(self) -> str:
        return f"{self.order_id}-{self.product_id}"

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass
class SellerOrderItem:
    """One of the seller's own lines within an order."""

    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: Money
    total: Money

    @classmethod
    def from_line_item(cls, line: ResolvedLineItem) -> "SellerOrderItem":
        return cls(
            item_id=line.item_id,
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            total=line.line_total,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.item_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "price": self.unit_price.to_float(),
            "total": self.total.to_float(),
        }


@dataclass
class SellerOrder:
    """
    An order as seen by one seller: the full order total next to the share
    attributable to the seller's products.
    """

    order_id: str
    buyer_id: str
    total_amount: Money
    seller_amount: Money
    is_partial: bool
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    items: list[SellerOrderItem] = field(default_factory=list)
    buyer_name: str | None = None
    buyer_email: str | None = None

    @property
    def seller_share_percent(self) -> float:
        """Seller share as a percentage of the order total (0 for a zero total)."""
        if self.total_amount.is_zero():
            return 0.0
        ratio = self.seller_amount / self.total_amount * 100
        return float(ratio.quantize(Decimal("0.01")))

    @property
    def units(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.order_id,
            "buyer_id": self.buyer_id,
            "buyer_name": self.buyer_name,
            "buyer_email": self.buyer_email,
            "total_amount": self.total_amount.to_float(),
            "seller_amount": self.seller_amount.to_float(),
            "seller_share_percent": self.seller_share_percent,
            "status": self.status.value,
            "is_partial": self.is_partial,
            "units": self.units,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "items": [item.to_dict() for item in self.items],
        }
