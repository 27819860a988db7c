"""
Module: connectors.base

Storage contract the seller analytics engines depend on. Every method is a
flat lookup (filter on one column, optionally an ``IN`` list); the engines do
all joining in memory so any backend that can answer these queries works.

Rows may be returned either as the models in ``models.marketplace`` or as
plain dicts with the same keys; the engines validate them into the models.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from models.enums import OrderStatus
from models.marketplace import BuyerRecord, OrderItemRecord, OrderRecord, ProductRecord

Row = dict[str, Any]


@runtime_checkable
class MarketplaceDataSource(Protocol):
    """
    Backend-agnostic read contract for marketplace tables.

    Implementations must not cache results: each call reflects the current
    storage snapshot. Failures are raised as exceptions; the engines wrap them.
    """

    async def find_store_ids_by_owner(self, owner_id: str) -> list[str]:
        """IDs of every store owned by the user."""
        ...

    async def find_product_ids_by_store(self, store_id: str) -> list[str]:
        """IDs of every product owned by the store, including soft-deleted ones."""
        ...

    async def find_line_items_by_product_ids(
        self, product_ids: Sequence[str]
    ) -> list[OrderItemRecord | Row]:
        ...

    async def find_products_by_ids(
        self, product_ids: Sequence[str]
    ) -> list[ProductRecord | Row]:
        """Catalog rows for the given IDs. Deleted products may be absent."""
        ...

    async def find_orders_by_ids(
        self, order_ids: Sequence[str], status: OrderStatus | None = None
    ) -> list[OrderRecord | Row]:
        """Orders with the given IDs, optionally restricted to one status."""
        ...

    async def find_buyers_by_ids(self, buyer_ids: Sequence[str]) -> list[BuyerRecord | Row]:
        ...
