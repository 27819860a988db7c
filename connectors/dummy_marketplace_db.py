"""
Module: connectors.dummy_marketplace_db

Provides a dummy in-memory marketplace database (stores, products, orders,
order items, buyers) implementing the MarketplaceDataSource contract, for
demos and tests.
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from models.enums import OrderStatus
from models.marketplace import (
    BuyerRecord,
    OrderItemRecord,
    OrderRecord,
    ProductRecord,
    StoreRecord,
)

logger = logging.getLogger(__name__)


class DummyMarketplaceDB:
    """
    In-memory marketplace tables. Rows are handed out as JSON-style dicts
    (amounts as strings, timestamps as ISO text) the way a hosted Postgres
    API returns them.
    """

    def __init__(self, latency: float = 0.0):
        self.latency = latency
        self._stores: dict[str, StoreRecord] = {}
        self._products: dict[str, ProductRecord] = {}
        self._orders: dict[str, OrderRecord] = {}
        self._items: list[OrderItemRecord] = []
        self._buyers: dict[str, BuyerRecord] = {}
        # (method name, argument) for every query served, in order
        self.calls: list[tuple[str, Any]] = []

    # --- Seeding --- #

    def add_store(self, store_id: str, owner_id: str, name: str | None = None) -> StoreRecord:
        store = StoreRecord(store_id=store_id, owner_id=owner_id, name=name)
        self._stores[store_id] = store
        return store

    def add_product(
        self,
        product_id: str,
        store_id: str,
        name: str,
        category: str | None = None,
    ) -> ProductRecord:
        if store_id not in self._stores:
            raise KeyError(f"Unknown store {store_id}")
        product = ProductRecord(
            product_id=product_id, store_id=store_id, name=name, category=category
        )
        self._products[product_id] = product
        return product

    def delete_product(self, product_id: str) -> None:
        """Soft delete: ownership is kept, catalog lookups stop returning it."""
        product = self._products[product_id]
        self._products[product_id] = product.model_copy(update={"is_deleted": True})

    def add_buyer(self, buyer_id: str, name: str | None = None, email: str | None = None) -> BuyerRecord:
        buyer = BuyerRecord(buyer_id=buyer_id, name=name, email=email)
        self._buyers[buyer_id] = buyer
        return buyer

    def add_order(
        self,
        order_id: str,
        buyer_id: str,
        created_at: datetime,
        items: Sequence[tuple[str, int, Decimal | str | float]],
        status: OrderStatus | str = OrderStatus.COMPLETED,
        total_amount: Decimal | str | float | None = None,
    ) -> OrderRecord:
        """
        Create an order from (product_id, quantity, unit_price) lines. The total
        defaults to the sum of all lines, whichever store sells them.
        """
        line_items = [
            OrderItemRecord(order_id=order_id, product_id=pid, quantity=qty, unit_price=price)
            for pid, qty, price in items
        ]
        if total_amount is None:
            total_amount = sum(
                (line.unit_price * line.quantity for line in line_items), Decimal("0")
            )
        order = OrderRecord(
            order_id=order_id,
            buyer_id=buyer_id,
            total_amount=total_amount,
            status=status,
            created_at=created_at,
        )
        self._orders[order_id] = order
        self._items.extend(line_items)
        return order

    def set_order_status(self, order_id: str, status: OrderStatus) -> None:
        order = self._orders[order_id]
        self._orders[order_id] = order.model_copy(update={"status": status})

    # --- MarketplaceDataSource --- #

    async def _tick(self, method: str, argument: Any) -> None:
        self.calls.append((method, argument))
        logger.debug(f"DUMMY: {method}({argument})")
        await asyncio.sleep(self.latency)

    def call_count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    async def find_store_ids_by_owner(self, owner_id: str) -> list[str]:
        await self._tick("find_store_ids_by_owner", owner_id)
        return [s.store_id for s in self._stores.values() if s.owner_id == owner_id]

    async def find_product_ids_by_store(self, store_id: str) -> list[str]:
        await self._tick("find_product_ids_by_store", store_id)
        return [p.product_id for p in self._products.values() if p.store_id == store_id]

    async def find_line_items_by_product_ids(self, product_ids: Sequence[str]) -> list[dict[str, Any]]:
        await self._tick("find_line_items_by_product_ids", list(product_ids))
        wanted = set(product_ids)
        return [
            item.model_dump(mode="json", by_alias=True)
            for item in self._items
            if item.product_id in wanted
        ]

    async def find_products_by_ids(self, product_ids: Sequence[str]) -> list[dict[str, Any]]:
        await self._tick("find_products_by_ids", list(product_ids))
        return [
            self._products[pid].model_dump(mode="json")
            for pid in dict.fromkeys(product_ids)
            if pid in self._products and not self._products[pid].is_deleted
        ]

    async def find_orders_by_ids(
        self, order_ids: Sequence[str], status: OrderStatus | None = None
    ) -> list[dict[str, Any]]:
        await self._tick("find_orders_by_ids", list(order_ids))
        rows = []
        for oid in dict.fromkeys(order_ids):
            order = self._orders.get(oid)
            if order is None:
                continue
            if status is not None and order.status != status:
                continue
            rows.append(order.model_dump(mode="json"))
        return rows

    async def find_buyers_by_ids(self, buyer_ids: Sequence[str]) -> list[dict[str, Any]]:
        await self._tick("find_buyers_by_ids", list(buyer_ids))
        return [
            self._buyers[bid].model_dump(mode="json")
            for bid in dict.fromkeys(buyer_ids)
            if bid in self._buyers
        ]
