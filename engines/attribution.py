"""
Order attribution: each seller's share of shared marketplace orders.
"""

import logging
from collections import defaultdict

from .base import BaseEngine
from .line_items import LineItemResolver
from config.config import EngineConfig
from connectors.base import MarketplaceDataSource
from models.enums import OrderStatus
from models.marketplace import BuyerRecord, OrderRecord
from models.money import Money
from models.seller import ResolvedLineItem, SellerOrder, SellerOrderItem

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


def parse_status_filter(status_filter: OrderStatus | str | None) -> OrderStatus | None:
    """None or "all" means no filter; anything else must be a known status."""
    if status_filter is None or isinstance(status_filter, OrderStatus):
        return status_filter
    normalized = status_filter.strip().lower()
    if normalized in ("", ALL_STATUSES):
        return None
    try:
        return OrderStatus(normalized)
    except ValueError as e:
        raise ValueError(f"Unknown order status filter: {status_filter!r}") from e


class OrderAttributionEngine(BaseEngine):
    """Builds SellerOrder views for a store's orders (list and detail)."""

    def __init__(
        self,
        data_source: MarketplaceDataSource,
        config: EngineConfig | None = None,
        timeout: float | None = None,
        resolver: LineItemResolver | None = None,
    ):
        super().__init__(data_source, config, timeout)
        self.resolver = resolver or LineItemResolver(data_source, self.config, self.timeout)

    async def list_seller_orders(
        self, store_id: str, status_filter: OrderStatus | str | None = None
    ) -> list[SellerOrder]:
        """Orders containing the store's products, newest first."""
        status = parse_status_filter(status_filter)
        lines = await self.resolver.resolve(store_id)
        if not lines:
            return []

        grouped = self._group_by_order(lines)
        raw_orders = await self._query(
            "find_orders_by_ids",
            self.data_source.find_orders_by_ids(list(grouped), status),
        )
        orders = self._normalize("find_orders_by_ids", OrderRecord, raw_orders)
        if status is not None:
            # Re-applied for collaborators that ignore the status argument
            orders = [o for o in orders if o.status == status]
        if not orders:
            return []

        buyers = await self._load_buyers(orders)
        result = [
            self._build_seller_order(order, grouped[order.order_id], buyers.get(order.buyer_id))
            for order in orders
            if order.order_id in grouped
        ]
        result.sort(key=lambda o: o.order_id)
        result.sort(key=lambda o: o.created_at, reverse=True)
        logger.info(
            f"Store {store_id}: {len(result)} seller orders "
            f"({sum(o.is_partial for o in result)} partial), status filter={status.value if status else 'all'}"
        )
        return result

    async def get_seller_order(self, order_id: str, store_id: str) -> SellerOrder | None:
        """
        One order as seen by the store. Goes through the same pipeline as the
        list view. Returns None both when the order does not exist and when it
        has none of this store's products.
        """
        for order in await self.list_seller_orders(store_id):
            if order.order_id == order_id:
                return order
        return None

    # --- Helper Methods ---

    @staticmethod
    def _group_by_order(lines: list[ResolvedLineItem]) -> dict[str, list[ResolvedLineItem]]:
        grouped: dict[str, list[ResolvedLineItem]] = defaultdict(list)
        for line in lines:
            grouped[line.order_id].append(line)
        return dict(grouped)

    async def _load_buyers(self, orders: list[OrderRecord]) -> dict[str, BuyerRecord]:
        buyer_ids = list(dict.fromkeys(o.buyer_id for o in orders))
        raw_buyers = await self._query(
            "find_buyers_by_ids", self.data_source.find_buyers_by_ids(buyer_ids)
        )
        return {
            b.buyer_id: b
            for b in self._normalize("find_buyers_by_ids", BuyerRecord, raw_buyers)
        }

    def _build_seller_order(
        self,
        order: OrderRecord,
        lines: list[ResolvedLineItem],
        buyer: BuyerRecord | None,
    ) -> SellerOrder:
        epsilon = self.config.epsilon
        seller_amount = sum((line.line_total for line in lines), Money.zero())
        total_amount = Money(order.total_amount)
        if seller_amount > total_amount and not seller_amount.is_close(total_amount, epsilon):
            logger.warning(
                f"Order {order.order_id}: seller amount {seller_amount} exceeds order total {total_amount}"
            )
        return SellerOrder(
            order_id=order.order_id,
            buyer_id=order.buyer_id,
            buyer_name=buyer.name if buyer else None,
            buyer_email=buyer.email if buyer else None,
            total_amount=total_amount,
            seller_amount=seller_amount,
            is_partial=not seller_amount.is_close(total_amount, epsilon),
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at or order.created_at,
            items=[SellerOrderItem.from_line_item(line) for line in lines],
        )
