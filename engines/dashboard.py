"""
Seller revenue dashboards: overview, trend, categories and top products
computed together for one or more stores, and the headline summary across
every store a seller owns.
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Iterable, Sequence
from typing import Any

from .periods import period_label
from .revenue import RevenueAggregationEngine
from models.enums import OrderStatus, RevenuePeriod
from models.marketplace import OrderRecord
from models.money import Money
from models.revenue import Period, PendingOrder, RevenueDashboard, SellerSummary

logger = logging.getLogger(__name__)

SUMMARY_PERIOD = RevenuePeriod.LAST_7_DAYS
RECENT_PENDING_ORDERS = 10
# Orders placed but not yet fulfilled
PENDING_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING})


async def _gather_or_cancel(aws: Iterable[Awaitable[Any]]) -> list[Any]:
    """Run concurrently; on the first failure cancel the rest and re-raise."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Let cancelled siblings finish unwinding before re-raising
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class RevenueDashboardService:
    """
    Composes the revenue engine's four views. Each dashboard is built from a
    single load of the store's lines and orders, so the views always reconcile
    with each other.
    """

    def __init__(self, engine: RevenueAggregationEngine):
        self.engine = engine

    async def get_dashboard(
        self, store_id: str, period: Period, top_limit: int | None = None
    ) -> RevenueDashboard:
        limit = self.engine.check_limit(top_limit)
        partitions = await self.engine.load_partitions(store_id, period)
        return RevenueDashboard(
            overview=self.engine.build_overview(partitions),
            trend=self.engine.build_trend(partitions),
            by_category=self.engine.build_by_category(partitions),
            top_products=self.engine.build_top_products(partitions, limit),
        )

    async def get_dashboards(
        self, store_ids: Sequence[str], period: Period, top_limit: int | None = None
    ) -> dict[str, RevenueDashboard]:
        """
        Dashboards for several stores, fetched concurrently. If any store
        fails the remaining fetches are cancelled and the error propagates.
        """
        label = period_label(period)
        store_ids = list(dict.fromkeys(store_ids))
        results = await _gather_or_cancel(
            self.get_dashboard(store_id, period, top_limit) for store_id in store_ids
        )
        logger.info(f"Built {len(results)} revenue dashboards for period {label}")
        return dict(zip(store_ids, results))

    async def get_seller_summary(
        self, owner_id: str, pending_limit: int | None = None
    ) -> SellerSummary:
        """
        Headline figures across all of an owner's stores.

        Revenue covers the last 7 days and skips cancelled and refunded
        orders. Fulfilled orders and listed products are all-time counts.
        Pending orders are the newest pending or processing orders, each with
        the owner's share across all of their stores.
        """
        limit = self.engine.check_limit(pending_limit, default=RECENT_PENDING_ORDERS)
        window = self.engine.periods.resolve(SUMMARY_PERIOD)
        store_ids = await self.engine.find_owner_store_ids(owner_id)
        summary = SellerSummary(owner_id=owner_id, store_ids=store_ids, window=window)
        if not store_ids:
            logger.info(f"Owner {owner_id} has no stores; returning an empty summary")
            return summary

        results = await _gather_or_cancel(
            [self.engine.load_store_orders(store_id) for store_id in store_ids]
            + [self.engine.count_listed_products(store_id) for store_id in store_ids]
        )
        loaded, product_counts = results[: len(store_ids)], results[len(store_ids) :]
        summary.products_listed = sum(product_counts)

        # An order may hold products from several of the owner's stores
        orders: dict[str, OrderRecord] = {}
        seller_amounts: dict[str, Money] = defaultdict(Money.zero)
        for store_orders in loaded:
            orders.update(store_orders.orders)
            for line in store_orders.lines:
                seller_amounts[line.order_id] += line.line_total
            for line, order in store_orders.revenue_lines():
                if window.in_current(order.created_at):
                    summary.revenue += line.line_total

        summary.orders_fulfilled = sum(
            1 for order in orders.values() if order.status == OrderStatus.COMPLETED
        )
        pending = sorted(
            (order for order in orders.values() if order.status in PENDING_STATUSES),
            key=lambda o: o.order_id,
        )
        pending.sort(key=lambda o: o.created_at, reverse=True)
        summary.pending_orders = [
            PendingOrder(
                order_id=order.order_id,
                status=order.status,
                total_amount=Money(order.total_amount),
                seller_amount=seller_amounts[order.order_id],
                created_at=order.created_at,
            )
            for order in pending[:limit]
        ]
        logger.info(
            f"Owner {owner_id}: {len(store_ids)} stores, revenue {summary.revenue} ({window.label}), "
            f"{summary.orders_fulfilled} fulfilled, {len(pending)} awaiting fulfillment"
        )
        return summary
