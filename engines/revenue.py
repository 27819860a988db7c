"""
Revenue aggregation for a seller's store over a reporting period:
overview with period-over-period deltas, trend series, category breakdown
and top products.

Every figure is computed from the seller's own line items (quantity x unit
price at purchase), never from order totals, so shared orders only contribute
the seller's share. Cancelled and refunded orders never count.
"""

import logging
from collections import defaultdict
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from .base import BaseEngine
from .line_items import LineItemResolver
from .periods import PeriodResolver
from config.config import EngineConfig
from connectors.base import MarketplaceDataSource
from models.enums import OrderStatus
from models.marketplace import OrderRecord, ProductRecord
from models.money import Money
from models.revenue import (
    CategoryRevenue,
    Period,
    PeriodWindow,
    RevenueOverview,
    RevenueTrendPoint,
    TopProduct,
)
from models.seller import ResolvedLineItem

logger = logging.getLogger(__name__)

# Orders in these states contribute nothing to any revenue figure
EXCLUDED_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.REFUNDED})

AttributedLine = tuple[ResolvedLineItem, OrderRecord]


@dataclass
class StoreOrders:
    """A store's resolved lines with their parent orders, every status included."""

    lines: list[ResolvedLineItem] = field(default_factory=list)
    orders: dict[str, OrderRecord] = field(default_factory=dict)

    def revenue_lines(self) -> Iterator[AttributedLine]:
        """Lines whose order exists and counts toward revenue."""
        for line in self.lines:
            order = self.orders.get(line.order_id)
            if order is not None and order.status not in EXCLUDED_STATUSES:
                yield line, order


@dataclass
class PeriodPartitions:
    """The seller's revenue-eligible lines split into current and previous windows."""

    window: PeriodWindow
    current: list[AttributedLine] = field(default_factory=list)
    previous: list[AttributedLine] = field(default_factory=list)


def _summarize(lines: list[AttributedLine]) -> tuple[Money, int, Money]:
    revenue = sum((line.line_total for line, _ in lines), Money.zero())
    orders = len({order.order_id for _, order in lines})
    average = revenue / orders if orders else Money.zero()
    return revenue, orders, average


class RevenueAggregationEngine(BaseEngine):
    """Seller revenue analytics scoped to one store and one period."""

    def __init__(
        self,
        data_source: MarketplaceDataSource,
        config: EngineConfig | None = None,
        timeout: float | None = None,
        resolver: LineItemResolver | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        super().__init__(data_source, config, timeout)
        self.resolver = resolver or LineItemResolver(data_source, self.config, self.timeout)
        self.periods = PeriodResolver(clock=clock, tz=self.config.tzinfo)

    async def load_partitions(self, store_id: str, period: Period) -> PeriodPartitions:
        """
        Fetch the store's lines and their parent orders once, then split them
        by order creation time into the current and previous windows.
        """
        window = self.periods.resolve(period)
        partitions = PeriodPartitions(window=window)
        loaded = await self.load_store_orders(store_id)
        for line, order in loaded.revenue_lines():
            if window.in_current(order.created_at):
                partitions.current.append((line, order))
            elif window.in_previous(order.created_at):
                partitions.previous.append((line, order))

        logger.debug(
            f"Store {store_id} period {window.label}: {len(partitions.current)} current lines, "
            f"{len(partitions.previous)} previous lines"
        )
        return partitions

    async def load_store_orders(self, store_id: str) -> StoreOrders:
        """The store's lines plus one unfiltered fetch of their parent orders."""
        lines = await self.resolver.resolve(store_id)
        if not lines:
            return StoreOrders()
        order_ids = list(dict.fromkeys(line.order_id for line in lines))
        raw_orders = await self._query(
            "find_orders_by_ids", self.data_source.find_orders_by_ids(order_ids)
        )
        orders = {
            o.order_id: o
            for o in self._normalize("find_orders_by_ids", OrderRecord, raw_orders)
        }
        return StoreOrders(lines=lines, orders=orders)

    async def find_owner_store_ids(self, owner_id: str) -> list[str]:
        store_ids = await self._query(
            "find_store_ids_by_owner", self.data_source.find_store_ids_by_owner(owner_id)
        )
        return list(dict.fromkeys(store_ids or []))

    async def count_listed_products(self, store_id: str) -> int:
        """Products in the store's live catalog; soft-deleted products are not listed."""
        product_ids = await self._query(
            "find_product_ids_by_store", self.data_source.find_product_ids_by_store(store_id)
        )
        if not product_ids:
            return 0
        raw_products = await self._query(
            "find_products_by_ids", self.data_source.find_products_by_ids(list(product_ids))
        )
        products = self._normalize("find_products_by_ids", ProductRecord, raw_products)
        return sum(1 for p in products if p.store_id == store_id and not p.is_deleted)

    async def get_overview(self, store_id: str, period: Period) -> RevenueOverview:
        partitions = await self.load_partitions(store_id, period)
        return self.build_overview(partitions)

    async def get_trend(self, store_id: str, period: Period) -> list[RevenueTrendPoint]:
        partitions = await self.load_partitions(store_id, period)
        return self.build_trend(partitions)

    async def get_by_category(self, store_id: str, period: Period) -> list[CategoryRevenue]:
        partitions = await self.load_partitions(store_id, period)
        return self.build_by_category(partitions)

    async def get_top_products(
        self, store_id: str, period: Period, limit: int | None = None
    ) -> list[TopProduct]:
        limit = self.check_limit(limit)
        partitions = await self.load_partitions(store_id, period)
        return self.build_top_products(partitions, limit)

    # --- Aggregations over loaded partitions ---

    def build_overview(self, partitions: PeriodPartitions) -> RevenueOverview:
        current_revenue, current_orders, current_aov = _summarize(partitions.current)
        previous_revenue, previous_orders, previous_aov = _summarize(partitions.previous)
        overview = RevenueOverview(
            current_revenue=current_revenue,
            previous_revenue=previous_revenue,
            current_orders=current_orders,
            previous_orders=previous_orders,
            current_average_order_value=current_aov,
            previous_average_order_value=previous_aov,
            window=partitions.window,
        )
        logger.info(
            f"Revenue overview {partitions.window.label}: {current_revenue} over {current_orders} orders "
            f"({overview.revenue_delta:+.2f}% vs previous)"
        )
        return overview

    def build_trend(self, partitions: PeriodPartitions) -> list[RevenueTrendPoint]:
        """Dense series: every bucket in the window appears, empty ones as zero."""
        width = partitions.window.bucket_width
        points = {
            start: RevenueTrendPoint(bucket_start=start, bucket_width=width)
            for start in self.periods.bucket_starts(partitions.window)
        }
        bucket_orders: dict[datetime, set[str]] = defaultdict(set)
        for line, order in partitions.current:
            key = self.periods.bucket_start_for(order.created_at, width)
            point = points[key]
            point.revenue = point.revenue + line.line_total
            bucket_orders[key].add(order.order_id)
        for key, order_ids in bucket_orders.items():
            points[key].order_count = len(order_ids)
        return list(points.values())

    def build_by_category(self, partitions: PeriodPartitions) -> list[CategoryRevenue]:
        revenue: dict[str, Money] = defaultdict(Money.zero)
        orders: dict[str, set[str]] = defaultdict(set)
        for line, order in partitions.current:
            label = (line.product_category or "").strip() or self.config.uncategorized_label
            revenue[label] = revenue[label] + line.line_total
            orders[label].add(order.order_id)

        total = sum(revenue.values(), Money.zero())
        rows = [
            CategoryRevenue(
                category=label,
                revenue=amount,
                order_count=len(orders[label]),
                share_percent=(
                    float((amount / total * 100).quantize(Decimal("0.01")))
                    if not total.is_zero()
                    else 0.0
                ),
            )
            for label, amount in revenue.items()
        ]
        rows.sort(key=lambda r: (-r.revenue.amount, r.category))
        return rows

    def build_top_products(self, partitions: PeriodPartitions, limit: int) -> list[TopProduct]:
        stats: dict[str, TopProduct] = {}
        orders: dict[str, set[str]] = defaultdict(set)
        for line, order in partitions.current:
            product = stats.get(line.product_id)
            if product is None:
                product = stats[line.product_id] = TopProduct(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    units_sold=0,
                    revenue=Money.zero(),
                )
            product.units_sold += line.quantity
            product.revenue = product.revenue + line.line_total
            orders[line.product_id].add(order.order_id)

        ranked = [p for p in stats.values() if not p.revenue.is_zero()]
        for product in ranked:
            product.order_count = len(orders[product.product_id])
        ranked.sort(key=lambda p: (-p.revenue.amount, -p.units_sold, p.product_id))
        return ranked[:limit]

    def check_limit(self, limit: int | None, default: int | None = None) -> int:
        if limit is None:
            return default if default is not None else self.config.default_top_products_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"Result limit must be a positive integer, got {limit!r}")
        return limit
