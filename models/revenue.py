"""
Data models for seller revenue analytics: reporting windows and the
overview, trend, category and top-product views, and the cross-store seller summary.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from .enums import BucketWidth, OrderStatus, RevenuePeriod
from .money import Money


@dataclass(frozen=True)
class CustomPeriod:
    """An explicit half-open reporting range [start, end)."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class PeriodWindow:
    """
    A resolved reporting window: the current interval, the immediately
    preceding interval of identical length, and the trend bucket width.
    All intervals are half-open.
    """

    current_start: datetime
    current_end: datetime
    previous_start: datetime
    previous_end: datetime
    bucket_width: BucketWidth
    label: str

    @property
    def duration(self) -> timedelta:
        return self.current_end - self.current_start

    @property
    def bounds(self) -> tuple[datetime, datetime, datetime, datetime]:
        return (
            self.current_start,
            self.current_end,
            self.previous_start,
            self.previous_end,
        )

    def in_current(self, ts: datetime) -> bool:
        return self.current_start <= ts < self.current_end

    def in_previous(self, ts: datetime) -> bool:
        return self.previous_start <= ts < self.previous_end


Period = RevenuePeriod | CustomPeriod | str


def percent_delta(current, previous) -> float:
    """
    Period-over-period change in percent; positive is growth.
    Defined as 0.0 when the previous figure is zero.
    """
    if isinstance(current, Money):
        current, previous = current.amount, previous.amount
    if previous == 0:
        return 0.0
    return round(float((current - previous) / previous * 100), 2)


@dataclass
class RevenueOverview:
    """Revenue, order count and AOV for a window and the window before it."""

    current_revenue: Money
    previous_revenue: Money
    current_orders: int
    previous_orders: int
    current_average_order_value: Money
    previous_average_order_value: Money
    window: PeriodWindow

    @property
    def revenue_delta(self) -> float:
        return percent_delta(self.current_revenue, self.previous_revenue)

    @property
    def orders_delta(self) -> float:
        return percent_delta(self.current_orders, self.previous_orders)

    @property
    def average_order_value_delta(self) -> float:
        return percent_delta(
            self.current_average_order_value, self.previous_average_order_value
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.window.label,
            "total_revenue": self.current_revenue.to_float(),
            "total_orders": self.current_orders,
            "average_order_value": self.current_average_order_value.to_float(),
            "previous_revenue": self.previous_revenue.to_float(),
            "previous_orders": self.previous_orders,
            "previous_average_order_value": self.previous_average_order_value.to_float(),
            "revenue_delta_percent": self.revenue_delta,
            "orders_delta_percent": self.orders_delta,
            "average_order_value_delta_percent": self.average_order_value_delta,
            "current_start": self.window.current_start.isoformat(),
            "current_end": self.window.current_end.isoformat(),
        }


@dataclass
class RevenueTrendPoint:
    bucket_start: datetime
    bucket_width: BucketWidth
    revenue: Money = field(default_factory=Money.zero)
    order_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.bucket_start.date().isoformat(),
            "bucket": self.bucket_width.value,
            "revenue": self.revenue.to_float(),
            "orders": self.order_count,
        }


@dataclass
class CategoryRevenue:
    category: str
    revenue: Money
    order_count: int = 0
    share_percent: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "revenue": self.revenue.to_float(),
            "order_count": self.order_count,
            "share_percent": self.share_percent,
        }


@dataclass
class TopProduct:
    product_id: str
    product_name: str
    units_sold: int
    revenue: Money
    order_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity_sold": self.units_sold,
            "revenue": self.revenue.to_float(),
            "order_count": self.order_count,
        }


@dataclass
class RevenueDashboard:
    """Everything the seller revenue page renders, computed together."""

    overview: RevenueOverview
    trend: list[RevenueTrendPoint]
    by_category: list[CategoryRevenue]
    top_products: list[TopProduct]

    def to_dict(self) -> dict[str, Any]:
        return {
            "overview": self.overview.to_dict(),
            "trend": [point.to_dict() for point in self.trend],
            "by_category": [row.to_dict() for row in self.by_category],
            "top_products": [row.to_dict() for row in self.top_products],
        }


@dataclass
class PendingOrder:
    """An order still awaiting fulfillment that contains the seller's products."""

    order_id: str
    status: OrderStatus
    total_amount: Money
    seller_amount: Money
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.order_id,
            "status": self.status.value,
            "total_amount": self.total_amount.to_float(),
            "seller_amount": self.seller_amount.to_float(),
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class SellerSummary:
    """
    Headline figures across every store a seller owns: recent revenue,
    fulfilled orders, listed products and the newest orders still to ship.
    """

    owner_id: str
    store_ids: list[str]
    window: PeriodWindow
    revenue: Money = field(default_factory=Money.zero)
    orders_fulfilled: int = 0
    products_listed: int = 0
    pending_orders: list[PendingOrder] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner_id": self.owner_id,
            "store_ids": list(self.store_ids),
            "period": self.window.label,
            "revenue": self.revenue.to_float(),
            "orders_fulfilled": self.orders_fulfilled,
            "products_listed": self.products_listed,
            "pending_orders": [order.to_dict() for order in self.pending_orders],
        }
