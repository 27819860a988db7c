"""
Demonstration of seller order attribution and revenue analytics on a small
two-seller marketplace.
"""

import asyncio
import json
from datetime import datetime, timedelta, timezone

from config.config import EngineConfig
from connectors.dummy_marketplace_db import DummyMarketplaceDB
from engines.attribution import OrderAttributionEngine
from engines.dashboard import RevenueDashboardService
from engines.revenue import RevenueAggregationEngine
from models.enums import OrderStatus, RevenuePeriod
from utils.logger import get_logger

logger = get_logger(__name__)


def build_marketplace(now: datetime) -> DummyMarketplaceDB:
    """Two stores, a handful of orders, one of them shared between sellers."""
    db = DummyMarketplaceDB()
    db.add_store("S-ACME", owner_id="U-ACME", name="Acme Outdoor")
    db.add_store("S-BOLT", owner_id="U-BOLT", name="Bolt Electronics")
    db.add_product("P-MAT", "S-ACME", "Yoga Mat Deluxe", category="Fitness")
    db.add_product("P-BOTTLE", "S-ACME", "Water Bottle", category="Accessories")
    db.add_product("P-TENT", "S-ACME", "Trail Tent", category=None)
    db.add_product("P-HEADPHONES", "S-BOLT", "Headphones", category="Audio")
    db.add_buyer("B-1", name="Alice", email="alice@example.com")
    db.add_buyer("B-2", name="Bob", email="bob@example.com")

    db.add_order("O-1001", "B-1", now - timedelta(days=2), [("P-MAT", 2, "39.99")])
    db.add_order(
        "O-1002",
        "B-2",
        now - timedelta(days=3),
        [("P-BOTTLE", 3, "12.99"), ("P-HEADPHONES", 1, "89.99")],
    )
    db.add_order("O-1003", "B-1", now - timedelta(days=5), [("P-TENT", 1, "149.00")], status=OrderStatus.PROCESSING)
    db.add_order("O-1004", "B-2", now - timedelta(days=4), [("P-MAT", 1, "39.99")], status=OrderStatus.REFUNDED)
    db.add_order("O-0999", "B-1", now - timedelta(days=10), [("P-MAT", 1, "42.00")])
    return db


async def run_seller_revenue_demo(store_id: str = "S-ACME") -> None:
    now = datetime.now(timezone.utc)
    db = build_marketplace(now)
    config = EngineConfig.from_env()
    get_logger("engines", config.log_level)

    orders_engine = OrderAttributionEngine(db, config=config)
    revenue_engine = RevenueAggregationEngine(db, config=config, clock=lambda: now)
    dashboards = RevenueDashboardService(revenue_engine)

    logger.info(f"--- Seller orders for {store_id} ---")
    for order in await orders_engine.list_seller_orders(store_id):
        flag = "partial" if order.is_partial else "full"
        print(
            f"{order.order_id}: seller {order.seller_amount} of {order.total_amount} "
            f"({flag}, {order.status.value}, buyer {order.buyer_name})"
        )

    detail = await orders_engine.get_seller_order("O-1002", store_id)
    print(f"\nDetail view: {json.dumps(detail.to_dict() if detail else None, indent=2)}")

    logger.info(f"--- Revenue dashboard for {store_id} (last 7 days) ---")
    dashboard = await dashboards.get_dashboard(store_id, RevenuePeriod.LAST_7_DAYS, top_limit=3)
    print(json.dumps(dashboard.to_dict(), indent=2))

    logger.info("--- 30 day revenue, all stores ---")
    for other_id, other in (await dashboards.get_dashboards(["S-ACME", "S-BOLT"], "30d")).items():
        overview = other.overview
        print(f"{other_id}: {overview.current_revenue} over {overview.current_orders} orders")

    logger.info("--- Seller summary for U-ACME ---")
    summary = await dashboards.get_seller_summary("U-ACME")
    print(json.dumps(summary.to_dict(), indent=2))


if __name__ == "__main__":
    asyncio.run(run_seller_revenue_demo())
