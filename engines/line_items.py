"""
Line-item resolution: which order lines belong to a seller's store.
"""

import logging

from .base import BaseEngine
from models.marketplace import OrderItemRecord, ProductRecord
from models.money import Money
from models.seller import ResolvedLineItem

logger = logging.getLogger(__name__)


class LineItemResolver(BaseEngine):
    """
    Resolves a store's order lines with three flat, sequential queries
    (product ids -> line items -> product metadata) and a hash join in memory.
    """

    async def resolve(self, store_id: str) -> list[ResolvedLineItem]:
        product_ids = await self._query(
            "find_product_ids_by_store",
            self.data_source.find_product_ids_by_store(store_id),
        )
        if not product_ids:
            logger.debug(f"Store {store_id} has no products; skipping line item lookup")
            return []

        raw_items = await self._query(
            "find_line_items_by_product_ids",
            self.data_source.find_line_items_by_product_ids(list(product_ids)),
        )
        items = self._normalize("find_line_items_by_product_ids", OrderItemRecord, raw_items)
        if not items:
            return []

        referenced = list(dict.fromkeys(item.product_id for item in items))
        raw_products = await self._query(
            "find_products_by_ids",
            self.data_source.find_products_by_ids(referenced),
        )
        products = {
            p.product_id: p
            for p in self._normalize("find_products_by_ids", ProductRecord, raw_products)
        }
        logger.debug(
            f"Store {store_id}: {len(product_ids)} products, {len(items)} line items, "
            f"{len(products)}/{len(referenced)} products with metadata"
        )

        resolved = []
        for item in items:
            if item.quantity <= 0:
                logger.warning(
                    f"Skipping line item {item.item_id} with non-positive quantity {item.quantity}"
                )
                continue
            product = products.get(item.product_id)
            resolved.append(
                ResolvedLineItem(
                    order_id=item.order_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=Money(item.unit_price),
                    product_name=product.name if product and product.name else self.config.unknown_product_label,
                    product_category=product.category if product else None,
                )
            )
        return resolved
