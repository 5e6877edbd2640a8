"""Purchase history: a user's completed orders collapsed into per-product aggregates."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from uuid import UUID

from app.models.order import COMPLETED_STATUSES
from app.repositories.base import OrderRepository
from app.schemas.records import OrderRecord

logger = logging.getLogger(__name__)

HISTORY_ORDER_LIMIT = 50
HISTORY_STATUSES = tuple(s.value for s in COMPLETED_STATUSES)


class OrderHistoryReader:
    """Fetch the orders that count as a user's purchase history."""

    def __init__(
        self,
        orders: OrderRepository,
        limit: int = HISTORY_ORDER_LIMIT,
        statuses: Sequence[str] = HISTORY_STATUSES,
    ):
        self._orders = orders
        self.limit = limit
        self.statuses = tuple(statuses)

    async def read(self, user_id: UUID | str) -> list[OrderRecord]:
        """Newest completed orders first. Raises RepositoryError if the store is unreachable."""
        return await self._orders.find_orders(user_id, self.statuses, self.limit)


class PurchasedProduct:
    """How often (in separate orders) a user bought a product, and the money spent on it."""

    def __init__(self, product_id: str, category: str | None, purchase_count: int, total_spent: float):
        self.product_id = product_id
        self.category = category
        self.purchase_count = purchase_count
        self.total_spent = total_spent

    def __repr__(self) -> str:
        return (
            f"<PurchasedProduct {self.product_id} count={self.purchase_count} "
            f"spent={self.total_spent}>"
        )


class PurchaseAggregate:
    """product_id -> PurchasedProduct, one entry per product."""

    def __init__(self, products: dict[str, PurchasedProduct] | None = None):
        self.products: dict[str, PurchasedProduct] = products if products is not None else {}

    def __contains__(self, product_id: object) -> bool:
        return product_id in self.products

    def __len__(self) -> int:
        return len(self.products)

    def __iter__(self):
        return iter(self.products.values())

    def get(self, product_id: str) -> PurchasedProduct | None:
        return self.products.get(product_id)

    @property
    def product_ids(self) -> list[str]:
        return list(self.products)

    def category_counts(self) -> dict[str, int]:
        """Number of distinct purchased products per category."""
        counts: dict[str, int] = {}
        for product in self.products.values():
            if product.category:
                counts[product.category] = counts.get(product.category, 0) + 1
        return counts

    def average_spend(self) -> float:
        """Total spend divided by number of products; 0 for an empty history."""
        if not self.products:
            return 0.0
        total = sum(p.total_spent for p in self.products.values())
        return total / len(self.products)


class PurchasedItemAggregator:
    """
    Collapse order items into a PurchaseAggregate.

    purchase_count grows by one per order line, not per unit: an item bought
    with quantity 3 in one order still counts once.
    """

    def aggregate(self, orders: Iterable[OrderRecord]) -> PurchaseAggregate:
        products: dict[str, PurchasedProduct] = {}
        skipped = 0

        for order in orders:
            for item in order.items:
                if not item.product_id or item.unit_price is None:
                    skipped += 1
                    continue

                quantity = item.quantity if item.quantity is not None else 1
                spent = item.unit_price * quantity

                existing = products.get(item.product_id)
                if existing is None:
                    products[item.product_id] = PurchasedProduct(
                        product_id=item.product_id,
                        category=item.category,
                        purchase_count=1,
                        total_spent=spent,
                    )
                else:
                    existing.purchase_count += 1
                    existing.total_spent += spent
                    if not existing.category:
                        existing.category = item.category

        if skipped:
            logger.warning(f"Skipped {skipped} order items without product id or price")

        return PurchaseAggregate(products)
