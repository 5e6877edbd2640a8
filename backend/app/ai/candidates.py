"""Candidate generation from the pair frequency table."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from app.ai.basket import FrequencyTable
from app.ai.history import PurchaseAggregate
from app.repositories.base import ProductRepository
from app.schemas.records import ProductRecord

logger = logging.getLogger(__name__)

HISTORY_CANDIDATE_LIMIT = 10


class CandidateGenerator:
    """
    Turn co-purchase pairs into catalog products worth suggesting.

    Anchor mode: products bought together with one product (item being
    viewed, first item in the cart).
    History mode: union of anchor lookups over everything the user bought,
    capped before catalog lookups.
    """

    def __init__(self, products: ProductRepository, history_limit: int = HISTORY_CANDIDATE_LIMIT):
        self._products = products
        self.history_limit = history_limit

    def related_ids_for_anchor(
        self,
        anchor_product_id: str,
        table: FrequencyTable,
        purchased: PurchaseAggregate | None = None,
    ) -> list[str]:
        return [
            pid for pid in table.related_to(anchor_product_id)
            if pid != anchor_product_id and (purchased is None or pid not in purchased)
        ]

    def related_ids_for_history(self, purchased: PurchaseAggregate, table: FrequencyTable) -> list[str]:
        related: dict[str, None] = {}
        for product_id in purchased.product_ids:
            for other in table.related_to(product_id):
                if other not in purchased:
                    related.setdefault(other, None)
        return list(related)[: self.history_limit]

    async def from_anchor(
        self,
        anchor_product_id: str,
        table: FrequencyTable,
        purchased: PurchaseAggregate | None = None,
    ) -> list[ProductRecord]:
        ids = self.related_ids_for_anchor(anchor_product_id, table, purchased)
        return await self.resolve(ids)

    async def from_history(self, purchased: PurchaseAggregate, table: FrequencyTable) -> list[ProductRecord]:
        ids = self.related_ids_for_history(purchased, table)
        return await self.resolve(ids)

    async def resolve(self, product_ids: Iterable[str]) -> list[ProductRecord]:
        """Catalog lookups in order. Deleted products are dropped; store errors propagate."""
        products: list[ProductRecord] = []
        for product_id in product_ids:
            product = await self._products.find_product_by_id(product_id)
            if product is None:
                logger.debug(f"Product {product_id} in pair table no longer in catalog, skipped")
                continue
            products.append(product)
        return products
