"""
Recommendation Engine
Product suggestions from storefront purchase behaviour.

Pipeline:
1. Purchase history -> per-product aggregates (count, spend, category)
2. Basket analysis over all orders -> top co-purchased pairs (cached)
3. Candidates: products paired with an anchor product, or with anything
   the user bought
4. Heuristic ranking: category affinity, price closeness, rating, featured

Also scans users for unused cashback balances.

Public entry points never raise on store failures: recommendations are an
enhancement, so a failing store yields an empty list.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from uuid import UUID

from app.ai.basket import TOP_PAIR_LIMIT, BasketPairMiner, FrequencyTable
from app.ai.candidates import HISTORY_CANDIDATE_LIMIT, CandidateGenerator
from app.ai.cashback import HIGH_PRIORITY_DAYS, STALE_DAYS, CashbackReminderScanner
from app.ai.history import HISTORY_ORDER_LIMIT, HISTORY_STATUSES, OrderHistoryReader, PurchasedItemAggregator
from app.ai.ranking import RECOMMENDATION_LIMIT, RecommendationRanker
from app.core.config import settings
from app.repositories.base import OrderRepository, ProductRepository, RepositoryError, UserRepository
from app.schemas.recommendation import CashbackReminder, RecommendationCandidate

logger = logging.getLogger(__name__)


class PairTableCache:
    """
    Holds the last FrequencyTable for ``ttl_seconds``.

    ttl_seconds <= 0 disables caching: every call rebuilds the table.
    A failed rebuild keeps the previous table and re-raises.
    """

    def __init__(self, ttl_seconds: float = 600, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._table: FrequencyTable | None = None
        self._built_at: float | None = None
        self._lock = asyncio.Lock()

    @property
    def table(self) -> FrequencyTable | None:
        return self._table

    def is_fresh(self) -> bool:
        if self.ttl_seconds <= 0 or self._table is None or self._built_at is None:
            return False
        return self._clock() - self._built_at < self.ttl_seconds

    def invalidate(self) -> None:
        self._built_at = None

    async def get(self, build: Callable[[], Awaitable[FrequencyTable]]) -> FrequencyTable:
        if self.ttl_seconds <= 0:
            return await build()
        if self.is_fresh():
            return self._table

        async with self._lock:
            # Another caller may have rebuilt while we waited
            if self.is_fresh():
                return self._table
            table = await build()
            self._table = table
            self._built_at = self._clock()
            return table


class RecommendationEngine:
    """
    Facade over the history, basket, candidate, ranking and cashback components.

    Repositories are injected per request; the pair table cache is shared.
    """

    def __init__(
        self,
        orders: OrderRepository,
        products: ProductRepository,
        users: UserRepository,
        pair_cache: PairTableCache | None = None,
        history_order_limit: int = HISTORY_ORDER_LIMIT,
        history_statuses: Sequence[str] = HISTORY_STATUSES,
        top_pair_limit: int = TOP_PAIR_LIMIT,
        history_candidate_limit: int = HISTORY_CANDIDATE_LIMIT,
        recommendation_limit: int = RECOMMENDATION_LIMIT,
        stale_days: int = STALE_DAYS,
        high_priority_days: int = HIGH_PRIORITY_DAYS,
    ):
        self._orders = orders
        self.pair_cache = pair_cache or PairTableCache(ttl_seconds=0)
        self.history_reader = OrderHistoryReader(orders, history_order_limit, history_statuses)
        self.aggregator = PurchasedItemAggregator()
        self.miner = BasketPairMiner(top_k=top_pair_limit)
        self.candidate_generator = CandidateGenerator(products, history_limit=history_candidate_limit)
        self.ranker = RecommendationRanker(limit=recommendation_limit)
        self.cashback_scanner = CashbackReminderScanner(users, stale_days, high_priority_days)

    async def build_frequency_table(self) -> FrequencyTable:
        orders = await self._orders.find_all_orders()
        return self.miner.mine(orders)

    async def frequency_table(self) -> FrequencyTable:
        return await self.pair_cache.get(self.build_frequency_table)

    async def rebuild_frequency_table(self) -> FrequencyTable:
        """Drop the cached table and mine again. Raises RepositoryError on store failure."""
        self.pair_cache.invalidate()
        return await self.frequency_table()

    async def get_product_recommendations(
        self,
        user_id: UUID | str,
        anchor_product_id: str | None = None,
    ) -> list[RecommendationCandidate]:
        """
        Ranked suggestions for a user.

        Args:
            user_id: Shopper the suggestions are for
            anchor_product_id: Product in context (viewed item, first cart item).
                Without it suggestions come from the whole purchase history.
        """
        try:
            history = await self.history_reader.read(user_id)
            purchased = self.aggregator.aggregate(history)
            table = await self.frequency_table()

            if anchor_product_id:
                candidates = await self.candidate_generator.from_anchor(anchor_product_id, table, purchased)
            else:
                candidates = await self.candidate_generator.from_history(purchased, table)

            # Never suggest something the user already bought
            candidates = [c for c in candidates if c.id not in purchased]
            return self.ranker.rank(candidates, purchased)

        except RepositoryError:
            logger.exception(f"Error generating recommendations for user {user_id}")
            return []

    async def check_unused_cashback(self, now: datetime | None = None) -> list[CashbackReminder]:
        try:
            return await self.cashback_scanner.scan(now=now)
        except RepositoryError:
            logger.exception("Error checking unused cashback")
            return []


# Singleton
pair_table_cache = PairTableCache(ttl_seconds=settings.PAIR_TABLE_TTL_SECONDS)
