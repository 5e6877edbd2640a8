"""
Basket analysis: co-occurrence of products within a single order.

Every order with two or more distinct products contributes one count to each
unordered pair of its products. The result is a FrequencyTable holding the
most frequent pairs, used to answer "bought together with X".
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from itertools import combinations

from app.schemas.records import OrderRecord

logger = logging.getLogger(__name__)

TOP_PAIR_LIMIT = 100
PAIR_KEY_SEPARATOR = "-"


class ItemPair:
    """Unordered pair of product ids. (A, B) and (B, A) are the same pair."""

    __slots__ = ("first", "second")

    def __init__(self, a: str, b: str):
        self.first, self.second = (a, b) if a <= b else (b, a)

    @property
    def key(self) -> str:
        """External key: sorted ids joined with '-'. Never split it back, ids may contain '-'."""
        return f"{self.first}{PAIR_KEY_SEPARATOR}{self.second}"

    def contains(self, product_id: str) -> bool:
        return product_id == self.first or product_id == self.second

    def other(self, product_id: str) -> str | None:
        """The member that is not ``product_id``, or None if it is not in the pair."""
        if product_id == self.first:
            return self.second
        if product_id == self.second:
            return self.first
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ItemPair):
            return NotImplemented
        return (self.first, self.second) == (other.first, other.second)

    def __hash__(self) -> int:
        return hash((self.first, self.second))

    def __repr__(self) -> str:
        return f"<ItemPair {self.key}>"


def pair_key(a: str, b: str) -> str:
    return ItemPair(a, b).key


def basket_of(order: OrderRecord) -> list[str]:
    """Distinct product ids of an order, in first-seen order. Items without an id are ignored."""
    seen: dict[str, None] = {}
    for item in order.items:
        if item.product_id:
            seen.setdefault(item.product_id, None)
    return list(seen)


class FrequencyTable:
    """Pairs sorted by co-occurrence count, descending, truncated to the top-K."""

    def __init__(
        self,
        entries: list[tuple[ItemPair, int]],
        orders_scanned: int = 0,
        baskets_used: int = 0,
        pair_occurrences: int = 0,
    ):
        self.entries = entries
        self.orders_scanned = orders_scanned
        self.baskets_used = baskets_used
        # (order, pair) occurrences counted before truncation
        self.pair_occurrences = pair_occurrences

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def count(self, a: str, b: str) -> int:
        target = ItemPair(a, b)
        for pair, count in self.entries:
            if pair == target:
                return count
        return 0

    def related_to(self, product_id: str) -> list[str]:
        """Products paired with ``product_id``, deduplicated, most frequent first."""
        related: dict[str, None] = {}
        for pair, _count in self.entries:
            other = pair.other(product_id)
            if other is not None and other != product_id:
                related.setdefault(other, None)
        return list(related)

    @classmethod
    def empty(cls) -> FrequencyTable:
        return cls(entries=[])


class BasketPairMiner:
    """
    Count product pairs across every order in the store.

    Cost is O(orders x items^2); the result is meant to be cached
    (see PairTableCache) rather than rebuilt per request.
    """

    def __init__(self, top_k: int = TOP_PAIR_LIMIT):
        self.top_k = top_k

    def count_pairs(self, orders: Iterable[OrderRecord]) -> tuple[Counter[ItemPair], int, int]:
        """
        Raw pair counts before sorting and truncation.

        Returns:
            (counter, orders_scanned, baskets_used)
        """
        counter: Counter[ItemPair] = Counter()
        orders_scanned = 0
        baskets_used = 0

        for order in orders:
            orders_scanned += 1
            basket = basket_of(order)
            # Single-product baskets carry no pairing signal
            if len(basket) < 2:
                continue
            baskets_used += 1
            for a, b in combinations(basket, 2):
                counter[ItemPair(a, b)] += 1

        return counter, orders_scanned, baskets_used

    def mine(self, orders: Iterable[OrderRecord]) -> FrequencyTable:
        counter, orders_scanned, baskets_used = self.count_pairs(orders)

        # Counter.most_common keeps first-observed order among equal counts
        top_pairs = counter.most_common(self.top_k)

        table = FrequencyTable(
            entries=top_pairs,
            orders_scanned=orders_scanned,
            baskets_used=baskets_used,
            pair_occurrences=sum(counter.values()),
        )
        logger.info(
            f"Basket analysis: {orders_scanned} orders, {baskets_used} baskets, "
            f"{len(counter)} distinct pairs, kept {len(top_pairs)}"
        )
        return table
