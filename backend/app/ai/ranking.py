"""Heuristic ranking of recommendation candidates."""

from __future__ import annotations

from collections.abc import Iterable

from app.ai.history import PurchaseAggregate
from app.schemas.records import ProductRecord
from app.schemas.recommendation import RecommendationCandidate

RECOMMENDATION_LIMIT = 6

# Scoring weights
CATEGORY_WEIGHT = 10
CLOSE_PRICE_BONUS = 20  # relative price difference < 0.3
NEAR_PRICE_BONUS = 10  # relative price difference < 0.5
CLOSE_PRICE_DIFF = 0.3
NEAR_PRICE_DIFF = 0.5
RATING_WEIGHT = 5
DEFAULT_RATING = 4.0
FEATURED_BONUS = 15


class RecommendationRanker:
    """
    Linear score per candidate:

        10 x (purchased products in the candidate's category)
      + 20 / 10 / 0 by price closeness to the user's average spend per product
      + 5 x rating (4 when unrated)
      + 15 if featured

    Sorted by score descending, then product id ascending.
    """

    def __init__(self, limit: int = RECOMMENDATION_LIMIT):
        self.limit = limit

    def score(
        self,
        product: ProductRecord,
        category_counts: dict[str, int],
        average_price: float,
    ) -> float:
        score = 0.0

        if product.category and product.category in category_counts:
            score += CATEGORY_WEIGHT * category_counts[product.category]

        # No history -> average is 0 and the bonus does not apply
        if average_price > 0 and product.price is not None:
            price_diff = abs(product.price - average_price) / average_price
            if price_diff < CLOSE_PRICE_DIFF:
                score += CLOSE_PRICE_BONUS
            elif price_diff < NEAR_PRICE_DIFF:
                score += NEAR_PRICE_BONUS

        rating = product.rating if product.rating is not None else DEFAULT_RATING
        score += RATING_WEIGHT * rating

        if product.featured:
            score += FEATURED_BONUS

        return score

    def rank(
        self,
        candidates: Iterable[ProductRecord],
        purchased: PurchaseAggregate,
    ) -> list[RecommendationCandidate]:
        category_counts = purchased.category_counts()
        average_price = purchased.average_spend()

        scored = [
            RecommendationCandidate(
                **product.model_dump(),
                recommendation_score=self.score(product, category_counts, average_price),
            )
            for product in candidates
        ]
        scored.sort(key=lambda c: (-c.recommendation_score, c.id))
        return scored[: self.limit]
