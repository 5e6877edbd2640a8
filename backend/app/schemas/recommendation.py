"""Recommendation & cashback reminder schemas for API responses."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.records import ProductRecord


class RecommendationCandidate(ProductRecord):
    """Catalog product annotated with its ranking score."""
    recommendation_score: float = 0.0


class RecommendationListResponse(BaseModel):
    items: list[RecommendationCandidate]
    anchor_product_id: str | None = None


class CashbackReminder(BaseModel):
    user_id: UUID | str
    name: str | None = None
    email: str | None = None
    cashback_balance: float
    days_since_last_purchase: int = Field(..., ge=0)
    priority: Literal["high", "medium"]


class CashbackReminderListResponse(BaseModel):
    items: list[CashbackReminder]
    total: int


class TrainRecommendResponse(BaseModel):
    success: bool
    orders_processed: int
    baskets_used: int
    pairs_kept: int
    message: str
