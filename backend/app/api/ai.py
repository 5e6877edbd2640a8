"""AI Features API Endpoints - Recommendations & Cashback Reminders."""

from fastapi import APIRouter, Depends, Query

from app.ai.recommendations import RecommendationEngine
from app.core.deps import get_current_user, get_recommendation_engine, require_permission
from app.core.permissions import PermissionAction
from app.repositories.base import RepositoryError
from app.schemas.auth import CurrentUser
from app.schemas.recommendation import (
    CashbackReminderListResponse,
    RecommendationListResponse,
    TrainRecommendResponse,
)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/recommendations", response_model=RecommendationListResponse)
async def get_recommendations(
    product_id: str | None = Query(None, max_length=64, description="Anchor product (viewed or first cart item)"),
    current_user: CurrentUser = Depends(get_current_user),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """
    Suggestions for the current shopper.
    With product_id: products frequently bought together with it.
    Without: based on the shopper's purchase history.
    Empty list when nothing fits or the store is unavailable.
    """
    items = await engine.get_product_recommendations(current_user.id, anchor_product_id=product_id)
    return RecommendationListResponse(items=items, anchor_product_id=product_id)


@router.get("/cashback-reminders", response_model=CashbackReminderListResponse)
async def get_cashback_reminders(
    current_user: CurrentUser = Depends(require_permission(PermissionAction.CASHBACK_READ.value)),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """Customers with unused cashback and no purchase in over 30 days. Dashboard polls hourly."""
    reminders = await engine.check_unused_cashback()
    return CashbackReminderListResponse(items=reminders, total=len(reminders))


@router.post("/train-recommendations", response_model=TrainRecommendResponse)
async def train_recommendation_model(
    current_user: CurrentUser = Depends(require_permission(PermissionAction.AI_RECOMMENDATIONS.value)),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """
    Rebuild the co-purchase pair table from all orders.
    Runs on its own when the cache expires; use this after bulk order imports.
    """
    try:
        table = await engine.rebuild_frequency_table()
    except RepositoryError:
        return TrainRecommendResponse(
            success=False,
            orders_processed=0,
            baskets_used=0,
            pairs_kept=0,
            message="Order store unavailable, pair table not rebuilt",
        )

    return TrainRecommendResponse(
        success=True,
        orders_processed=table.orders_scanned,
        baskets_used=table.baskets_used,
        pairs_kept=len(table),
        message=f"Pair table rebuilt from {table.baskets_used} multi-item orders",
    )
