from app.schemas.records import (
    OrderItemRecord, OrderRecord, ProductRecord, CashbackUserRecord,
)
from app.schemas.recommendation import (
    RecommendationCandidate, RecommendationListResponse,
    CashbackReminder, CashbackReminderListResponse, TrainRecommendResponse,
)

__all__ = [
    "OrderItemRecord", "OrderRecord", "ProductRecord", "CashbackUserRecord",
    "RecommendationCandidate", "RecommendationListResponse",
    "CashbackReminder", "CashbackReminderListResponse", "TrainRecommendResponse",
]
