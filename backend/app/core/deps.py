"""Dependency injection: auth verification, permission enforcement, engine wiring."""

from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.ai.recommendations import RecommendationEngine, pair_table_cache
from app.core.config import settings
from app.core.security import decode_access_token
from app.db.base import get_db
from app.repositories.sql import SqlOrderRepository, SqlProductRepository, SqlUserRepository
from app.schemas.auth import CurrentUser

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


async def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """Decode JWT and return CurrentUser. Raises 401 on invalid/expired token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception
        return CurrentUser(
            id=UUID(user_id),
            email=payload.get("email", ""),
            role=payload["role"],
            permissions=payload.get("permissions", []),
        )
    except (JWTError, KeyError, ValueError):
        raise credentials_exception


def require_permission(*required: str):
    """Dependency factory: checks the user has ALL required permissions."""

    async def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        missing = [p for p in required if p not in user.permissions]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permissions: {', '.join(missing)}",
            )
        return user

    return checker


async def get_recommendation_engine(db: AsyncSession = Depends(get_db)) -> RecommendationEngine:
    """Engine bound to the request session, sharing the process-wide pair table cache."""
    return RecommendationEngine(
        orders=SqlOrderRepository(db),
        products=SqlProductRepository(db),
        users=SqlUserRepository(db),
        pair_cache=pair_table_cache,
        history_order_limit=settings.HISTORY_ORDER_LIMIT,
        history_statuses=settings.HISTORY_STATUSES,
        top_pair_limit=settings.TOP_PAIR_LIMIT,
        history_candidate_limit=settings.HISTORY_CANDIDATE_LIMIT,
        recommendation_limit=settings.RECOMMENDATION_LIMIT,
        stale_days=settings.CASHBACK_STALE_DAYS,
        high_priority_days=settings.CASHBACK_HIGH_PRIORITY_DAYS,
    )
