"""SQLAlchemy-backed repositories."""

from collections.abc import Sequence
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.order import Order
from app.models.product import Product
from app.models.user import User
from app.repositories.base import RepositoryError
from app.schemas.records import CashbackUserRecord, OrderRecord, ProductRecord

# asyncpg raises OSError (ConnectionRefusedError, ...) unwrapped when the server is unreachable
STORE_ERRORS = (SQLAlchemyError, OSError, ValidationError)


class SqlOrderRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_orders(
        self,
        user_id: UUID | str,
        status_in: Sequence[str],
        limit: int,
    ) -> list[OrderRecord]:
        query = (
            select(Order)
            .where(
                Order.user_id == user_id,
                Order.status.in_(list(status_in)),
            )
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc())
            .limit(limit)
        )
        try:
            result = await self._db.execute(query)
            return [OrderRecord.model_validate(o) for o in result.scalars().all()]
        except STORE_ERRORS as exc:
            raise RepositoryError(f"Failed to load orders for user {user_id}") from exc

    async def find_all_orders(self) -> list[OrderRecord]:
        query = select(Order).options(selectinload(Order.items))
        try:
            result = await self._db.execute(query)
            return [OrderRecord.model_validate(o) for o in result.scalars().all()]
        except STORE_ERRORS as exc:
            raise RepositoryError("Failed to load orders") from exc


class SqlProductRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_product_by_id(self, product_id: str) -> ProductRecord | None:
        try:
            result = await self._db.execute(
                select(Product).where(
                    Product.id == product_id,
                    Product.is_active == True,  # noqa: E712
                )
            )
            product = result.scalar_one_or_none()
            if not product:
                return None
            return ProductRecord.model_validate(product)
        except STORE_ERRORS as exc:
            raise RepositoryError(f"Failed to load product {product_id}") from exc


class SqlUserRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_users_with_positive_cashback(self) -> list[CashbackUserRecord]:
        try:
            result = await self._db.execute(
                select(User).where(User.cashback_balance > 0)
            )
            return [CashbackUserRecord.model_validate(u) for u in result.scalars().all()]
        except STORE_ERRORS as exc:
            raise RepositoryError("Failed to load users with cashback") from exc
