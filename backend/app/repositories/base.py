"""Store access protocols used by the recommendation engine.

The engine only reads. Implementations live in ``app.repositories.sql``;
tests pass in-memory fakes that satisfy the same protocols.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable
from uuid import UUID

from app.schemas.records import CashbackUserRecord, OrderRecord, ProductRecord


class RepositoryError(Exception):
    """The backing store could not be read (unreachable, query error, ...)."""


@runtime_checkable
class OrderRepository(Protocol):
    async def find_orders(
        self,
        user_id: UUID | str,
        status_in: Sequence[str],
        limit: int,
    ) -> list[OrderRecord]:
        """
        Return the user's orders with a status in ``status_in``.

        Args:
            user_id: Owning user
            status_in: Accepted order statuses
            limit: Maximum orders to return

        Returns:
            Orders sorted by creation time, newest first
        """
        ...

    async def find_all_orders(self) -> list[OrderRecord]:
        """Return every order in the store, any status, any user."""
        ...


@runtime_checkable
class ProductRepository(Protocol):
    async def find_product_by_id(self, product_id: str) -> ProductRecord | None:
        """Return the catalog product, or None when it no longer exists."""
        ...


@runtime_checkable
class UserRepository(Protocol):
    async def find_users_with_positive_cashback(self) -> list[CashbackUserRecord]:
        """Return users whose cashback balance is greater than zero."""
        ...
