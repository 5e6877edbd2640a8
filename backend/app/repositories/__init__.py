from app.repositories.base import (
    RepositoryError, OrderRepository, ProductRepository, UserRepository,
)

__all__ = ["RepositoryError", "OrderRepository", "ProductRepository", "UserRepository"]
