"""SQLAlchemy models read by the recommendation engine."""

from app.models.user import User
from app.models.product import Product
from app.models.order import Order, OrderItem

__all__ = [
    "User",
    "Product",
    "Order",
    "OrderItem",
]
