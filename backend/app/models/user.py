"""User model."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Numeric, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255))
    cashback_balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0.00"), nullable=False, index=True
    )
    last_purchase_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relationships
    orders = relationship("Order", back_populates="user", lazy="raise")

    def __repr__(self) -> str:
        return f"<User {self.email}>"
