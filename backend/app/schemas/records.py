"""Read records handed from the repositories to the recommendation engine.

Built with ``from_attributes`` so ORM rows and in-memory fakes convert the
same way. Order item fields are optional on purpose: malformed rows are
skipped by the engine instead of failing validation here.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class OrderItemRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: str | None = None
    unit_price: float | None = None
    quantity: int | None = 1
    category: str | None = None


class OrderRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID | str
    user_id: UUID | str | None = None
    status: str
    created_at: datetime | None = None
    items: list[OrderItemRecord] = Field(default_factory=list)


class ProductRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str = ""
    category: str | None = None
    price: float | None = None
    rating: float | None = None
    featured: bool = False


class CashbackUserRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID | str
    display_name: str | None = None
    email: str | None = None
    cashback_balance: float
    last_purchase_date: datetime | None = None
