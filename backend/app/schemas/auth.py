"""Auth schemas."""

from uuid import UUID

from pydantic import BaseModel


# ── Current User ───────────────────────────────────
class CurrentUser(BaseModel):
    id: UUID
    email: str
    role: str
    permissions: list[str]
