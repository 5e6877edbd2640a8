"""Unused cashback reminders for the merchandising dashboard."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from app.repositories.base import UserRepository
from app.schemas.records import CashbackUserRecord
from app.schemas.recommendation import CashbackReminder

logger = logging.getLogger(__name__)

STALE_DAYS = 30
HIGH_PRIORITY_DAYS = 60


def days_since(moment: datetime, now: datetime) -> int:
    """Whole days elapsed. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - moment).days


class CashbackReminderScanner:
    """Flag users holding cashback who have not bought anything for more than ``stale_days``."""

    def __init__(
        self,
        users: UserRepository,
        stale_days: int = STALE_DAYS,
        high_priority_days: int = HIGH_PRIORITY_DAYS,
    ):
        self._users = users
        self.stale_days = stale_days
        self.high_priority_days = high_priority_days

    def reminder_for(self, user: CashbackUserRecord, now: datetime) -> CashbackReminder | None:
        if user.cashback_balance <= 0 or user.last_purchase_date is None:
            return None

        days = days_since(user.last_purchase_date, now)
        if days <= self.stale_days:
            return None

        return CashbackReminder(
            user_id=user.id,
            name=user.display_name,
            email=user.email,
            cashback_balance=user.cashback_balance,
            days_since_last_purchase=days,
            priority="high" if days > self.high_priority_days else "medium",
        )

    async def scan(self, now: datetime | None = None) -> list[CashbackReminder]:
        """Raises RepositoryError if the user store is unreachable."""
        now = now or datetime.now(timezone.utc)
        users = await self._users.find_users_with_positive_cashback()

        reminders = []
        for user in users:
            reminder = self.reminder_for(user, now)
            if reminder is not None:
                reminders.append(reminder)

        logger.info(f"Cashback scan: {len(users)} users with balance, {len(reminders)} reminders")
        return reminders
