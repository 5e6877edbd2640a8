"""Unit tests for unused cashback reminders."""

from datetime import datetime, timedelta, timezone

import pytest

from app.ai.cashback import CashbackReminderScanner, days_since
from fakes import BASE_TIME, FakeUserRepository, make_cashback_user


@pytest.mark.asyncio
async def test_thresholds():
    users = [
        make_cashback_user("d30", 30),
        make_cashback_user("d31", 31),
        make_cashback_user("d45", 45),
        make_cashback_user("d60", 60),
        make_cashback_user("d61", 61),
    ]
    reminders = await CashbackReminderScanner(FakeUserRepository(users)).scan(now=BASE_TIME)

    by_user = {r.user_id: r for r in reminders}
    assert "d30" not in by_user  # strictly more than 30 days
    assert by_user["d31"].priority == "medium"
    assert by_user["d45"].priority == "medium"
    assert by_user["d60"].priority == "medium"
    assert by_user["d61"].priority == "high"
    assert by_user["d61"].days_since_last_purchase == 61


@pytest.mark.asyncio
async def test_users_without_last_purchase_are_skipped():
    users = [make_cashback_user("never", None), make_cashback_user("old", 90)]
    reminders = await CashbackReminderScanner(FakeUserRepository(users)).scan(now=BASE_TIME)
    assert [r.user_id for r in reminders] == ["old"]


@pytest.mark.asyncio
async def test_reminder_carries_contact_and_balance():
    user = make_cashback_user("u7", 45, balance=1250.5)
    [reminder] = await CashbackReminderScanner(FakeUserRepository([user])).scan(now=BASE_TIME)
    assert reminder.name == "User u7"
    assert reminder.email == "u7@example.com"
    assert reminder.cashback_balance == pytest.approx(1250.5)


@pytest.mark.asyncio
async def test_zero_balance_users_never_flagged():
    user = make_cashback_user("empty", 90, balance=0.0)
    scanner = CashbackReminderScanner(FakeUserRepository([user]))
    assert scanner.reminder_for(user, BASE_TIME) is None
    assert await scanner.scan(now=BASE_TIME) == []


def test_days_since_floors_partial_days():
    now = BASE_TIME
    assert days_since(now - timedelta(days=30, hours=23), now) == 30
    assert days_since(now - timedelta(days=31), now) == 31


def test_days_since_treats_naive_as_utc():
    now = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
    naive = datetime(2026, 1, 1, 12, 0, 0)
    assert days_since(naive, now) == 59


def test_custom_thresholds():
    scanner = CashbackReminderScanner(FakeUserRepository(), stale_days=7, high_priority_days=14)
    assert scanner.reminder_for(make_cashback_user("a", 7), BASE_TIME) is None
    assert scanner.reminder_for(make_cashback_user("b", 8), BASE_TIME).priority == "medium"
    assert scanner.reminder_for(make_cashback_user("c", 15), BASE_TIME).priority == "high"
