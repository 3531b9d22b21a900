"""Daily-activity streak bookkeeping for the dashboard."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from app.core.db.schemas.auth import User

DAY = timedelta(days=1)


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _day(dt: datetime) -> date:
    return _utc(dt).date()


def next_streak(
    last_active_at: Optional[datetime], consecutive_days: int, now: datetime
) -> int:
    """Streak after an activity at ``now``.

    More than 24 hours of silence resets the streak; activity on the calendar
    day after the last one extends it; a second visit on the same day keeps it.
    """
    if last_active_at is None or _utc(last_active_at) < _utc(now) - DAY:
        return 1
    last_day, today = _day(last_active_at), _day(now)
    if last_day == today - DAY:
        return consecutive_days + 1
    if last_day < today - DAY:
        return 1
    return max(consecutive_days, 1)


def total_days(started_at: Optional[datetime], now: Optional[datetime] = None) -> int:
    if started_at is None:
        return 0
    now = now or datetime.now(timezone.utc)
    return max(0, (_utc(now) - _utc(started_at)).days)


async def record_activity(user_manager, user: User, now: Optional[datetime] = None) -> User:
    now = now or datetime.now(timezone.utc)
    streak = next_streak(user.last_active_at, user.consecutive_days or 0, now)
    return await user_manager.user_db.update(
        user, {"consecutive_days": streak, "last_active_at": now}
    )
