"""Rolling statistics over ledger windows and the check-in log."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.config import settings


@dataclass(frozen=True)
class WindowStats:
    count: int
    average: float


def window_start(now: datetime | None = None, days: int | None = None) -> datetime:
    now = now or datetime.now()
    return now - timedelta(days=days if days is not None else settings.stats_window_days)


def rounded_mean(values: Iterable[float]) -> float:
    """Arithmetic mean rounded to 2 decimals; 0 for no values."""
    values = list(values)
    if not values:
        return 0
    return round(sum(values) / len(values), 2)


def window_stats(values: Iterable[float]) -> WindowStats:
    values = list(values)
    return WindowStats(count=len(values), average=rounded_mean(values))


def checkin_mood_average(moods: Iterable[int | None], limit: int | None = None) -> float:
    """Average mood of the most recent check-ins; moods must be newest first. Missing moods count as 0."""
    limit = limit if limit is not None else settings.checkin_average_window
    recent = [m or 0 for m in list(moods)[:limit]]
    return rounded_mean(recent)
