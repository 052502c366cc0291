"""
Day-keyed history ledgers (steps, sleep, mood) on a wellness profile.

Each series holds at most one entry per calendar day: writes find the entry
for the day and overwrite its value, otherwise append. Storage order is
append order; read_window sorts ascending by date every time it is iterated.
"""
from __future__ import annotations

import enum
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Callable

from app.core.errors import ValidationError
from app.models.history import MoodEntry, SleepEntry, StepEntry
from app.models.wellness_profile import WellnessProfile


class Series(str, enum.Enum):
    STEPS = "steps"
    SLEEP = "sleep"
    MOOD = "mood"


@dataclass(frozen=True)
class SeriesSpec:
    entry_cls: type
    attr: str  # WellnessProfile relationship holding the entries
    response_key: str  # value key in API projections
    coerce: Callable[[Any], float | int]
    describe: str


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _coerce_steps(value: Any) -> int:
    if not _is_number(value) or int(value) != value or value < 0:
        raise ValueError
    return int(value)


def _coerce_sleep(value: Any) -> float:
    if not _is_number(value) or not 0 <= value <= 24:
        raise ValueError
    return float(value)


def _coerce_mood(value: Any) -> int:
    if not _is_number(value) or int(value) != value or not 1 <= value <= 5:
        raise ValueError
    return int(value)


SERIES: dict[Series, SeriesSpec] = {
    Series.STEPS: SeriesSpec(StepEntry, "step_history", "steps", _coerce_steps, "an integer >= 0"),
    Series.SLEEP: SeriesSpec(SleepEntry, "sleep_history", "hours", _coerce_sleep, "a number between 0 and 24"),
    Series.MOOD: SeriesSpec(MoodEntry, "mood_history", "rating", _coerce_mood, "an integer between 1 and 5"),
}


def normalize_day(value: date | datetime) -> date:
    """Calendar day (server local time) of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def validate_value(series: Series, value: Any) -> float | int:
    """Return the value coerced to the series type or raise ValidationError."""
    spec = SERIES[series]
    try:
        return spec.coerce(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid {series.value} value: must be {spec.describe}",
            details=[{"field": series.value, "message": f"must be {spec.describe}"}],
        )


def entries(profile: WellnessProfile, series: Series) -> list:
    return getattr(profile, SERIES[series].attr)


def upsert_day_entry(profile: WellnessProfile, series: Series, when: date | datetime, value: Any):
    """Overwrite the entry for the day of `when` or append a new one. Returns the entry."""
    checked = validate_value(series, value)
    day = normalize_day(when)
    history = entries(profile, series)
    for entry in history:
        if entry.date == day:
            entry.value = checked
            return entry
    entry = SERIES[series].entry_cls(date=day, value=checked)
    history.append(entry)
    return entry


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


class LedgerWindow:
    """Entries dated on or after `since`, projected to {"date": ISO day, key: value}.

    Iterating again re-reads the underlying entries, so the window always
    reflects the current ledger.
    """

    def __init__(self, source: Iterable, since: date | datetime, key: str):
        self._source = source
        self._since = _as_datetime(since)
        self.key = key

    def __iter__(self) -> Iterator[dict]:
        selected = [e for e in self._source if datetime.combine(e.date, time.min) >= self._since]
        selected.sort(key=lambda e: e.date)
        for e in selected:
            yield {"date": e.date.isoformat(), self.key: e.value}

    def values(self) -> list[float]:
        return [item[self.key] for item in self]

    def to_list(self) -> list[dict]:
        return list(self)


def read_window(profile: WellnessProfile, series: Series, since: date | datetime) -> LedgerWindow:
    spec = SERIES[series]
    return LedgerWindow(entries(profile, series), since, spec.response_key)
