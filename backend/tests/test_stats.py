"""Rolling statistics: window boundaries, rounding, check-in average limit."""

from datetime import datetime

from app.services.stats import checkin_mood_average, rounded_mean, window_start, window_stats


def test_window_start_is_seven_days_back():
    now = datetime(2026, 3, 10, 12, 30)
    assert window_start(now) == datetime(2026, 3, 3, 12, 30)
    assert window_start(now, days=1) == datetime(2026, 3, 9, 12, 30)


def test_empty_window_reports_zero():
    stats = window_stats([])
    assert stats.count == 0
    assert stats.average == 0


def test_average_rounded_to_two_decimals():
    assert rounded_mean([1, 2, 2]) == 1.67
    assert window_stats([3, 4]).average == 3.5
    assert window_stats([7.25, 8.0, 6.5]).count == 3


def test_checkin_average_uses_only_most_recent():
    # newest first: thirty 5s followed by older 1s
    moods = [5] * 30 + [1] * 10
    assert checkin_mood_average(moods, limit=30) == 5


def test_checkin_average_counts_missing_moods_as_zero():
    assert checkin_mood_average([4, None, 2], limit=30) == 2


def test_checkin_average_empty():
    assert checkin_mood_average([], limit=30) == 0
