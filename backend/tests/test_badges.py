"""Badge evaluator: award-once semantics and sharing."""

from datetime import datetime, timezone

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.models.completed_activity import CompletedActivity
from app.services import badges
from app.services.badges import BadgeKey
from app.services.profile_store import new_profile

NOW = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


def _profile_with_activities(n: int):
    profile = new_profile(1, name="Alex", age=30, current_mental_health="Good")
    for i in range(n):
        profile.completed_activities.append(
            CompletedActivity(activity=f"activity {i}", sentiment="neutral", completed_at=NOW)
        )
    return profile


def test_no_badge_below_threshold():
    profile = _profile_with_activities(4)
    assert badges.evaluate(profile, NOW) == []
    assert profile.badges == []


def test_dedication_awarded_at_five():
    profile = _profile_with_activities(5)
    awarded = badges.evaluate(profile, NOW)
    assert len(awarded) == 1
    badge = awarded[0]
    assert badge.key == BadgeKey.DEDICATION.value
    assert badge.name == "Dedication Master"
    assert badge.description == "Completed 5 recommended activities"
    assert badge.image_url == "/badges/dedication.png"
    assert badge.earned_at == NOW
    assert badge.shared_twitter is False and badge.shared_linkedin is False


def test_dedication_awarded_only_once():
    profile = _profile_with_activities(5)
    badges.evaluate(profile, NOW)
    profile.completed_activities.append(
        CompletedActivity(activity="one more", sentiment="positive", completed_at=NOW)
    )
    assert badges.evaluate(profile, NOW) == []
    assert len(profile.badges) == 1


def test_mark_shared_sets_flag():
    profile = _profile_with_activities(5)
    badge = badges.evaluate(profile, NOW)[0]
    badge.id = 7
    badges.mark_shared(profile, 7, "twitter")
    assert badge.shared_twitter is True
    assert badge.shared_linkedin is False
    badges.mark_shared(profile, 7, "linkedin")
    assert badge.shared_linkedin is True


def test_mark_shared_unknown_badge():
    profile = _profile_with_activities(0)
    with pytest.raises(NotFoundError) as exc:
        badges.mark_shared(profile, 999, "twitter")
    assert exc.value.message == "Badge not found"


def test_mark_shared_unknown_platform():
    profile = _profile_with_activities(5)
    badge = badges.evaluate(profile, NOW)[0]
    badge.id = 1
    with pytest.raises(ValidationError):
        badges.mark_shared(profile, 1, "myspace")
    assert badge.shared_twitter is False
