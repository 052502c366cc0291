"""
Badge catalog and award rules. Rules are evaluated after every mutation that
can change eligibility; a badge key is awarded at most once per profile.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from app.core.errors import NotFoundError, ValidationError
from app.models.badge import Badge
from app.models.wellness_profile import WellnessProfile

logger = logging.getLogger(__name__)


class BadgeKey(str, enum.Enum):
    DEDICATION = "dedication"


class SharePlatform(str, enum.Enum):
    TWITTER = "twitter"
    LINKEDIN = "linkedin"


@dataclass(frozen=True)
class BadgeDefinition:
    key: BadgeKey
    name: str
    description: str
    image_url: str


@dataclass(frozen=True)
class BadgeRule:
    key: BadgeKey
    is_eligible: Callable[[WellnessProfile], bool]


DEDICATION_ACTIVITY_COUNT = 5

BADGE_CATALOG: dict[BadgeKey, BadgeDefinition] = {
    BadgeKey.DEDICATION: BadgeDefinition(
        key=BadgeKey.DEDICATION,
        name="Dedication Master",
        description=f"Completed {DEDICATION_ACTIVITY_COUNT} recommended activities",
        image_url="/badges/dedication.png",
    ),
}

BADGE_RULES: tuple[BadgeRule, ...] = (
    BadgeRule(BadgeKey.DEDICATION, lambda p: len(p.completed_activities) >= DEDICATION_ACTIVITY_COUNT),
)


def has_badge(profile: WellnessProfile, key: BadgeKey) -> bool:
    return any(b.key == key.value for b in profile.badges)


def award(profile: WellnessProfile, key: BadgeKey, now: datetime | None = None) -> Badge | None:
    """Append the catalog badge for `key` unless the profile already has it."""
    if has_badge(profile, key):
        return None
    definition = BADGE_CATALOG[key]
    badge = Badge(
        key=key.value,
        name=definition.name,
        description=definition.description,
        image_url=definition.image_url,
        earned_at=now or datetime.now(timezone.utc),
        shared_twitter=False,
        shared_linkedin=False,
    )
    profile.badges.append(badge)
    logger.info("Awarded badge %s to profile %s", key.value, profile.id)
    return badge


def evaluate(profile: WellnessProfile, now: datetime | None = None, rules: tuple[BadgeRule, ...] = BADGE_RULES) -> list[Badge]:
    """Apply every rule; return the badges awarded by this call (empty when nothing changed)."""
    awarded = []
    for rule in rules:
        if rule.is_eligible(profile):
            badge = award(profile, rule.key, now)
            if badge is not None:
                awarded.append(badge)
    return awarded


def mark_shared(profile: WellnessProfile, badge_id: int, platform: str) -> Badge:
    try:
        target = SharePlatform(platform)
    except ValueError:
        allowed = ", ".join(p.value for p in SharePlatform)
        raise ValidationError(
            f"Unsupported platform: {platform}",
            details=[{"field": "platform", "message": f"must be one of: {allowed}"}],
        )
    badge = next((b for b in profile.badges if b.id == badge_id), None)
    if badge is None:
        raise NotFoundError("Badge not found")
    if target is SharePlatform.TWITTER:
        badge.shared_twitter = True
    else:
        badge.shared_linkedin = True
    return badge
