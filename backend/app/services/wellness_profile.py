"""
Onboarding and daily-update operations on a user's wellness profile.

Each mutating operation validates its input first, then loads the profile,
applies one change, re-evaluates badges where eligibility can change and
commits once, all while holding the user's lock. Responses are projections
(e.g. the 7-day window) rather than the stored document.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.errors import ValidationError
from app.core.locks import user_locks
from app.models.check_in import CheckIn
from app.models.completed_activity import CompletedActivity
from app.models.wellness_profile import WellnessProfile
from app.schemas.profile import activity_to_response, badge_to_response, profile_to_response
from app.services import ai_service, badges, ledger, profile_store
from app.services.ledger import Series
from app.services.stats import checkin_mood_average, window_start, window_stats

logger = logging.getLogger(__name__)

INTAKE_FIELDS = (
    "name",
    "age",
    "gender",
    "current_mental_health",
    "join_reason",
    "goals",
    "sleep_pattern",
    "stress_level",
    "social_connection",
    "mental_health_concerns",
    "exercise_frequency",
    "diet_quality",
    "substance_use",
    "coping_mechanisms",
)

DASHBOARD_RECOMMENDATIONS = [
    {"title": "Daily Meditation", "description": "Start with 5 minutes of mindful breathing", "type": "mental"},
    {"title": "Physical Activity", "description": "Aim for a 10-minute walk today", "type": "physical"},
    {"title": "Sleep Hygiene", "description": "Set a consistent bedtime routine", "type": "physical"},
    {"title": "Mindful Journaling", "description": "Write down three things you're grateful for", "type": "mental"},
]


def _touch(profile: WellnessProfile) -> None:
    # Forces an UPDATE of the profile row so the version counter is checked and bumped
    profile.updated_at = datetime.now(timezone.utc)


def _window(profile: WellnessProfile, series: Series, now: datetime | None) -> list[dict]:
    return ledger.read_window(profile, series, window_start(now)).to_list()


async def submit_onboarding(session: AsyncSession, user_id: int, intake: dict[str, Any]) -> dict:
    """Create or fully overwrite the intake and mark onboarding completed; then ask for recommendations."""
    fields = {k: intake.get(k) for k in INTAKE_FIELDS}
    async with user_locks.hold(user_id):
        profile = await profile_store.get_profile(session, user_id)
        if profile is None:
            profile = await profile_store.create_profile(session, user_id, onboarding_completed=True, **fields)
            logger.info("Onboarding: created profile for user %s", user_id)
        else:
            for key, value in fields.items():
                setattr(profile, key, value)
            profile.onboarding_completed = True
            _touch(profile)
            logger.info("Onboarding: overwrote intake for user %s", user_id)
        await profile_store.save(session)

    # Profile is committed; a failed recommendation call only changes what we return.
    recommendations = await ai_service.generate_onboarding_recommendations(fields)
    return {
        "profile": profile_to_response(profile),
        "recommendations": [r.model_dump(exclude_none=True) for r in recommendations],
    }


async def onboarding_status(session: AsyncSession, user_id: int) -> dict:
    profile = await profile_store.get_profile(session, user_id)
    return {"onboardingCompleted": bool(profile and profile.onboarding_completed)}


async def dashboard_data(session: AsyncSession, user_id: int, now: datetime | None = None) -> dict:
    async with user_locks.hold(user_id):
        profile = await profile_store.get_or_create_placeholder(session, user_id)

    r = await session.execute(
        select(CheckIn.mood)
        .where(CheckIn.user_id == user_id)
        .order_by(CheckIn.created_at.desc(), CheckIn.id.desc())
        .limit(settings.checkin_average_window)
    )
    recent_moods = list(r.scalars().all())
    total = (await session.execute(select(func.count(CheckIn.id)).where(CheckIn.user_id == user_id))).scalar() or 0

    mood_data = _window(profile, Series.MOOD, now)
    return {
        "profile": profile_to_response(profile),
        "moodData": mood_data,
        "averageMood": window_stats(item["rating"] for item in mood_data).average,
        "averageCheckInMood": checkin_mood_average(recent_moods),
        "totalCheckIns": total,
        "stepData": _window(profile, Series.STEPS, now),
        "sleepData": _window(profile, Series.SLEEP, now),
        "recommendations": DASHBOARD_RECOMMENDATIONS,
    }


async def update_health_data(
    session: AsyncSession,
    user_id: int,
    step_count: Any = None,
    sleep_duration: Any = None,
    today: date | None = None,
    now: datetime | None = None,
) -> dict:
    updates: list[tuple[Series, Any]] = []
    if step_count is not None:
        updates.append((Series.STEPS, ledger.validate_value(Series.STEPS, step_count)))
    if sleep_duration is not None:
        updates.append((Series.SLEEP, ledger.validate_value(Series.SLEEP, sleep_duration)))
    if not updates:
        raise ValidationError("At least one of stepCount or sleepDuration must be provided")

    day = today or date.today()
    async with user_locks.hold(user_id):
        profile = await profile_store.require_profile(session, user_id)
        for series, value in updates:
            ledger.upsert_day_entry(profile, series, day, value)
        _touch(profile)
        await profile_store.save(session)

    step_data = _window(profile, Series.STEPS, now)
    sleep_data = _window(profile, Series.SLEEP, now)
    return {
        "message": "Health data updated successfully",
        "profile": profile_to_response(profile, step_history=step_data, sleep_history=sleep_data),
        "stepData": step_data,
        "sleepData": sleep_data,
    }


async def update_mood(
    session: AsyncSession,
    user_id: int,
    rating: Any,
    today: date | None = None,
    now: datetime | None = None,
) -> dict:
    value = ledger.validate_value(Series.MOOD, rating)
    day = today or date.today()
    async with user_locks.hold(user_id):
        profile = await profile_store.require_profile(session, user_id)
        ledger.upsert_day_entry(profile, Series.MOOD, day, value)
        _touch(profile)
        await profile_store.save(session)
    return {"message": "Mood updated successfully", "moodData": _window(profile, Series.MOOD, now)}


async def complete_task(session: AsyncSession, user_id: int, task: str) -> dict:
    async with user_locks.hold(user_id):
        profile = await profile_store.require_profile(session, user_id)
        if task not in (profile.completed_tasks or []):
            # Reassign: in-place mutation of a JSON column is not tracked
            profile.completed_tasks = [*(profile.completed_tasks or []), task]
            _touch(profile)
            await profile_store.save(session)
    return profile_to_response(profile)


async def share_badge(session: AsyncSession, user_id: int, badge_id: int, platform: str) -> dict:
    async with user_locks.hold(user_id):
        profile = await profile_store.require_profile(session, user_id)
        badges.mark_shared(profile, badge_id, platform)
        _touch(profile)
        await profile_store.save(session)
    return profile_to_response(profile)


async def complete_activity(
    session: AsyncSession,
    user_id: int,
    activity: str,
    sentiment: str,
    completed_at: datetime | None = None,
) -> dict:
    async with user_locks.hold(user_id):
        profile = await profile_store.require_profile(session, user_id)
        profile.completed_activities.append(
            CompletedActivity(
                activity=activity,
                sentiment=sentiment,
                completed_at=completed_at or datetime.now(timezone.utc),
            )
        )
        awarded = badges.evaluate(profile)
        _touch(profile)
        await profile_store.save(session)
    return {
        "message": "Activity completed successfully",
        "completedActivities": [activity_to_response(a) for a in profile.completed_activities],
        "newBadges": [badge_to_response(b) for b in awarded],
    }


async def activity_history(session: AsyncSession, user_id: int) -> dict:
    profile = await profile_store.require_profile(session, user_id)
    return {"completedActivities": [activity_to_response(a) for a in profile.completed_activities]}
