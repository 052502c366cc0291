"""Wellness profile persistence: one profile per user, loaded with all of its collections."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConflictError, NotFoundError, PersistenceError
from app.models.wellness_profile import Gender, WellbeingLevel, WellnessProfile

logger = logging.getLogger(__name__)

PLACEHOLDER_FIELDS = {
    "name": "User",
    "age": 25,
    "current_mental_health": WellbeingLevel.GOOD.value,
}


async def get_profile(session: AsyncSession, user_id: int) -> WellnessProfile | None:
    r = await session.execute(
        select(WellnessProfile)
        .where(WellnessProfile.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return r.scalar_one_or_none()


async def require_profile(session: AsyncSession, user_id: int) -> WellnessProfile:
    profile = await get_profile(session, user_id)
    if profile is None:
        raise NotFoundError("User profile not found")
    return profile


def new_profile(user_id: int, **fields) -> WellnessProfile:
    """Transient profile with every collection initialised, so no lazy load is needed before the first flush."""
    fields.setdefault("gender", Gender.UNSPECIFIED.value)
    fields.setdefault("goals", [])
    fields.setdefault("mental_health_concerns", [])
    return WellnessProfile(
        user_id=user_id,
        onboarding_completed=fields.pop("onboarding_completed", False),
        completed_tasks=[],
        step_history=[],
        sleep_history=[],
        mood_history=[],
        badges=[],
        completed_activities=[],
        **fields,
    )


async def create_profile(session: AsyncSession, user_id: int, **fields) -> WellnessProfile:
    profile = new_profile(user_id, **fields)
    session.add(profile)
    return profile


async def get_or_create_placeholder(session: AsyncSession, user_id: int) -> WellnessProfile:
    """Profile for a dashboard read; a user who never onboarded gets placeholder values."""
    profile = await get_profile(session, user_id)
    if profile is not None:
        return profile
    profile = await create_profile(session, user_id, **PLACEHOLDER_FIELDS)
    await save(session)
    logger.info("Created placeholder profile for user %s", user_id)
    return profile


async def save(session: AsyncSession) -> None:
    """Flush and commit pending changes once; storage failures become domain errors."""
    try:
        await session.commit()
    except StaleDataError as e:
        await session.rollback()
        logger.warning("Stale profile version: %s", e)
        raise ConflictError() from e
    except IntegrityError as e:
        await session.rollback()
        logger.warning("Profile write violated a constraint: %s", e)
        raise ConflictError() from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("Profile write failed")
        raise PersistenceError() from e
