"""Check-in log and AI analysis of journal entries."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.check_in import CheckIn
from app.schemas.check_in import check_in_to_response
from app.services import ai_service, profile_store

logger = logging.getLogger(__name__)


async def create_check_in(
    session: AsyncSession,
    user_id: int,
    mood: int,
    stress_level: int,
    journal: str | None = None,
) -> dict:
    row = CheckIn(user_id=user_id, mood=mood, stress_level=stress_level, journal=(journal or "").strip() or None)
    session.add(row)
    await session.commit()
    logger.debug("Check-in %s stored for user %s", row.id, user_id)
    return {"message": "Check-in submitted successfully", "checkIn": check_in_to_response(row)}


async def list_check_ins(session: AsyncSession, user_id: int, limit: int, offset: int) -> dict:
    base = select(CheckIn).where(CheckIn.user_id == user_id)
    total = (await session.execute(select(func.count()).select_from(base.subquery()))).scalar() or 0
    r = await session.execute(
        base.order_by(CheckIn.created_at.desc(), CheckIn.id.desc()).offset(offset).limit(limit)
    )
    items = [check_in_to_response(row) for row in r.scalars().all()]
    return {
        "items": items,
        "total": total,
        "limit": limit,
        "offset": offset,
        "has_more": (offset + limit) < total,
    }


async def latest_check_in(session: AsyncSession, user_id: int) -> CheckIn | None:
    r = await session.execute(
        select(CheckIn)
        .where(CheckIn.user_id == user_id)
        .order_by(CheckIn.created_at.desc(), CheckIn.id.desc())
        .limit(1)
    )
    return r.scalar_one_or_none()


async def analyze(
    session: AsyncSession,
    user_id: int,
    text: str,
    mood: Any = None,
    stress_level: int | None = None,
) -> dict:
    """Sentiment, suggested activities and an empathetic reply, informed by the profile and last check-in."""
    profile = await profile_store.require_profile(session, user_id)
    previous = await latest_check_in(session, user_id)

    user_context = {
        "name": profile.name or "User",
        "age": profile.age or "unspecified",
        "gender": profile.gender or "unspecified",
        "goal": (profile.goals[0] if profile.goals else None) or "improve mental wellbeing",
    }
    previous_mood = (
        {"mood": previous.mood, "stress_level": previous.stress_level}
        if previous
        else {"mood": "neutral", "stress_level": 5}
    )
    return await ai_service.analyze_entry(
        text,
        str(mood) if mood is not None else None,
        user_context,
        stress_level,
        previous_mood,
    )
