"""Dashboard: aggregated view plus daily health, mood, task and badge updates."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.profile import HealthDataBody, MoodBody, ShareBadgeBody, TaskBody
from app.services import wellness_profile

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

NOT_FOUND = {404: {"description": "User profile not found"}}


@router.get(
    "/data",
    summary="Dashboard data",
    responses={401: {"description": "Not authenticated"}},
)
async def get_dashboard_data(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """Profile, 7-day step/sleep/mood windows with averages, check-in stats and suggestions.

    Creates a placeholder profile when the user has none yet.
    """
    return await wellness_profile.dashboard_data(session, user.id)


@router.post(
    "/update-health-data",
    summary="Record today's steps and/or sleep",
    responses={400: {"description": "Invalid values"}, **NOT_FOUND},
)
async def update_health_data(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: HealthDataBody,
) -> dict:
    return await wellness_profile.update_health_data(
        session, user.id, step_count=body.step_count, sleep_duration=body.sleep_duration
    )


@router.post(
    "/update-mood",
    summary="Record today's mood rating",
    responses={400: {"description": "Rating must be 1-5"}, **NOT_FOUND},
)
async def update_mood(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: MoodBody,
) -> dict:
    return await wellness_profile.update_mood(session, user.id, body.rating)


@router.post(
    "/complete-task",
    summary="Mark a task completed",
    responses={400: {"description": "Task is required"}, **NOT_FOUND},
)
async def complete_task(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: TaskBody,
) -> dict:
    return await wellness_profile.complete_task(session, user.id, body.task.strip())


@router.post(
    "/share-badge",
    summary="Mark a badge as shared on a platform",
    responses={400: {"description": "Unknown platform"}, 404: {"description": "Profile or badge not found"}},
)
async def share_badge(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: ShareBadgeBody,
) -> dict:
    return await wellness_profile.share_badge(session, user.id, body.badge_id, body.platform)
