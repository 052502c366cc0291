"""Completed recommended activities."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.profile import ActivityBody
from app.services import wellness_profile

router = APIRouter(prefix="/activities", tags=["activities"])


@router.post(
    "/complete",
    summary="Complete an activity",
    responses={404: {"description": "User profile not found"}},
)
async def complete_activity(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: ActivityBody,
) -> dict:
    """Append to completed activities and award any badge that became due."""
    return await wellness_profile.complete_activity(
        session, user.id, body.activity, body.sentiment, body.completed_at
    )


@router.get(
    "/history",
    summary="Completed activities",
    responses={404: {"description": "User profile not found"}},
)
async def get_activity_history(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
) -> dict:
    return await wellness_profile.activity_history(session, user.id)
