"""Onboarding intake and status."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.profile import OnboardingBody
from app.services import wellness_profile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.post(
    "/onboarding",
    status_code=201,
    summary="Submit onboarding intake",
    responses={400: {"description": "Validation error"}, 401: {"description": "Not authenticated"}},
)
async def submit_onboarding(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: OnboardingBody,
) -> dict:
    """Create or overwrite the profile intake; returns the profile and personalized recommendations."""
    return await wellness_profile.submit_onboarding(session, user.id, body.model_dump(mode="json"))


@router.get(
    "/onboarding-status",
    summary="Whether onboarding was completed",
    responses={401: {"description": "Not authenticated"}},
)
async def get_onboarding_status(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
) -> dict:
    return await wellness_profile.onboarding_status(session, user.id)
