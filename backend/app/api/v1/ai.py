"""AI analysis of a journal entry: sentiment, activity suggestions, personalized reply."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.check_in import AnalyzeBody
from app.services import check_ins

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post(
    "/analyze",
    summary="Analyze a journal entry",
    responses={400: {"description": "Missing text"}, 404: {"description": "User profile not found"}},
)
async def analyze_entry(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: AnalyzeBody,
) -> dict:
    """AI failures never fail the request; neutral sentiment and default suggestions are used instead."""
    return await check_ins.analyze(session, user.id, body.text, body.mood, body.stress_level)
