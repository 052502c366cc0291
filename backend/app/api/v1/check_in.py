"""Daily check-ins (mood, stress, journal)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.check_in import CheckInBody
from app.schemas.pagination import PaginatedResponse
from app.services import check_ins

router = APIRouter(prefix="/check-in", tags=["check-in"])


@router.post(
    "",
    status_code=201,
    summary="Submit a check-in",
    responses={400: {"description": "Validation error"}, 401: {"description": "Not authenticated"}},
)
async def create_check_in(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: CheckInBody,
) -> dict:
    return await check_ins.create_check_in(session, user.id, body.mood, body.stress_level, body.journal)


@router.get(
    "",
    response_model=PaginatedResponse,
    summary="Check-in history, newest first",
    responses={401: {"description": "Not authenticated"}},
)
async def list_check_ins(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    limit: int = Query(default=30, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> PaginatedResponse:
    return PaginatedResponse(**await check_ins.list_check_ins(session, user.id, limit, offset))
