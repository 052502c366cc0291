"""FastAPI dependencies: the authenticated user, resolved from the bearer token per request."""

from typing import Annotated

from fastapi import Depends, Request
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import decode_token
from app.core.errors import UnauthenticatedError
from app.db.session import get_db
from app.models.user import User


async def get_current_user(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise UnauthenticatedError("Not authenticated")
    token = auth_header[7:].strip()
    if not token:
        raise UnauthenticatedError("Not authenticated")
    try:
        payload = decode_token(token)
    except JWTError:
        raise UnauthenticatedError("Invalid or expired token")
    user_id_str = payload.get("sub")
    if not user_id_str:
        raise UnauthenticatedError("Invalid token")
    try:
        user_id = int(user_id_str)
    except ValueError:
        raise UnauthenticatedError("Invalid token")
    r = await session.execute(select(User).where(User.id == user_id))
    user = r.scalar_one_or_none()
    if not user:
        raise UnauthenticatedError("User not found")
    return user
