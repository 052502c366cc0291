"""Auth: register, login, refresh, me."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.config import settings
from app.core.auth import (
    create_access_token,
    create_refresh_token,
    hash_password,
    hash_refresh_token,
    verify_password,
)
from app.core.errors import UnauthenticatedError, ValidationError
from app.db.session import get_db
from app.models.refresh_token import RefreshToken
from app.models.user import User

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])

ACCESS_TOKEN_EXPIRE_SECONDS = settings.access_token_expire_minutes * 60


class CredentialsBody(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=256)


class UserOut(BaseModel):
    id: int
    email: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until the access token expires
    user: UserOut


class RefreshBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    refresh_token: str


def _issue_tokens(session: AsyncSession, user: User) -> TokenResponse:
    """New access token plus a refresh token whose hash is stored for rotation."""
    refresh_plain = create_refresh_token()
    session.add(
        RefreshToken(
            user_id=user.id,
            token_hash=hash_refresh_token(refresh_plain),
            expires_at=datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expire_days),
        )
    )
    return TokenResponse(
        access_token=create_access_token(user.id, user.email),
        refresh_token=refresh_plain,
        expires_in=ACCESS_TOKEN_EXPIRE_SECONDS,
        user=UserOut(id=user.id, email=user.email),
    )


@router.post(
    "/register",
    response_model=TokenResponse,
    summary="Register a new user",
    responses={400: {"description": "Email and password required or email already registered"}},
)
async def register(
    session: Annotated[AsyncSession, Depends(get_db)],
    body: CredentialsBody,
) -> TokenResponse:
    email = body.email.strip().lower()
    if not email or not body.password:
        raise ValidationError("Email and password required")
    r = await session.execute(select(User).where(User.email == email))
    if r.scalar_one_or_none() is not None:
        raise ValidationError("Email already registered")
    user = User(email=email, password_hash=hash_password(body.password))
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as e:
        logger.warning("Register IntegrityError: %s", e)
        raise ValidationError("Email already registered") from e
    tokens = _issue_tokens(session, user)
    await session.commit()
    logger.info("Registered user %s", user.id)
    return tokens


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    responses={401: {"description": "Invalid email or password"}},
)
async def login(
    session: Annotated[AsyncSession, Depends(get_db)],
    body: CredentialsBody,
) -> TokenResponse:
    email = body.email.strip().lower()
    r = await session.execute(select(User).where(User.email == email))
    user = r.scalar_one_or_none()
    if not user or not user.password_hash or not verify_password(body.password, user.password_hash):
        raise UnauthenticatedError("Invalid email or password")
    tokens = _issue_tokens(session, user)
    await session.commit()
    return tokens


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Exchange refresh token for new access and refresh tokens",
    responses={401: {"description": "Refresh token invalid or expired"}},
)
async def refresh_tokens(
    session: Annotated[AsyncSession, Depends(get_db)],
    body: RefreshBody,
) -> TokenResponse:
    """Rotate: the presented refresh token is deleted and a new pair issued."""
    token = body.refresh_token.strip()
    if not token:
        raise UnauthenticatedError("Refresh token required")
    r = await session.execute(select(RefreshToken).where(RefreshToken.token_hash == hash_refresh_token(token)))
    row = r.scalar_one_or_none()
    if not row or _as_utc(row.expires_at) <= datetime.now(timezone.utc):
        raise UnauthenticatedError("Invalid or expired refresh token")
    user_id = row.user_id
    await session.delete(row)
    r_user = await session.execute(select(User).where(User.id == user_id))
    user = r_user.scalar_one_or_none()
    if not user:
        raise UnauthenticatedError("User not found")
    tokens = _issue_tokens(session, user)
    await session.commit()
    return tokens


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@router.get(
    "/me",
    response_model=UserOut,
    summary="Get current authenticated user",
    responses={401: {"description": "Not authenticated or invalid token"}},
)
async def me(user: Annotated[User, Depends(get_current_user)]) -> UserOut:
    return UserOut(id=user.id, email=user.email)
