"""Chat with the supportive AI assistant; messages are kept per user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.base import utcnow
from app.db.session import get_db
from app.models.chat_message import ChatMessage, MessageRole
from app.models.user import User
from app.schemas.check_in import ChatBody
from app.services.ai_service import chat_reply

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post(
    "",
    summary="Send chat message",
    responses={401: {"description": "Not authenticated"}},
)
async def send_message(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    body: ChatBody,
) -> dict:
    """Get the assistant reply (fallback text if the AI is unavailable), then store both messages.

    Nothing is written before the reply arrives, and the auth lookup's transaction is
    ended first, so no transaction or connection is held during the AI call.
    """
    uid = user.id
    sent_at = utcnow()
    await session.commit()
    reply = await chat_reply(body.message, body.language)
    session.add_all([
        ChatMessage(user_id=uid, role=MessageRole.user.value, content=body.message, language=body.language, timestamp=sent_at),
        ChatMessage(user_id=uid, role=MessageRole.assistant.value, content=reply, language=body.language),
    ])
    await session.commit()
    return {"response": reply}


@router.get(
    "/history",
    summary="Get chat history",
    responses={401: {"description": "Not authenticated"}},
)
async def get_history(
    session: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    limit: int = Query(default=50, ge=1, le=200),
) -> list[dict]:
    """Most recent messages, oldest first."""
    r = await session.execute(
        select(ChatMessage)
        .where(ChatMessage.user_id == user.id)
        .order_by(ChatMessage.timestamp.desc(), ChatMessage.id.desc())
        .limit(limit)
    )
    rows = r.scalars().all()
    return [
        {"role": m.role, "content": m.content, "timestamp": m.timestamp.isoformat() if m.timestamp else None}
        for m in reversed(rows)
    ]
