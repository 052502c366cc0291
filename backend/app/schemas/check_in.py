"""Pydantic schemas for check-ins, AI analysis and chat."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CheckInBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    mood: int = Field(..., ge=1, le=5, strict=True)
    stress_level: int = Field(..., ge=1, le=10, strict=True)
    journal: str | None = Field(None, max_length=10000)


class AnalyzeBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    text: str = Field(..., min_length=1, max_length=10000)
    mood: str | int | None = None
    stress_level: int | None = Field(None, ge=1, le=10)


class ChatBody(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
    language: str = Field("English", max_length=32)


def check_in_to_response(row) -> dict:
    return {
        "id": row.id,
        "mood": row.mood,
        "stressLevel": row.stress_level,
        "journal": row.journal,
        "createdAt": row.created_at.isoformat() if row.created_at else None,
    }
