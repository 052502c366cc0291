"""Request bodies and response projections for profile, dashboard and activity endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.models.wellness_profile import (
    DietQuality,
    ExerciseFrequency,
    Gender,
    SocialConnection,
    WellbeingLevel,
    WellnessProfile,
)


class CamelModel(BaseModel):
    """Accepts camelCase (wire) or snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OnboardingBody(CamelModel):
    """Full intake form. Every submission overwrites all intake fields."""

    name: str = Field(..., min_length=1, max_length=128)
    age: int = Field(..., ge=13, le=120)
    gender: Gender = Gender.UNSPECIFIED
    current_mental_health: WellbeingLevel
    join_reason: str | None = ""
    goals: list[str]
    sleep_pattern: WellbeingLevel
    stress_level: int = Field(..., ge=1, le=10)
    social_connection: SocialConnection
    mental_health_concerns: list[str]
    exercise_frequency: ExerciseFrequency
    diet_quality: DietQuality
    substance_use: str
    coping_mechanisms: str


class HealthDataBody(CamelModel):
    step_count: int | None = Field(None, ge=0, strict=True)
    sleep_duration: float | None = Field(None, ge=0, le=24, strict=True)

    @model_validator(mode="after")
    def _require_one(self):
        if self.step_count is None and self.sleep_duration is None:
            raise ValueError("At least one of stepCount or sleepDuration must be provided")
        return self


class MoodBody(CamelModel):
    rating: int = Field(..., ge=1, le=5, strict=True)


class TaskBody(CamelModel):
    task: str = Field(..., min_length=1, max_length=256)


class ShareBadgeBody(CamelModel):
    badge_id: int
    platform: str = Field(..., min_length=1)


class ActivityBody(CamelModel):
    activity: str = Field(..., min_length=1, max_length=512)
    sentiment: str = Field(..., min_length=1, max_length=64)
    completed_at: datetime | None = None


def badge_to_response(badge) -> dict:
    return {
        "id": badge.id,
        "key": badge.key,
        "name": badge.name,
        "description": badge.description,
        "imageUrl": badge.image_url,
        "earnedAt": badge.earned_at.isoformat() if badge.earned_at else None,
        "shared": {"twitter": badge.shared_twitter, "linkedin": badge.shared_linkedin},
    }


def activity_to_response(item) -> dict:
    return {
        "id": item.id,
        "activity": item.activity,
        "sentiment": item.sentiment,
        "completedAt": item.completed_at.isoformat() if item.completed_at else None,
    }


def _history(entries, key: str) -> list[dict]:
    return [{"date": e.date.isoformat(), key: e.value} for e in entries]


def profile_to_response(profile: WellnessProfile, *, step_history=None, sleep_history=None) -> dict:
    """Profile as returned by the API. History lists can be replaced with a windowed view."""
    return {
        "id": profile.id,
        "user": profile.user_id,
        "name": profile.name,
        "age": profile.age,
        "gender": profile.gender,
        "currentMentalHealth": profile.current_mental_health,
        "joinReason": profile.join_reason,
        "goals": list(profile.goals or []),
        "mentalHealthConcerns": list(profile.mental_health_concerns or []),
        "sleepPattern": profile.sleep_pattern,
        "stressLevel": profile.stress_level,
        "socialConnection": profile.social_connection,
        "exerciseFrequency": profile.exercise_frequency,
        "dietQuality": profile.diet_quality,
        "substanceUse": profile.substance_use,
        "copingMechanisms": profile.coping_mechanisms,
        "onboardingCompleted": profile.onboarding_completed,
        "stepHistory": step_history if step_history is not None else _history(profile.step_history, "steps"),
        "sleepHistory": sleep_history if sleep_history is not None else _history(profile.sleep_history, "hours"),
        "moodHistory": _history(profile.mood_history, "rating"),
        "completedTasks": list(profile.completed_tasks or []),
        "badges": [badge_to_response(b) for b in profile.badges],
        "completedActivities": [activity_to_response(a) for a in profile.completed_activities],
        "createdAt": profile.created_at.isoformat() if profile.created_at else None,
        "updatedAt": profile.updated_at.isoformat() if profile.updated_at else None,
    }
