from __future__ import annotations

import enum
from datetime import datetime
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base, utcnow


class WellbeingLevel(str, enum.Enum):
    """Five-level scale shared by current mental health and sleep pattern."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    STRUGGLING = "Struggling"


class SocialConnection(str, enum.Enum):
    STRONG = "Strong"
    MODERATE = "Moderate"
    WEAK = "Weak"
    ISOLATED = "Isolated"


class ExerciseFrequency(str, enum.Enum):
    DAILY = "daily"
    THREE_FOUR_TIMES_WEEK = "3-4-times-week"
    ONE_TWO_TIMES_WEEK = "1-2-times-week"
    RARELY = "rarely"
    NEVER = "never"


class DietQuality(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    UNSPECIFIED = "unspecified"


class WellnessProfile(Base):
    __tablename__ = "wellness_profiles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    # Demographics
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    gender: Mapped[str] = mapped_column(String(16), nullable=False, default=Gender.UNSPECIFIED.value)
    # Mental-health intake
    current_mental_health: Mapped[str] = mapped_column(String(16), nullable=False)
    goals: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    mental_health_concerns: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    join_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Lifestyle intake
    sleep_pattern: Mapped[str | None] = mapped_column(String(16), nullable=True)
    stress_level: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1-10
    social_connection: Mapped[str | None] = mapped_column(String(16), nullable=True)
    exercise_frequency: Mapped[str | None] = mapped_column(String(32), nullable=True)
    diet_quality: Mapped[str | None] = mapped_column(String(16), nullable=True)
    substance_use: Mapped[str | None] = mapped_column(Text, nullable=True)
    coping_mechanisms: Mapped[str | None] = mapped_column(Text, nullable=True)

    onboarding_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_tasks: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

    user: Mapped["User"] = relationship("User", back_populates="wellness_profile")
    step_history: Mapped[list["StepEntry"]] = relationship(
        "StepEntry", cascade="all, delete-orphan", lazy="selectin", order_by="StepEntry.id"
    )
    sleep_history: Mapped[list["SleepEntry"]] = relationship(
        "SleepEntry", cascade="all, delete-orphan", lazy="selectin", order_by="SleepEntry.id"
    )
    mood_history: Mapped[list["MoodEntry"]] = relationship(
        "MoodEntry", cascade="all, delete-orphan", lazy="selectin", order_by="MoodEntry.id"
    )
    badges: Mapped[list["Badge"]] = relationship(
        "Badge", cascade="all, delete-orphan", lazy="selectin", order_by="Badge.id"
    )
    completed_activities: Mapped[list["CompletedActivity"]] = relationship(
        "CompletedActivity", cascade="all, delete-orphan", lazy="selectin", order_by="CompletedActivity.id"
    )
