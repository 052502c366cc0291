from datetime import datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base, utcnow


class Badge(Base):
    __tablename__ = "badges"
    __table_args__ = (UniqueConstraint("profile_id", "key", name="uq_badges_profile_key"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("wellness_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    key: Mapped[str] = mapped_column(String(32), nullable=False)  # BadgeKey value
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(String(512), nullable=False)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False)
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    shared_twitter: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    shared_linkedin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
