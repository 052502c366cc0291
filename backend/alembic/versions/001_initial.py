"""Initial schema: users, refresh tokens, wellness profiles, ledgers, badges, activities, check-ins, chat

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _ledger_table(name: str, value_type) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("value", value_type, nullable=False),
        sa.ForeignKeyConstraint(["profile_id"], ["wellness_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "date", name=f"uq_{name}_profile_date"),
    )
    op.create_index(f"ix_{name}_profile_id", name, ["profile_id"], unique=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_refresh_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token_hash"),
    )
    op.create_index("ix_user_refresh_tokens_user_id", "user_refresh_tokens", ["user_id"], unique=False)

    op.create_table(
        "wellness_profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("gender", sa.String(16), nullable=False),
        sa.Column("current_mental_health", sa.String(16), nullable=False),
        sa.Column("goals", sa.JSON(), nullable=False),
        sa.Column("mental_health_concerns", sa.JSON(), nullable=False),
        sa.Column("join_reason", sa.Text(), nullable=True),
        sa.Column("sleep_pattern", sa.String(16), nullable=True),
        sa.Column("stress_level", sa.Integer(), nullable=True),
        sa.Column("social_connection", sa.String(16), nullable=True),
        sa.Column("exercise_frequency", sa.String(32), nullable=True),
        sa.Column("diet_quality", sa.String(16), nullable=True),
        sa.Column("substance_use", sa.Text(), nullable=True),
        sa.Column("coping_mechanisms", sa.Text(), nullable=True),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_tasks", sa.JSON(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_wellness_profiles_user_id", "wellness_profiles", ["user_id"], unique=True)

    _ledger_table("step_entries", sa.Integer())
    _ledger_table("sleep_entries", sa.Float())
    _ledger_table("mood_entries", sa.Integer())

    op.create_table(
        "badges",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(32), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.String(512), nullable=False),
        sa.Column("image_url", sa.String(512), nullable=False),
        sa.Column("earned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("shared_twitter", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("shared_linkedin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(["profile_id"], ["wellness_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "key", name="uq_badges_profile_key"),
    )
    op.create_index("ix_badges_profile_id", "badges", ["profile_id"], unique=False)

    op.create_table(
        "completed_activities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("profile_id", sa.Integer(), nullable=False),
        sa.Column("activity", sa.String(512), nullable=False),
        sa.Column("sentiment", sa.String(64), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["profile_id"], ["wellness_profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_completed_activities_profile_id", "completed_activities", ["profile_id"], unique=False)

    op.create_table(
        "check_ins",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("mood", sa.Integer(), nullable=False),
        sa.Column("stress_level", sa.Integer(), nullable=False),
        sa.Column("journal", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_check_ins_user_id", "check_ins", ["user_id"], unique=False)
    op.create_index("ix_check_ins_created_at", "check_ins", ["created_at"], unique=False)

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("language", sa.String(32), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_chat_messages_user_id", "chat_messages", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_table("chat_messages")
    op.drop_table("check_ins")
    op.drop_table("completed_activities")
    op.drop_table("badges")
    op.drop_table("mood_entries")
    op.drop_table("sleep_entries")
    op.drop_table("step_entries")
    op.drop_table("wellness_profiles")
    op.drop_table("user_refresh_tokens")
    op.drop_table("users")
