from app.models.user import User
from app.models.refresh_token import RefreshToken
from app.models.wellness_profile import WellnessProfile
from app.models.history import MoodEntry, SleepEntry, StepEntry
from app.models.badge import Badge
from app.models.completed_activity import CompletedActivity
from app.models.check_in import CheckIn
from app.models.chat_message import ChatMessage

__all__ = [
    "User",
    "RefreshToken",
    "WellnessProfile",
    "StepEntry",
    "SleepEntry",
    "MoodEntry",
    "Badge",
    "CompletedActivity",
    "CheckIn",
    "ChatMessage",
]
