from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Aware UTC timestamp used for every column default."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass
