from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

BaseEntity = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
