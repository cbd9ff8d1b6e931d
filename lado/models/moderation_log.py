from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from lado.db.base import Base


class ModerationLog(Base):
    """Append-only moderation audit trail."""

    __tablename__ = "moderation_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    actor_id = Column(String, nullable=True, index=True)
    action = Column(String, nullable=False)
    content_ids = Column(JSONB, nullable=False, default=list)  # requested
    affected_ids = Column(JSONB, nullable=False, default=list)  # actually mutated
    affected_count = Column(Integer, nullable=False, default=0)
    reason = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
