from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from lado.db.base import Base


class AgeVerificationLog(Base):
    """Compliance record. Append-only: rows are never updated or deleted."""

    __tablename__ = "age_verification_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    verified_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    country = Column(String(2), nullable=False)
    age_at_verification = Column(Integer, nullable=False)
    source_ip = Column(String, nullable=True)
