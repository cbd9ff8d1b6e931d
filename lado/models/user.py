from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, Date, DateTime, String

from lado.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_name = Column(String, unique=True, nullable=False, index=True)
    pseudonym = Column(String, unique=True, nullable=True, index=True)  # alternate handle
    # Soft delete: inactive users are invisible to every lookup.
    is_active = Column(Boolean, nullable=False, default=True)

    is_creator = Column(Boolean, nullable=False, default=False)
    creator_verified = Column(Boolean, nullable=False, default=False)

    # Age compliance (set together by AgeVerificationService)
    birth_date = Column(Date, nullable=True)
    country = Column(String(2), nullable=True)
    age_verified = Column(Boolean, nullable=False, default=False)
    age_verified_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
