from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from lado.db.base import Base
from lado.models.enums import Surface


class Content(Base):
    __tablename__ = "contents"
    __table_args__ = (
        Index("ix_contents_owner_surface", "owner_id", "surface"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    owner_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    file_path = Column(String, nullable=False)
    thumbnail = Column(String, nullable=True)  # preferred for mosaic rendering
    surface = Column(String, nullable=False, default=Surface.PUBLIC.value)

    is_active = Column(Boolean, nullable=False, default=True)
    is_draft = Column(Boolean, nullable=False, default=False)
    is_censored = Column(Boolean, nullable=False, default=False)
    censor_reason = Column(Text, nullable=True)  # only while is_censored
    is_private = Column(Boolean, nullable=False, default=False)
    is_sensitive = Column(Boolean, nullable=False, default=False)

    # Ordering signals only, never consulted for access
    like_count = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)

    published_at = Column(
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
