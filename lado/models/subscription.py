from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Numeric, String, text

from lado.db.base import Base
from lado.models.enums import Surface, SubscriptionDuration


class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        # One active subscription per (fan, creator); closes the concurrent subscribe race.
        Index(
            "uq_subscriptions_active_pair",
            "fan_id",
            "creator_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    fan_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    creator_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    surface = Column(String, nullable=False, default=Surface.RESTRICTED.value)
    duration = Column(String, nullable=False, default=SubscriptionDuration.MONTH.value)
    monthly_price = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    price = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))

    started_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    ends_at = Column(DateTime(timezone=True), nullable=True, index=True)
    next_renewal_at = Column(DateTime(timezone=True), nullable=True)
    # is_active == False <=> cancelled_at is set
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    auto_renew = Column(Boolean, nullable=False, default=True)
