"""
SubscriptionService — subscribe, cancel, renew, expire; the source of truth for
the viewer's active subscriptions.
"""
from __future__ import annotations

import calendar
import logging
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from uuid import uuid4

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lado.core.clock import utcnow
from lado.core.errors import (
    DuplicateActiveSubscription,
    SelfSubscription,
    SubscriptionNotFound,
    SubscriptionNotRenewable,
)
from lado.models.enums import Surface, SubscriptionDuration
from lado.models.subscription import Subscription
from lado.utils.metrics import subscription_transitions_total

logger = logging.getLogger(__name__)

# Share of the monthly price charged per duration
PRICE_FACTORS = {
    SubscriptionDuration.DAY: Decimal("0.15"),
    SubscriptionDuration.WEEK: Decimal("0.40"),
    SubscriptionDuration.MONTH: Decimal("1"),
}


def calc_price(monthly_price: Decimal | int | str, duration: SubscriptionDuration | str) -> Decimal:
    factor = PRICE_FACTORS[SubscriptionDuration(duration)]
    return (Decimal(monthly_price) * factor).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def calc_ends_at(start: datetime, duration: SubscriptionDuration | str) -> datetime:
    duration = SubscriptionDuration(duration)
    if duration == SubscriptionDuration.DAY:
        return start + timedelta(hours=24)
    if duration == SubscriptionDuration.WEEK:
        return start + timedelta(days=7)
    return _add_month(start)


def _add_month(value: datetime) -> datetime:
    year = value.year + value.month // 12
    month = value.month % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


class SubscriptionService:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_active(self, fan_id: str, creator_id: str) -> Subscription | None:
        return (
            self.db.query(Subscription)
            .filter(
                Subscription.fan_id == fan_id,
                Subscription.creator_id == creator_id,
                Subscription.is_active.is_(True),
            )
            .first()
        )

    def active_subscriptions_of(self, fan_id: str, now: datetime | None = None) -> list[Subscription]:
        """
        Active subscriptions of a fan, most recently started first. Rows whose
        period ended but were not yet swept by expire_due are left out.
        """
        now = now or utcnow()
        return (
            self.db.query(Subscription)
            .filter(
                Subscription.fan_id == fan_id,
                Subscription.is_active.is_(True),
                or_(Subscription.ends_at.is_(None), Subscription.ends_at > now),
            )
            .order_by(Subscription.started_at.desc())
            .all()
        )

    def active_creator_ids(self, fan_id: str, now: datetime | None = None) -> frozenset[str]:
        return frozenset(s.creator_id for s in self.active_subscriptions_of(fan_id, now))

    def is_subscribed(self, fan_id: str, creator_id: str) -> bool:
        return self.get_active(fan_id, creator_id) is not None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def subscribe(
        self,
        fan_id: str,
        creator_id: str,
        now: datetime | None = None,
        *,
        duration: SubscriptionDuration | str = SubscriptionDuration.MONTH,
        monthly_price: Decimal | int | str = 0,
        auto_renew: bool | None = None,
        surface: Surface | str = Surface.RESTRICTED,
    ) -> Subscription:
        """
        Open an active subscription. Payment is settled by the caller beforehand.
        Auto-renew defaults to on for monthly subscriptions only.
        Raises DuplicateActiveSubscription when the pair already has an active row,
        including when a concurrent insert wins the unique index.
        """
        if fan_id == creator_id:
            raise SelfSubscription("Creators cannot subscribe to themselves")

        if self.get_active(fan_id, creator_id) is not None:
            logger.warning(
                "subscription_duplicate_active",
                extra={"fan_id": fan_id, "creator_id": creator_id},
            )
            raise DuplicateActiveSubscription(fan_id, creator_id)

        now = now or utcnow()
        duration = SubscriptionDuration(duration)
        if auto_renew is None:
            auto_renew = duration == SubscriptionDuration.MONTH
        ends_at = calc_ends_at(now, duration)
        subscription = Subscription(
            id=str(uuid4()),
            fan_id=fan_id,
            creator_id=creator_id,
            surface=Surface(surface).value,
            duration=duration.value,
            monthly_price=Decimal(monthly_price),
            price=calc_price(monthly_price, duration),
            started_at=now,
            ends_at=ends_at,
            next_renewal_at=ends_at,
            cancelled_at=None,
            is_active=True,
            auto_renew=auto_renew,
        )
        try:
            self.db.add(subscription)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                "subscription_duplicate_active_race",
                extra={"fan_id": fan_id, "creator_id": creator_id},
            )
            raise DuplicateActiveSubscription(fan_id, creator_id)

        subscription_transitions_total.labels(transition="subscribe").inc()
        logger.info(
            "subscription_started",
            extra={
                "subscription_id": subscription.id,
                "fan_id": fan_id,
                "creator_id": creator_id,
            },
        )
        return subscription

    def cancel(
        self,
        subscription_id: str,
        requesting_user_id: str,
        now: datetime | None = None,
    ) -> Subscription:
        """
        Cancel immediately; access is revoked at once. Only the fan who holds the
        subscription may cancel it, anything else is reported as not found.
        """
        subscription = (
            self.db.query(Subscription)
            .filter(
                Subscription.id == subscription_id,
                Subscription.fan_id == requesting_user_id,
                Subscription.is_active.is_(True),
            )
            .with_for_update()
            .one_or_none()
        )
        if subscription is None:
            logger.warning(
                "subscription_cancel_not_found",
                extra={"subscription_id": subscription_id, "user_id": requesting_user_id},
            )
            raise SubscriptionNotFound(subscription_id)

        self._deactivate(subscription, now or utcnow())
        self.db.commit()

        subscription_transitions_total.labels(transition="cancel").inc()
        logger.info(
            "subscription_cancelled",
            extra={
                "subscription_id": subscription.id,
                "fan_id": subscription.fan_id,
                "creator_id": subscription.creator_id,
            },
        )
        return subscription

    def renew(self, subscription_id: str, now: datetime | None = None) -> Subscription:
        """
        Extend an auto-renewing subscription by one period. Called after the
        payment collaborator confirms the charge, before ends_at; once expire_due
        has swept the row it can no longer be renewed.
        """
        now = now or utcnow()
        subscription = (
            self.db.query(Subscription)
            .filter(Subscription.id == subscription_id, Subscription.is_active.is_(True))
            .with_for_update()
            .one_or_none()
        )
        if subscription is None:
            raise SubscriptionNotFound(subscription_id)
        if not subscription.auto_renew:
            raise SubscriptionNotRenewable(subscription_id)

        period_start = subscription.ends_at
        if period_start is None or period_start <= now:
            # Lapsed but not swept yet: the new period starts now.
            period_start = now
        ends_at = calc_ends_at(period_start, subscription.duration)
        subscription.ends_at = ends_at
        subscription.next_renewal_at = ends_at
        self.db.add(subscription)
        self.db.commit()

        subscription_transitions_total.labels(transition="renew").inc()
        logger.info(
            "subscription_renewed",
            extra={"subscription_id": subscription.id, "fan_id": subscription.fan_id},
        )
        return subscription

    def expire_due(self, now: datetime | None = None, limit: int | None = None) -> int:
        """
        Deactivate every active subscription whose period has ended, whether or
        not it auto-renews.
        """
        now = now or utcnow()
        query = (
            self.db.query(Subscription)
            .filter(
                Subscription.is_active.is_(True),
                Subscription.ends_at.is_not(None),
                Subscription.ends_at <= now,
            )
            .order_by(Subscription.ends_at)
            .with_for_update(skip_locked=True)
        )
        if limit:
            query = query.limit(limit)
        due = query.all()
        for subscription in due:
            self._deactivate(subscription, now)
        self.db.flush()

        if due:
            subscription_transitions_total.labels(transition="expire").inc(len(due))
            logger.info("subscriptions_expired", extra={"expired": len(due)})
        return len(due)

    def _deactivate(self, subscription: Subscription, now: datetime) -> None:
        subscription.is_active = False
        subscription.cancelled_at = now
        subscription.auto_renew = False
        self.db.add(subscription)
