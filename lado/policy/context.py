"""
Glue between the store and the pure resolver: builds ViewerContext and
ContentSnapshot fresh for every evaluation (subscription state is never cached).
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from lado.models.content import Content
from lado.models.enums import Surface
from lado.models.user import User
from lado.policy.models import ContentSnapshot, Decision, ViewerContext
from lado.policy.visibility import filter_visible, resolve_visibility
from lado.services.subscriptions.service import SubscriptionService
from lado.services.users.service import UserService
from lado.utils.metrics import visibility_decisions_total

logger = logging.getLogger(__name__)

PROFILE_CONTENT_LIMIT = 50


def build_viewer_context(db: Session, viewer: User | None, now: datetime | None = None) -> ViewerContext:
    """None or an inactive user is an anonymous viewer."""
    if viewer is None or not viewer.is_active:
        return ViewerContext.anonymous()
    return ViewerContext(
        authenticated=True,
        user_id=viewer.id,
        age_verified=bool(viewer.age_verified),
        active_subscriptions=SubscriptionService(db).active_creator_ids(viewer.id, now),
    )


def snapshot_content(content: Content, owner: User) -> ContentSnapshot:
    return ContentSnapshot(
        id=content.id,
        owner_id=content.owner_id,
        owner_creator_verified=bool(owner.creator_verified),
        surface=Surface(content.surface),
        is_active=bool(content.is_active),
        is_draft=bool(content.is_draft),
        is_censored=bool(content.is_censored),
        is_private=bool(content.is_private),
        is_sensitive=bool(content.is_sensitive),
    )


def decide_content_access(db: Session, viewer: User | None, content_id: str) -> Decision:
    """Load, snapshot and resolve in one go; a missing item or owner is not_found."""
    content = db.query(Content).filter(Content.id == content_id).one_or_none()
    owner = None
    if content is not None:
        owner = UserService(db).get_active(content.owner_id)
    if content is None or owner is None:
        decision = Decision.not_found()
    else:
        ctx = build_viewer_context(db, viewer)
        decision = resolve_visibility(ctx, snapshot_content(content, owner))

    label = "visible" if decision.visible else decision.reason.value
    visibility_decisions_total.labels(reason=label).inc()
    if not decision.visible:
        logger.debug(
            "content_hidden",
            extra={
                "content_id": content_id,
                "user_id": viewer.id if viewer is not None else None,
                "reason": label,
            },
        )
    return decision


def visible_contents_of(
    db: Session,
    viewer: User | None,
    owner_id: str,
    limit: int = PROFILE_CONTENT_LIMIT,
    now: datetime | None = None,
) -> list[Content]:
    """
    Profile grid: the owner's published items the viewer may see, newest first.
    Drafts are never listed here, not even for the owner.
    """
    owner = UserService(db).get_active(owner_id)
    if owner is None:
        return []
    rows = (
        db.query(Content)
        .filter(
            Content.owner_id == owner_id,
            Content.is_active.is_(True),
            Content.is_draft.is_(False),
        )
        .order_by(Content.published_at.desc())
        .limit(limit)
        .all()
    )
    ctx = build_viewer_context(db, viewer, now)
    by_id = {row.id: row for row in rows}
    visible = filter_visible(ctx, [snapshot_content(row, owner) for row in rows])
    return [by_id[snap.id] for snap in visible]
