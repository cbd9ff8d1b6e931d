"""
ModerationService — bulk censor / uncensor / delete of content with an
append-only audit trail written in the same transaction.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from sqlalchemy.orm import Session

from lado.core.clock import utcnow
from lado.core.errors import NoSelection, SelectionTooLarge
from lado.models.content import Content
from lado.models.enums import ModerationAction
from lado.services.audit.service import ModerationAuditService
from lado.services.moderation.config import get_bulk_max_ids, get_default_censor_reason
from lado.utils.metrics import moderation_items_affected_total, moderation_operations_total

logger = logging.getLogger(__name__)


def normalize_selection(ids: Iterable[str] | None) -> list[str]:
    """
    De-duplicate ids preserving order and enforce the bulk cap.
    Runs before any query so an empty selection can never become an unbounded update.
    """
    if ids is None:
        raise NoSelection()
    selection = list(dict.fromkeys(str(i) for i in ids if i is not None and str(i) != ""))
    if not selection:
        raise NoSelection()
    limit = get_bulk_max_ids()
    if len(selection) > limit:
        raise SelectionTooLarge(limit=limit, size=len(selection))
    return selection


class ModerationService:
    def __init__(self, db: Session):
        self.db = db
        self.audit = ModerationAuditService(db)

    def censor_bulk(
        self,
        ids: Iterable[str] | None,
        reason: str | None = None,
        now: datetime | None = None,
        *,
        actor_id: str | None = None,
    ) -> int:
        """Censor every existing item in ``ids``. Re-censoring counts again."""
        selection = normalize_selection(ids)
        reason = reason or get_default_censor_reason()

        def apply(content: Content) -> None:
            content.is_censored = True
            content.censor_reason = reason

        return self._run(ModerationAction.CENSOR, selection, apply, now, actor_id, reason)

    def uncensor_bulk(
        self,
        ids: Iterable[str] | None,
        now: datetime | None = None,
        *,
        actor_id: str | None = None,
    ) -> int:
        selection = normalize_selection(ids)

        def apply(content: Content) -> None:
            content.is_censored = False
            content.censor_reason = None

        return self._run(ModerationAction.UNCENSOR, selection, apply, now, actor_id, None)

    def delete_bulk(
        self,
        ids: Iterable[str] | None,
        now: datetime | None = None,
        *,
        actor_id: str | None = None,
    ) -> int:
        """Permanently remove items. Irreversible: callers must confirm first."""
        selection = normalize_selection(ids)
        return self._run(ModerationAction.DELETE, selection, self.db.delete, now, actor_id, None)

    def _run(
        self,
        action: ModerationAction,
        selection: list[str],
        apply,
        now: datetime | None,
        actor_id: str | None,
        reason: str | None,
    ) -> int:
        now = now or utcnow()
        try:
            contents = (
                self.db.query(Content)
                .filter(Content.id.in_(selection))
                .with_for_update()
                .all()
            )
            for content in contents:
                apply(content)
            affected_ids = [c.id for c in contents]
            self.audit.log(
                actor_id=actor_id,
                action=action.value,
                content_ids=selection,
                affected_ids=affected_ids,
                created_at=now,
                reason=reason,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(
                "moderation_bulk_failed",
                extra={"action": action.value, "actor_id": actor_id, "requested": len(selection)},
            )
            raise

        affected = len(affected_ids)
        if affected < len(selection):
            found = set(affected_ids)
            logger.warning(
                "moderation_partial_match",
                extra={
                    "action": action.value,
                    "actor_id": actor_id,
                    "requested": len(selection),
                    "affected": affected,
                    "missing_ids": [i for i in selection if i not in found],
                },
            )
        moderation_operations_total.labels(action=action.value).inc()
        moderation_items_affected_total.labels(action=action.value).inc(affected)
        logger.info(
            "moderation_bulk_applied",
            extra={
                "action": action.value,
                "actor_id": actor_id,
                "requested": len(selection),
                "affected": affected,
                "reason": reason,
            },
        )
        return affected
