from datetime import datetime
from typing import Sequence

from sqlalchemy.orm import Session

from lado.models.moderation_log import ModerationLog


class ModerationAuditService:
    """Appends to the moderation trail inside the caller's transaction (no commit)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def log(
        self,
        actor_id: str | None,
        action: str,
        content_ids: Sequence[str],
        affected_ids: Sequence[str],
        created_at: datetime,
        reason: str | None = None,
    ) -> ModerationLog:
        entry = ModerationLog(
            actor_id=actor_id,
            action=action,
            content_ids=list(content_ids),
            affected_ids=list(affected_ids),
            affected_count=len(affected_ids),
            reason=reason,
            created_at=created_at,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def list_for_content(self, content_id: str, limit: int = 50) -> list[ModerationLog]:
        return (
            self.db.query(ModerationLog)
            .filter(ModerationLog.affected_ids.contains([content_id]))
            .order_by(ModerationLog.created_at.desc())
            .limit(limit)
            .all()
        )
