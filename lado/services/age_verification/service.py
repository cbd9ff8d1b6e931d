import logging
from datetime import date, datetime

from sqlalchemy.orm import Session

from lado.compliance.age import verify
from lado.core.clock import utcnow
from lado.core.errors import UnderMinimumAge
from lado.models.age_verification_log import AgeVerificationLog
from lado.models.user import User
from lado.utils.metrics import age_verifications_total

logger = logging.getLogger(__name__)


class AgeVerificationService:
    def __init__(self, db: Session):
        self.db = db

    def verify_user(
        self,
        user: User,
        birth_date: date,
        country: str,
        now: datetime | None = None,
        source_ip: str | None = None,
    ) -> AgeVerificationLog:
        """
        Verify and persist. The user update and the log append are committed
        together; on any failure both are rolled back.
        """
        now = now or utcnow()
        try:
            record = verify(user, birth_date, country, now)
        except UnderMinimumAge as exc:
            age_verifications_total.labels(result="under_age").inc()
            logger.warning(
                "age_verification_rejected",
                extra={
                    "user_id": user.id,
                    "country": country,
                    "required": exc.required,
                    "age": exc.age,
                },
            )
            raise

        user.birth_date = record.birth_date
        user.country = record.country
        user.age_verified = True
        user.age_verified_at = record.verified_at
        entry = AgeVerificationLog(
            user_id=user.id,
            verified_at=record.verified_at,
            country=record.country,
            age_at_verification=record.age,
            source_ip=source_ip,
        )
        try:
            self.db.add(user)
            self.db.add(entry)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("age_verification_persist_failed", extra={"user_id": user.id})
            raise

        age_verifications_total.labels(result="verified").inc()
        logger.info(
            "age_verified",
            extra={"user_id": user.id, "country": record.country, "age": record.age},
        )
        return entry

    def history(self, user_id: str) -> list[AgeVerificationLog]:
        return (
            self.db.query(AgeVerificationLog)
            .filter(AgeVerificationLog.user_id == user_id)
            .order_by(AgeVerificationLog.verified_at.desc())
            .all()
        )
