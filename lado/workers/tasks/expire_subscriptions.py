"""
Celery periodic task: deactivate every active subscription whose period has ended.
"""
import logging

from lado.core.celery_app import celery_app
from lado.core.config import settings
from lado.db.session import session_scope
from lado.services.subscriptions.service import SubscriptionService

logger = logging.getLogger(__name__)


@celery_app.task(name="lado.workers.tasks.expire_subscriptions.expire_subscriptions")
def expire_subscriptions() -> dict:
    try:
        with session_scope() as db:
            expired = SubscriptionService(db).expire_due(limit=settings.subscription_expiry_batch_size)
    except Exception:
        logger.exception("expire_subscriptions_error")
        return {"expired": 0, "error": "exception"}
    logger.info("expire_subscriptions_done", extra={"expired": expired})
    return {"expired": expired}
