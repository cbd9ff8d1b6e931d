"""
Celery application: broker and result backend from settings.
Tasks are in lado.workers.tasks.
"""
from celery import Celery, signals
from celery.schedules import crontab

from lado.core.config import settings
from lado.core.logging import configure_logging

celery_app = Celery(
    "lado",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "lado.workers.tasks.expire_subscriptions",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_track_started=True,
    task_time_limit=600,
    result_expires=86400,
    beat_schedule={
        "expire-subscriptions": {
            "task": "lado.workers.tasks.expire_subscriptions.expire_subscriptions",
            "schedule": crontab(minute="*/15"),
        },
    },
)


@signals.setup_logging.connect
def _setup_logging(**kwargs) -> None:
    # A connected receiver stops Celery from installing its own root handlers.
    configure_logging()
