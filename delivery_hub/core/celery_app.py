"""
Celery application configuration.

Redis is both the message broker and result backend. Celery beat runs the
two-factor cleanup task hourly.
"""

from celery import Celery
from celery.schedules import crontab
from delivery_hub.core.config import settings

celery_app = Celery(
    "delivery_hub_worker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task behavior
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,

    # Result backend
    result_expires=3600,

    # Worker behavior
    worker_prefetch_multiplier=1,

    beat_schedule={
        "cleanup-two-factor-records": {
            "task": "cleanup_two_factor_records",
            "schedule": crontab(minute=0),  # Every hour
        },
    },
)

celery_app.autodiscover_tasks(["delivery_hub"])
