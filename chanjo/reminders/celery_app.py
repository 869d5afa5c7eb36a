import logging

from celery import Celery
from celery.schedules import crontab

from chanjo.core.config import settings as core_settings
from .config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

celery_app = Celery(
    "reminders",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND or None,
)

celery_app.conf.update(
    task_acks_late=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    worker_prefetch_multiplier=1,
    worker_concurrency=settings.WORKER_CONCURRENCY,
    # Beat fires in the same wall-clock zone reminders are stored in
    timezone=core_settings.DEFAULT_TIMEZONE,
    enable_utc=False,
    include=["chanjo.reminders.tasks"],
)

# Two independent daily sweeps, one per reminder type
celery_app.conf.beat_schedule = {
    "weekly-reminder-sweep": {
        "task": "reminders.weekly_sweep",
        "schedule": crontab(hour=settings.SWEEP_HOUR, minute=settings.SWEEP_MINUTE),
    },
    "daily-reminder-sweep": {
        "task": "reminders.daily_sweep",
        "schedule": crontab(hour=settings.SWEEP_HOUR, minute=settings.SWEEP_MINUTE),
    },
}
