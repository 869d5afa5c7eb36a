from dataclasses import asdict

from chanjo.db.session import get_db_session
from chanjo.services.email_service import EmailService
from .celery_app import celery_app
from .dispatcher import run_daily_sweep, run_weekly_sweep


@celery_app.task(name="reminders.weekly_sweep")
def weekly_sweep_task() -> dict:
    """Send the one-week-ahead reminders that are due now."""
    gateway = EmailService()
    with get_db_session() as db:
        result = run_weekly_sweep(db, gateway)
    return asdict(result)


@celery_app.task(name="reminders.daily_sweep")
def daily_sweep_task() -> dict:
    """Send the one-day-ahead reminders that are due now."""
    gateway = EmailService()
    with get_db_session() as db:
        result = run_daily_sweep(db, gateway)
    return asdict(result)
