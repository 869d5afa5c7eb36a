"""
Reminder materializer: keeps a baby's reminder rows in step with its birth date.

Every regeneration replaces the baby's whole reminder set (sent rows included)
with one computed from the current birth date and the live reference schedule.
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chanjo import crud
from chanjo.models.mother import Baby
from chanjo.utils.timezone import now_local_naive, to_local_naive
from .config import settings
from .metrics import reminders_created_total, reminders_materialized_total
from .models import Reminder, REMINDER_TYPE_DAILY, REMINDER_TYPE_WEEKLY
from .projection import DueDose, project_due_dates
from . import repository

logger = logging.getLogger(__name__)


def reminder_time(vaccination_date: date, lead_days: int) -> datetime:
    """Send time for a dose: ``lead_days`` before the due date at the configured hour."""
    send_at = time(settings.SEND_HOUR, settings.SEND_MINUTE, 0, 0)
    return datetime.combine(vaccination_date - timedelta(days=lead_days), send_at)


def build_reminders(mother_id: str, baby_id: str, doses: Iterable[DueDose]) -> List[Reminder]:
    """Weekly and daily reminder rows for each dose, in dose order."""
    leads = (
        (REMINDER_TYPE_WEEKLY, settings.WEEKLY_LEAD_DAYS),
        (REMINDER_TYPE_DAILY, settings.DAILY_LEAD_DAYS),
    )
    reminders: List[Reminder] = []
    for dose in doses:
        for reminder_type, lead_days in leads:
            reminders.append(
                Reminder(
                    type=reminder_type,
                    mother_id=mother_id,
                    baby_id=baby_id,
                    vaccine=dose.vaccine,
                    vaccination_date=dose.vaccination_date,
                    scheduled_at=reminder_time(dose.vaccination_date, lead_days),
                    sent=False,
                )
            )
    return reminders


class ReminderService:
    """Materializes reminders for babies on a caller-owned session."""

    def __init__(self, db: Session):
        self.db = db

    def materialize(self, baby: Baby, now: Optional[datetime] = None) -> List[Reminder]:
        """Replace the baby's reminders inside the current transaction (no commit)."""
        now = to_local_naive(now) if now else now_local_naive()
        deleted = repository.delete_for_baby(self.db, baby.mother_id, baby.id)
        schedule = crud.vaccination_schedule.list(self.db)
        doses = project_due_dates(baby.date_of_birth, schedule, now)
        reminders = repository.insert_many(self.db, build_reminders(baby.mother_id, baby.id, doses))

        reminders_materialized_total.inc()
        reminders_created_total.inc(len(reminders))
        logger.info(
            f"Materialized reminders for baby {baby.id}: removed {deleted}, "
            f"created {len(reminders)} for {len(doses)} upcoming doses"
        )
        return reminders

    def regenerate_reminders(self, mother_id: str, baby_id: str, now: Optional[datetime] = None) -> List[Reminder]:
        """Recompute and persist a baby's reminders.

        Raises NotFoundError if the mother or baby does not exist or the baby
        belongs to another mother. Delete and insert commit together.
        """
        baby = crud.mother.get_baby(self.db, mother_id=mother_id, baby_id=baby_id)
        try:
            reminders = self.materialize(baby, now)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Reminder regeneration failed for baby {baby_id}")
            raise
        return reminders


def regenerate_reminders(db: Session, mother_id: str, baby_id: str, now: Optional[datetime] = None) -> List[Reminder]:
    return ReminderService(db).regenerate_reminders(mother_id, baby_id, now)
