"""
Reminder dispatch sweep.

One run per reminder type: select due unsent rows, group them by recipient,
send one email per recipient and mark that recipient's rows sent once the
SMTP server has accepted the message. Rows whose email failed stay unsent
and are picked up again by the next day's run.
"""
import html
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chanjo.utils.timezone import now_local_naive, to_local_naive
from .metrics import (
    reminder_emails_failed_total,
    reminder_emails_sent_total,
    reminders_sent_total,
    sweep_runs_total,
    sweep_skipped_total,
)
from .models import REMINDER_TYPE_DAILY, REMINDER_TYPE_WEEKLY, REMINDER_TYPES
from . import repository

logger = logging.getLogger(__name__)


class EmailGateway(Protocol):
    def send_email(self, to_email: str, subject: str, html_content: str, text_content: Optional[str] = None) -> bool:
        ...


@dataclass
class DueItem:
    reminder_id: str
    vaccine: str
    vaccination_date: date
    baby_name: Optional[str]


@dataclass
class RecipientBatch:
    email: str
    full_name: Optional[str]
    items: List[DueItem] = field(default_factory=list)

    @property
    def reminder_ids(self) -> List[str]:
        return [item.reminder_id for item in self.items]


@dataclass
class SweepResult:
    reminder_type: str
    selected: int = 0
    recipients: int = 0
    emails_sent: int = 0
    emails_failed: int = 0
    marked_sent: int = 0
    skipped: bool = False


SUBJECTS = {
    REMINDER_TYPE_WEEKLY: "Upcoming Vaccinations",
    REMINDER_TYPE_DAILY: "Vaccinations Due Tomorrow",
}

LEAD_PHRASES = {
    REMINDER_TYPE_WEEKLY: "in one week",
    REMINDER_TYPE_DAILY: "tomorrow",
}


def lead_phrase(due_date: date, today: date) -> str:
    """How far off a dose is, as of the day the email goes out."""
    days = (due_date - today).days
    if days < 0:
        return "overdue"
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    if days == 7:
        return "in one week"
    return f"in {days} days"


def group_by_recipient(rows) -> List[RecipientBatch]:
    """Group joined due rows by recipient email, keeping first-seen order."""
    batches: "OrderedDict[str, RecipientBatch]" = OrderedDict()
    for row in rows:
        reminder = row.Reminder
        batch = batches.get(row.email)
        if batch is None:
            batch = batches[row.email] = RecipientBatch(email=row.email, full_name=row.full_name)
        batch.items.append(
            DueItem(
                reminder_id=reminder.id,
                vaccine=reminder.vaccine,
                vaccination_date=reminder.vaccination_date,
                baby_name=row.baby_name,
            )
        )
    return list(batches.values())


def _items_by_date(items: List[DueItem]) -> Dict[date, List[DueItem]]:
    grouped: Dict[date, List[DueItem]] = {}
    for item in sorted(items, key=lambda i: i.vaccination_date):
        grouped.setdefault(item.vaccination_date, []).append(item)
    return grouped


def _format_date(value: date) -> str:
    return value.strftime("%a %b %d %Y")


def compose_reminder_email(
    batch: RecipientBatch, reminder_type: str, today: Optional[date] = None
) -> tuple[str, str, str]:
    """Subject, HTML and plain-text bodies for one recipient.

    With ``today`` the lead time is worded from each due date; without it the
    nominal lead of the reminder type is used.
    """
    name = batch.full_name or "Mother"
    by_date = _items_by_date(batch.items)
    subject = SUBJECTS[reminder_type]
    if today is not None and reminder_type == REMINDER_TYPE_DAILY and any(
        lead_phrase(d, today) != "tomorrow" for d in by_date
    ):
        subject = SUBJECTS[REMINDER_TYPE_WEEKLY]

    html_sections = []
    text_sections = []
    for due_date, items in by_date.items():
        lead = lead_phrase(due_date, today) if today is not None else LEAD_PHRASES[reminder_type]
        entries = "".join(
            f"<li><strong>{html.escape(i.vaccine)}</strong>"
            + (f" for {html.escape(i.baby_name)}" if i.baby_name else "")
            + "</li>"
            for i in items
        )
        html_sections.append(
            f"<p>Here are your baby's vaccinations due on {_format_date(due_date)} ({lead}):</p>"
            f"<ul>{entries}</ul>"
        )
        text_lines = "\n".join(
            f"  - {i.vaccine}" + (f" for {i.baby_name}" if i.baby_name else "") for i in items
        )
        text_sections.append(f"Vaccinations due on {_format_date(due_date)} ({lead}):\n{text_lines}")

    html_content = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px;">
        <p>Dear {html.escape(name)},</p>
        {''.join(html_sections)}
        <p>Regards,<br/>Chanjo Team</p>
    </div>
    """
    text_content = f"Dear {name},\n\n" + "\n\n".join(text_sections) + "\n\nRegards,\nChanjo Team\n"
    return subject, html_content, text_content


class ReminderSweep:
    def __init__(self, db: Session, gateway: EmailGateway):
        self.db = db
        self.gateway = gateway

    def run(self, reminder_type: str, now: Optional[datetime] = None) -> SweepResult:
        if reminder_type not in REMINDER_TYPES:
            raise ValueError(f"Unknown reminder type: {reminder_type}")
        now = to_local_naive(now) if now else now_local_naive()
        result = SweepResult(reminder_type=reminder_type)
        sweep_runs_total.labels(reminder_type=reminder_type).inc()

        try:
            rows = repository.get_due_reminders(self.db, reminder_type, now)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"{reminder_type} sweep aborted: could not load due reminders")
            raise

        result.selected = len(rows)
        if not rows:
            logger.info(f"{reminder_type} sweep at {now:%Y-%m-%d %H:%M}: nothing due")
            return result

        batches = group_by_recipient(rows)
        result.recipients = len(batches)
        for batch in batches:
            if self._send(batch, reminder_type, now.date()):
                result.emails_sent += 1
                try:
                    marked = repository.mark_sent(self.db, batch.reminder_ids, now)
                except SQLAlchemyError:
                    self.db.rollback()
                    logger.exception(f"{reminder_type} sweep aborted: could not mark reminders sent for {batch.email}")
                    raise
                result.marked_sent += marked
                reminders_sent_total.labels(reminder_type=reminder_type).inc(marked)
            else:
                result.emails_failed += 1

        logger.info(
            f"{reminder_type} sweep at {now:%Y-%m-%d %H:%M}: {result.selected} due, "
            f"{result.emails_sent}/{result.recipients} emails sent, {result.marked_sent} marked sent"
        )
        return result

    def _send(self, batch: RecipientBatch, reminder_type: str, today: date) -> bool:
        subject, html_content, text_content = compose_reminder_email(batch, reminder_type, today)
        try:
            ok = self.gateway.send_email(batch.email, subject, html_content, text_content)
        except Exception:
            logger.exception(f"Email gateway error for {batch.email}")
            ok = False
        if ok:
            reminder_emails_sent_total.inc()
        else:
            reminder_emails_failed_total.inc()
            logger.warning(
                f"{reminder_type} reminder email to {batch.email} failed; "
                f"{len(batch.items)} reminders left unsent for the next run"
            )
        return ok


# One in-flight run per reminder type in this process
_sweep_locks = {reminder_type: threading.Lock() for reminder_type in REMINDER_TYPES}


def run_sweep(db: Session, gateway: EmailGateway, reminder_type: str, now: Optional[datetime] = None) -> SweepResult:
    if reminder_type not in _sweep_locks:
        raise ValueError(f"Unknown reminder type: {reminder_type}")
    lock = _sweep_locks[reminder_type]
    if not lock.acquire(blocking=False):
        logger.warning(f"{reminder_type} sweep still running, skipping this tick")
        sweep_skipped_total.labels(reminder_type=reminder_type).inc()
        return SweepResult(reminder_type=reminder_type, skipped=True)
    try:
        return ReminderSweep(db, gateway).run(reminder_type, now)
    finally:
        lock.release()


def run_weekly_sweep(db: Session, gateway: EmailGateway, now: Optional[datetime] = None) -> SweepResult:
    return run_sweep(db, gateway, REMINDER_TYPE_WEEKLY, now)


def run_daily_sweep(db: Session, gateway: EmailGateway, now: Optional[datetime] = None) -> SweepResult:
    return run_sweep(db, gateway, REMINDER_TYPE_DAILY, now)
