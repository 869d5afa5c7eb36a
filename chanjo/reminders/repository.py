from datetime import datetime
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import delete, select, update
from sqlalchemy.engine import Row

from .models import Reminder
from chanjo.models.mother import Baby, Mother


def delete_for_baby(db: Session, mother_id: str, baby_id: str) -> int:
    """Delete a baby's reminders. Does not commit; the caller owns the transaction."""
    stmt = delete(Reminder).where(Reminder.mother_id == mother_id, Reminder.baby_id == baby_id)
    result = db.execute(stmt)
    return result.rowcount or 0


def insert_many(db: Session, reminders: Iterable[Reminder]) -> List[Reminder]:
    """Stage reminders for insert. Does not commit."""
    rows = list(reminders)
    if rows:
        db.add_all(rows)
        db.flush()
    return rows


def get_due_reminders(db: Session, reminder_type: str, now: datetime) -> List[Row]:
    """Unsent reminders of one type due at ``now``, joined to the owning mother.

    Each row exposes ``Reminder``, ``full_name``, ``email`` and ``baby_name``.
    """
    stmt = (
        select(Reminder, Mother.full_name, Mother.email, Baby.name.label("baby_name"))
        .join(Mother, Mother.id == Reminder.mother_id)
        .outerjoin(Baby, Baby.id == Reminder.baby_id)
        .where(Reminder.type == reminder_type)
        .where(Reminder.sent == False)  # noqa: E712
        .where(Reminder.scheduled_at <= now)
        .order_by(Reminder.scheduled_at.asc(), Reminder.vaccination_date.asc(), Reminder.id.asc())
    )
    return list(db.execute(stmt).all())


def mark_sent(db: Session, reminder_ids: List[str], sent_at: datetime) -> int:
    """Flip the given reminders to sent in one statement and commit."""
    if not reminder_ids:
        return 0
    result = db.execute(
        update(Reminder)
        .where(Reminder.id.in_(reminder_ids))
        .where(Reminder.sent == False)  # noqa: E712
        .values(sent=True, sent_at=sent_at)
    )
    db.commit()
    return result.rowcount or 0


def list_for_mother(
    db: Session,
    mother_id: str,
    baby_id: Optional[str] = None,
    sent: Optional[bool] = None,
    limit: int = 500,
) -> List[Reminder]:
    stmt = (
        select(Reminder)
        .where(Reminder.mother_id == mother_id)
        .order_by(Reminder.scheduled_at.asc(), Reminder.type.asc())
        .limit(limit)
    )
    if baby_id:
        stmt = stmt.where(Reminder.baby_id == baby_id)
    if sent is not None:
        stmt = stmt.where(Reminder.sent == sent)
    return list(db.execute(stmt).scalars())
