"""
Reminder rows - one per (dose, lead time). Created in bulk by the materializer,
flipped to sent by the dispatch sweep.
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Boolean, ForeignKey, Index, false

from chanjo.db.base import Base
from chanjo.utils.ids import new_id


REMINDER_TYPE_WEEKLY = "weekly"
REMINDER_TYPE_DAILY = "daily"
REMINDER_TYPES = (REMINDER_TYPE_WEEKLY, REMINDER_TYPE_DAILY)


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(String(32), primary_key=True, default=new_id)
    type = Column(String(6), nullable=False)  # weekly | daily
    mother_id = Column(String(32), ForeignKey("mothers.id"), nullable=False)
    baby_id = Column(String(32), ForeignKey("babies.id"), nullable=False)
    vaccine = Column(String, nullable=False)
    vaccination_date = Column(Date, nullable=False)
    # Naive wall-clock time in settings.DEFAULT_TIMEZONE
    scheduled_at = Column(DateTime, nullable=False)
    sent = Column(Boolean, nullable=False, default=False)
    sent_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("pending_reminders", "scheduled_at", "sent"),
        Index("ix_reminders_mother_baby", "mother_id", "baby_id"),
        # At most one unsent reminder per dose and lead time
        Index(
            "unique_unsent_reminder",
            "mother_id", "baby_id", "vaccine", "vaccination_date", "type",
            unique=True,
            postgresql_where=(sent == false()),
            sqlite_where=(sent == false()),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Reminder {self.type} {self.vaccine} baby={self.baby_id} "
            f"at={self.scheduled_at:%Y-%m-%d %H:%M} sent={self.sent}>"
        )
