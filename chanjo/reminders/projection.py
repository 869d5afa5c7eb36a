"""
Due-date projection: birth date + reference schedule -> absolute dose dates.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Protocol

from .age_parser import parse_age_to_days


class ScheduleEntry(Protocol):
    age: str
    vaccine: str


@dataclass(frozen=True)
class DueDose:
    vaccine: str
    vaccination_date: date


@dataclass(frozen=True)
class ScheduledDose:
    """A reference entry with its computed administration date (past or future)."""
    age: str
    vaccine: str
    protection_against: str
    date_to_be_administered: date


def vaccination_date_for(birth_date: date, age: str) -> date:
    # Fractional offsets (half weeks from ranges) truncate to whole days
    return birth_date + timedelta(days=int(parse_age_to_days(age)))


def project_due_dates(
    birth_date: date,
    entries: Iterable[ScheduleEntry],
    now: datetime,
) -> List[DueDose]:
    """Future doses for a baby, in schedule order.

    A dose whose date (taken at midnight) is not after ``now`` is dropped:
    past-due doses never get reminders.
    """
    doses: List[DueDose] = []
    for entry in entries:
        vaccination_date = vaccination_date_for(birth_date, entry.age)
        if datetime.combine(vaccination_date, time.min) <= now:
            continue
        doses.append(DueDose(vaccine=entry.vaccine, vaccination_date=vaccination_date))
    return doses


def compute_schedule(birth_date: date, entries: Iterable[ScheduleEntry]) -> List[ScheduledDose]:
    """Every reference entry with its administration date, for the schedule view."""
    return [
        ScheduledDose(
            age=entry.age,
            vaccine=entry.vaccine,
            protection_against=getattr(entry, "protection_against", "") or "",
            date_to_be_administered=vaccination_date_for(birth_date, entry.age),
        )
        for entry in entries
    ]
