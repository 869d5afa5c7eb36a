import logging
from typing import Iterable, List, Tuple
from sqlalchemy.orm import Session

from chanjo.models.vaccination_schedule import VaccinationSchedule
from chanjo.reminders.age_parser import is_recognized_age

logger = logging.getLogger(__name__)


class CRUDVaccinationSchedule:
    def list(self, db: Session) -> List[VaccinationSchedule]:
        return db.query(VaccinationSchedule).order_by(VaccinationSchedule.id.asc()).all()

    def list_by_age(self, db: Session, *, age: str) -> List[VaccinationSchedule]:
        return (
            db.query(VaccinationSchedule)
            .filter(VaccinationSchedule.age == age)
            .order_by(VaccinationSchedule.id.asc())
            .all()
        )

    def seed(self, db: Session, entries: Iterable[Tuple[str, str, str]]) -> int:
        """Insert (age, vaccine, protection_against) rows that are not present yet."""
        existing = {(e.age, e.vaccine) for e in self.list(db)}
        added = 0
        for age, vaccine, protection_against in entries:
            if (age, vaccine) in existing:
                continue
            if not is_recognized_age(age):
                logger.warning(f"Schedule entry {vaccine!r} has unrecognised age {age!r}; it will be due at birth")
            db.add(VaccinationSchedule(age=age, vaccine=vaccine, protection_against=protection_against))
            existing.add((age, vaccine))
            added += 1
        db.commit()
        return added


vaccination_schedule = CRUDVaccinationSchedule()
