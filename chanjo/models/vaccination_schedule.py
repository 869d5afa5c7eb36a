from sqlalchemy import Column, Integer, String, UniqueConstraint

from chanjo.db.base import Base


class VaccinationSchedule(Base):
    """Reference schedule entry. Row id defines the display and projection order."""
    __tablename__ = "vaccination_schedules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    age = Column(String, nullable=False, index=True)
    vaccine = Column(String, nullable=False)
    protection_against = Column(String, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("age", "vaccine", name="unique_age_vaccine"),
    )
