from datetime import date
from pydantic import BaseModel, ConfigDict


class VaccinationScheduleRead(BaseModel):
    id: int
    age: str
    vaccine: str
    protection_against: str

    model_config = ConfigDict(from_attributes=True)


class BabyScheduleItem(BaseModel):
    """A reference entry with the date it falls due for a given baby."""
    age: str
    vaccine: str
    protection_against: str
    date_to_be_administered: date

    model_config = ConfigDict(from_attributes=True)
