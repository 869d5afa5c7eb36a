from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class ReminderRead(BaseModel):
    id: str
    type: str
    mother_id: str
    baby_id: str
    vaccine: str
    vaccination_date: date
    scheduled_at: datetime
    sent: bool
    sent_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RemindersRegenerated(BaseModel):
    message: str
    count: int
