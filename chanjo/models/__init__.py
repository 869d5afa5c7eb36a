from .mother import Mother, Baby
from .vaccination_schedule import VaccinationSchedule
from chanjo.reminders.models import Reminder

__all__ = ["Mother", "Baby", "VaccinationSchedule", "Reminder"]
