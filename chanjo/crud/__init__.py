from .mother import mother
from .vaccination_schedule import vaccination_schedule

__all__ = ["mother", "vaccination_schedule"]
