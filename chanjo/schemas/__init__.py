from .baby import BabyCreate, BabyCreated, BabyRead, BirthDateUpdate
from .reminder import ReminderRead, RemindersRegenerated
from .vaccination_schedule import BabyScheduleItem, VaccinationScheduleRead
from .token import TokenPayload
