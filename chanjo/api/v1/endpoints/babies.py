import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chanjo import crud, models
from chanjo.api import deps
from chanjo.db.session import get_db
from chanjo.reminders.projection import compute_schedule
from chanjo.reminders.service import ReminderService
from chanjo.schemas import BabyCreate, BabyCreated, BabyRead, BabyScheduleItem, BirthDateUpdate
from chanjo.utils.timezone import now_local_naive

logger = logging.getLogger(__name__)

router = APIRouter()


def _baby_read(baby: models.Baby) -> BabyRead:
    return BabyRead(baby_id=baby.id, name=baby.name, date_of_birth=baby.date_of_birth, gender=baby.gender)


@router.post("", response_model=BabyCreated, status_code=status.HTTP_201_CREATED)
def add_baby(
    payload: BabyCreate,
    db: Session = Depends(get_db),
    current_mother: models.Mother = Depends(deps.get_current_mother),
):
    """Add a baby to the caller's profile and schedule its reminders."""
    baby = crud.mother.add_baby(
        db,
        mother_id=current_mother.id,
        name=payload.baby_name,
        date_of_birth=payload.date_of_birth,
        gender=payload.gender,
    )
    try:
        reminders = ReminderService(db).materialize(baby, now_local_naive())
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Add baby + reminders failed for mother {current_mother.id}")
        raise HTTPException(status_code=500, detail="Server error while adding baby")
    return BabyCreated(
        message="Baby added & reminders scheduled successfully",
        baby=_baby_read(baby),
        reminders_created=len(reminders),
    )


@router.get("/me", response_model=List[BabyRead])
def list_my_babies(current_mother: models.Mother = Depends(deps.get_current_mother)):
    return [_baby_read(b) for b in current_mother.babies]


@router.put("/{baby_id}/birth-date", response_model=BabyRead)
def update_birth_date(
    baby_id: str,
    payload: BirthDateUpdate,
    db: Session = Depends(get_db),
    current_mother: models.Mother = Depends(deps.get_current_mother),
):
    """Correct a baby's birth date and rebuild its reminders from the new date."""
    baby = crud.mother.update_birth_date(
        db, mother_id=current_mother.id, baby_id=baby_id, date_of_birth=payload.birth_date
    )
    try:
        ReminderService(db).materialize(baby, now_local_naive())
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Birth date update failed for baby {baby_id}")
        raise HTTPException(status_code=500, detail="Server error")
    return _baby_read(baby)


@router.get("/{baby_id}/schedule", response_model=List[BabyScheduleItem])
def get_baby_schedule(
    baby_id: str,
    db: Session = Depends(get_db),
    current_mother: models.Mother = Depends(deps.get_current_mother),
):
    """Every reference dose with the date it falls due for this baby."""
    baby = crud.mother.get_baby(db, mother_id=current_mother.id, baby_id=baby_id)
    schedule = crud.vaccination_schedule.list(db)
    return [BabyScheduleItem.model_validate(item) for item in compute_schedule(baby.date_of_birth, schedule)]
