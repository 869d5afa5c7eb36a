from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from chanjo import crud
from chanjo.db.session import get_db
from chanjo.schemas import VaccinationScheduleRead

router = APIRouter()


@router.get("", response_model=List[VaccinationScheduleRead])
def list_vaccination_schedule(db: Session = Depends(get_db)):
    return crud.vaccination_schedule.list(db)


@router.get("/{age}", response_model=List[VaccinationScheduleRead])
def list_vaccination_schedule_for_age(age: str, db: Session = Depends(get_db)):
    return crud.vaccination_schedule.list_by_age(db, age=age)
