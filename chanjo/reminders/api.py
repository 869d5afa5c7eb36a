from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chanjo import models
from chanjo.api import deps
from chanjo.db.session import get_db
from chanjo.schemas import ReminderRead, RemindersRegenerated
from chanjo.utils.timezone import now_local_naive
from . import repository
from .service import ReminderService


router = APIRouter()


@router.post("/reminder/{baby_id}", response_model=RemindersRegenerated, status_code=status.HTTP_201_CREATED)
def regenerate_reminders_endpoint(
    baby_id: str,
    db: Session = Depends(get_db),
    current_mother: models.Mother = Depends(deps.get_current_mother),
):
    """Rebuild every reminder for one of the caller's babies from its current birth date."""
    try:
        reminders = ReminderService(db).regenerate_reminders(current_mother.id, baby_id, now_local_naive())
    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Server error while creating reminders")
    return RemindersRegenerated(message="Reminders regenerated successfully", count=len(reminders))


@router.get("/reminders", response_model=List[ReminderRead])
def list_reminders_endpoint(
    baby_id: Optional[str] = None,
    sent: Optional[bool] = None,
    limit: int = 500,
    db: Session = Depends(get_db),
    current_mother: models.Mother = Depends(deps.get_current_mother),
):
    items = repository.list_for_mother(db, current_mother.id, baby_id=baby_id, sent=sent, limit=limit)
    return [ReminderRead.model_validate(i) for i in items]
