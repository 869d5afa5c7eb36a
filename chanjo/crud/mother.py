from datetime import date
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chanjo.core.exceptions import ConflictError, NotFoundError
from chanjo.core.security import get_password_hash
from chanjo.models.mother import Baby, Mother


class CRUDMother:
    def create(
        self,
        db: Session,
        *,
        email: str,
        password: Optional[str] = None,
        full_name: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> Mother:
        if self.get_by_email(db, email=email):
            raise ConflictError("User exists")
        db_obj = Mother(
            email=email,
            hashed_password=get_password_hash(password) if password else None,
            must_reset_password=password is None,
            full_name=full_name,
            phone_number=phone_number,
        )
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("The phone number is already in use in another account")
        db.refresh(db_obj)
        return db_obj

    def get(self, db: Session, id: str) -> Optional[Mother]:
        return db.query(Mother).filter(Mother.id == id).first()

    def get_by_email(self, db: Session, *, email: str) -> Optional[Mother]:
        return db.query(Mother).filter(Mother.email == email).first()

    def get_baby(self, db: Session, *, mother_id: str, baby_id: str) -> Baby:
        """Baby owned by the mother; NotFoundError otherwise."""
        if not self.get(db, mother_id):
            raise NotFoundError("User not found")
        baby = db.query(Baby).filter(Baby.id == baby_id, Baby.mother_id == mother_id).first()
        if not baby:
            raise NotFoundError("Baby not found")
        return baby

    def add_baby(
        self,
        db: Session,
        *,
        mother_id: str,
        name: str,
        date_of_birth: date,
        gender: str,
    ) -> Baby:
        """Stage a new baby (flushed, not committed)."""
        mother = self.get(db, mother_id)
        if not mother:
            raise NotFoundError("Mother profile not found")
        if any(b.name == name for b in mother.babies):
            raise ConflictError("You already have a baby with that name")
        baby = Baby(name=name, date_of_birth=date_of_birth, gender=gender.lower())
        mother.babies.append(baby)
        try:
            db.flush()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same name
            db.rollback()
            raise ConflictError("You already have a baby with that name")
        return baby

    def update_birth_date(self, db: Session, *, mother_id: str, baby_id: str, date_of_birth: date) -> Baby:
        """Stage a birth-date correction (flushed, not committed)."""
        baby = db.query(Baby).filter(Baby.id == baby_id, Baby.mother_id == mother_id).first()
        if not baby:
            raise NotFoundError("Baby not found or unauthorized")
        baby.date_of_birth = date_of_birth
        db.add(baby)
        db.flush()
        return baby


mother = CRUDMother()
