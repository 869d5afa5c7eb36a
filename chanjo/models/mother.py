from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from chanjo.db.base import Base
from chanjo.utils.ids import new_id


class Mother(Base):
    __tablename__ = "mothers"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    must_reset_password = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Profile (filled in after signup)
    full_name = Column(String, nullable=True)
    phone_number = Column(String, unique=True, nullable=True)

    babies = relationship("Baby", back_populates="mother", order_by="Baby.created_at")


class Baby(Base):
    __tablename__ = "babies"

    id = Column(String(32), primary_key=True, default=new_id)
    mother_id = Column(String(32), ForeignKey("mothers.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(6), nullable=False)  # male | female
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    mother = relationship("Mother", back_populates="babies")

    __table_args__ = (
        UniqueConstraint("mother_id", "name", name="uq_babies_mother_name"),
    )
