from datetime import date
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BabyCreate(BaseModel):
    # Field names follow the frontend's JSON
    baby_name: str = Field(..., min_length=1, alias="babyName")
    date_of_birth: date = Field(..., alias="dateOfBirth")
    gender: Literal["male", "female"]

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, v):
        return v.lower() if isinstance(v, str) else v


class BirthDateUpdate(BaseModel):
    birth_date: date = Field(..., alias="birthDate")

    model_config = ConfigDict(populate_by_name=True)


class BabyRead(BaseModel):
    baby_id: str
    name: str
    date_of_birth: date
    gender: str


class BabyCreated(BaseModel):
    message: str
    baby: BabyRead
    reminders_created: int
