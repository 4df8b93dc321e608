from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field as PydanticField, model_validator


class ChildBase(BaseModel):
    nik: Optional[str] = PydanticField(None, max_length=32)
    birth_weight_kg: Optional[float] = PydanticField(None, ge=0, le=10)
    birth_height_cm: Optional[float] = PydanticField(None, ge=0, le=100)
    notes: Optional[str] = None


class ChildCreate(ChildBase):
    full_name: str = PydanticField(..., max_length=150)
    birth_date: date
    gender: Literal["L", "P"]
    parent_id: Optional[int] = None
    parent_name: Optional[str] = PydanticField(None, max_length=100)
    parent_email: Optional[EmailStr] = None
    parent_phone: Optional[str] = PydanticField(None, max_length=20)

    @model_validator(mode="after")
    def parent_required(self):
        if self.parent_id is None and not self.parent_name:
            raise ValueError("parent_name is required when parent_id is not given")
        return self


class ChildUpdate(ChildBase):
    full_name: Optional[str] = PydanticField(None, max_length=150)
    birth_date: Optional[date] = None
    gender: Optional[Literal["L", "P"]] = None
    is_active: Optional[bool] = None


# Meal journal
class MealLogCreate(BaseModel):
    child_id: int
    eaten_at: datetime
    time_of_day: Optional[Literal["pagi", "siang", "malam", "snack"]] = None
    description: str
    ingredients: Optional[str] = None
    source: Optional[Literal["ortu", "kader", "system"]] = None


# Supplementary feeding
class PmtLogCreate(BaseModel):
    child_id: int
    date: date
    status: Literal["consumed", "partial", "refused"]
    notes: Optional[str] = PydanticField(None, max_length=500)


class ConsultationMessageCreate(BaseModel):
    message: str = PydanticField(..., min_length=1, max_length=1000)
