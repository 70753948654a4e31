from enum import Enum
from pydantic import Field, model_validator
from typing import Optional
from datetime import date, datetime

from .common import CamelModel


class WeekType(str, Enum):
    REGULAR = "REGULAR"
    EVALUATION = "EVALUATION"
    REVIEW = "REVIEW"


class AcademicWeekBase(CamelModel):
    bimester_id: int = Field(gt=0)
    number: int = Field(ge=1, le=20)
    start_date: date
    end_date: date
    week_type: WeekType = WeekType.REGULAR
    objectives: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("La fecha de fin no puede ser anterior a la de inicio")
        return self

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class AcademicWeekCreate(AcademicWeekBase):
    pass


class AcademicWeekUpdate(CamelModel):
    number: Optional[int] = Field(default=None, ge=1, le=20)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    week_type: Optional[WeekType] = None
    objectives: Optional[str] = None


class AcademicWeek(AcademicWeekBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GenerateWeeks(CamelModel):
    weeks_count: int = Field(default=8, ge=1, le=20)
    include_evaluation_week: bool = True
