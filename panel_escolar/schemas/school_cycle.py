from pydantic import model_validator
from typing import Optional, List
from datetime import date, datetime

from .common import CamelModel


class SchoolCycleBase(CamelModel):
    name: str
    start_date: date
    end_date: date
    description: Optional[str] = None
    is_active: bool = False

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("La fecha de fin debe ser posterior a la de inicio")
        return self


class SchoolCycleCreate(SchoolCycleBase):
    pass


class SchoolCycleUpdate(CamelModel):
    name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class SchoolCycle(SchoolCycleBase):
    id: int
    is_closed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_archived(self) -> bool:
        return self.is_closed


def selectable_cycles(cycles: List[SchoolCycle]) -> List[SchoolCycle]:
    """Ciclos que pueden aparecer en los selectores de inscripción"""
    return [c for c in cycles if not c.is_archived]
