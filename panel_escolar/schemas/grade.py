from pydantic import Field
from typing import Optional
from datetime import datetime

from .common import CamelModel


class GradeBase(CamelModel):
    name: str = Field(min_length=1)
    level: str
    order: int = Field(ge=1)
    is_active: bool = True


class GradeCreate(GradeBase):
    pass


class GradeUpdate(CamelModel):
    name: Optional[str] = None
    level: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class Grade(GradeBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GradeCycle(CamelModel):
    id: Optional[int] = None
    cycle_id: int
    grade_id: int
