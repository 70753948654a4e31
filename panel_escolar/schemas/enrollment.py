from enum import Enum
from pydantic import Field
from typing import Optional
from datetime import datetime

from .common import CamelModel


class EnrollmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    GRADUATED = "GRADUATED"
    TRANSFERRED = "TRANSFERRED"


class EnrollmentBase(CamelModel):
    student_id: int = Field(gt=0)
    cycle_id: int = Field(gt=0)
    grade_id: int = Field(gt=0)
    section_id: int = Field(gt=0)
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE


class EnrollmentCreate(EnrollmentBase):
    pass


class EnrollmentUpdate(CamelModel):
    section_id: Optional[int] = Field(default=None, gt=0)
    status: Optional[EnrollmentStatus] = None


class Enrollment(EnrollmentBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
