from pydantic import Field
from typing import Optional, List
from datetime import date

from .common import CamelModel


class AttendanceStatus(CamelModel):
    """Estado de asistencia definido en el backend (no es un enum fijo)"""

    id: int
    code: str
    name: str
    is_negative: bool = False
    is_active: bool = True
    color: Optional[str] = None
    order: Optional[int] = None


class AttendanceRecordBase(CamelModel):
    enrollment_id: int = Field(gt=0)
    attendance_status_id: int = Field(gt=0)
    notes: Optional[str] = None


class AttendanceRecord(AttendanceRecordBase):
    id: Optional[int] = None
    attendance_date: Optional[date] = Field(default=None, alias="date")


class BulkAttendanceCreate(CamelModel):
    section_id: int = Field(gt=0)
    attendance_date: date = Field(alias="date")
    records: List[AttendanceRecordBase] = Field(min_length=1)
