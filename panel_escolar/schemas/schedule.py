from pydantic import Field, field_serializer, field_validator, ValidationInfo
from typing import Optional, List, Dict
from datetime import datetime, time

from .common import CamelModel

# 1=Lunes ... 7=Domingo (ISO 8601)
DAY_NAMES: Dict[int, str] = {
    1: "Lunes",
    2: "Martes",
    3: "Miércoles",
    4: "Jueves",
    5: "Viernes",
    6: "Sábado",
    7: "Domingo",
}

END_BEFORE_START = "La hora de fin debe ser posterior a la hora de inicio"


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def format_time(value: Optional[time]) -> Optional[str]:
    """El backend trabaja con HH:MM"""
    return value.strftime("%H:%M") if value is not None else None


class ScheduleBase(CamelModel):
    section_id: int = Field(gt=0)
    course_id: int = Field(gt=0)
    teacher_id: Optional[int] = None
    day_of_week: int = Field(ge=1, le=7)
    start_time: time
    end_time: time
    classroom: Optional[str] = None

    @field_validator("end_time")
    @classmethod
    def check_end_after_start(cls, value: time, info: ValidationInfo) -> time:
        start = info.data.get("start_time")
        if start is not None and value <= start:
            raise ValueError(END_BEFORE_START)
        return value

    @field_serializer("start_time", "end_time")
    def serialize_time(self, value: time) -> str:
        return format_time(value)

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    @property
    def duration_minutes(self) -> int:
        return to_minutes(self.end_time) - to_minutes(self.start_time)

    @property
    def time_range(self) -> str:
        return f"{format_time(self.start_time)} a {format_time(self.end_time)}"


class ScheduleCreate(ScheduleBase):
    pass


class ScheduleUpdate(CamelModel):
    teacher_id: Optional[int] = None
    day_of_week: Optional[int] = Field(default=None, ge=1, le=7)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    classroom: Optional[str] = None

    @field_validator("end_time")
    @classmethod
    def check_end_after_start(cls, value: Optional[time], info: ValidationInfo):
        start = info.data.get("start_time")
        if value is not None and start is not None and value <= start:
            raise ValueError(END_BEFORE_START)
        return value

    @field_serializer("start_time", "end_time")
    def serialize_time(self, value: Optional[time]) -> Optional[str]:
        return format_time(value)


class Schedule(ScheduleBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def overlaps(a: ScheduleBase, b: ScheduleBase) -> bool:
    if a.day_of_week != b.day_of_week:
        return False
    return a.start_time < b.end_time and b.start_time < a.end_time


def find_conflicts(
    existing: List[Schedule], candidate: ScheduleBase, exclude_id: Optional[int] = None
) -> List[Schedule]:
    """Horarios que chocan con el candidato en la misma sección o con el mismo docente"""
    conflicts = []
    for schedule in existing:
        if exclude_id is not None and schedule.id == exclude_id:
            continue
        if not overlaps(schedule, candidate):
            continue
        same_section = schedule.section_id == candidate.section_id
        same_teacher = (
            candidate.teacher_id is not None
            and schedule.teacher_id == candidate.teacher_id
        )
        if same_section or same_teacher:
            conflicts.append(schedule)
    return conflicts
