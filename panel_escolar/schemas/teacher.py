from typing import Optional

from .common import CamelModel


class TeacherSummary(CamelModel):
    id: int
    given_names: str
    last_names: str
    email: Optional[str] = None
    is_home_room_teacher: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.given_names} {self.last_names}".strip()


class Teacher(TeacherSummary):
    dpi: Optional[str] = None
    phone: Optional[str] = None
