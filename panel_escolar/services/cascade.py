from typing import Any, Dict, List, Optional

from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.cascade import StageLoader
from panel_escolar.core.errors import ApiError
from panel_escolar.schemas.common import CamelModel
from panel_escolar.schemas.teacher import TeacherSummary
from .base import parse_model


class CycleOption(CamelModel):
    id: int
    name: str


class BimesterOption(CamelModel):
    id: int
    number: int
    name: Optional[str] = None


class GradeOption(CamelModel):
    id: int
    name: str
    level: Optional[str] = None


class CourseOption(CamelModel):
    id: int
    name: str
    code: Optional[str] = None
    area: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True


class SectionCourseAssignment(CamelModel):
    id: int
    course: CourseOption
    teacher: Optional[TeacherSummary] = None


class SectionOption(CamelModel):
    id: int
    name: str
    grade_id: int
    teacher: Optional[TeacherSummary] = None
    course_assignments: List[SectionCourseAssignment] = []


class CascadeSnapshot(CamelModel):
    """Estructura completa del ciclo activo, devuelta por un solo endpoint"""

    cycle: CycleOption
    active_bimester: Optional[BimesterOption] = None
    grades: List[GradeOption] = []
    grades_sections: Dict[int, List[SectionOption]] = {}

    def sections_of(self, grade_id: int) -> List[SectionOption]:
        return [s for s in self.grades_sections.get(grade_id, []) if s.grade_id == grade_id]

    def find_section(self, section_id: int) -> Optional[SectionOption]:
        for sections in self.grades_sections.values():
            for section in sections:
                if section.id == section_id:
                    return section
        return None

    def courses_of(self, section_id: int) -> List[CourseOption]:
        section = self.find_section(section_id)
        if section is None:
            return []
        courses: Dict[int, CourseOption] = {}
        for assignment in section.course_assignments:
            courses.setdefault(assignment.course.id, assignment.course)
        return list(courses.values())

    def teachers_of(self, section_id: int, course_id: int) -> List[TeacherSummary]:
        section = self.find_section(section_id)
        if section is None:
            return []
        teachers: Dict[int, TeacherSummary] = {}
        for assignment in section.course_assignments:
            if assignment.course.id == course_id and assignment.teacher is not None:
                teachers.setdefault(assignment.teacher.id, assignment.teacher)
        return list(teachers.values())

    def loaders(self) -> Dict[str, StageLoader]:
        """Loaders de la cascada servidos desde memoria, sin llamadas extra"""

        def grades(cycle_id: int, ancestors: Dict[str, Any]):
            return list(self.grades) if cycle_id == self.cycle.id else []

        def sections(grade_id: int, ancestors: Dict[str, Any]):
            return self.sections_of(grade_id)

        def courses(section_id: int, ancestors: Dict[str, Any]):
            return self.courses_of(section_id)

        def teachers(course_id: int, ancestors: Dict[str, Any]):
            section_id = ancestors.get("section")
            if section_id is None:
                return []
            return self.teachers_of(section_id, course_id)

        return {
            "cycle": lambda: [self.cycle],
            "grade": grades,
            "section": sections,
            "course": courses,
            "teacher": teachers,
        }


class CascadeService:
    ENDPOINT = "/api/assignments/cascade"

    def __init__(self, client: ApiClient):
        self.client = client

    def get_cascade_data(self, include_inactive: bool = False) -> CascadeSnapshot:
        envelope = self.client.get(
            self.ENDPOINT, params={"includeInactive": include_inactive}
        )
        if not envelope.data:
            raise ApiError("Error cargando datos de la cascada")
        return parse_model(CascadeSnapshot, envelope.data, "cascada")
