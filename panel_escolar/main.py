"""
Fábrica del panel: un solo ApiClient compartido por todos los servicios.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

import requests

from panel_escolar.config.settings import Settings
from panel_escolar.core.api_client import ApiClient
from panel_escolar.core.cascade import CascadeCoordinator, StageLoader
from panel_escolar.core.logger import get_logger
from panel_escolar.services.academic_weeks import AcademicWeekService
from panel_escolar.services.attendance import AttendanceService
from panel_escolar.services.bimesters import BimesterService
from panel_escolar.services.cascade import CascadeService
from panel_escolar.services.cotejos import CotejoService
from panel_escolar.services.course_assignments import CourseAssignmentService
from panel_escolar.services.courses import CourseService
from panel_escolar.services.enrollments import EnrollmentService
from panel_escolar.services.grades import GradeService
from panel_escolar.services.holidays import HolidayService
from panel_escolar.services.school_cycles import SchoolCycleService
from panel_escolar.services.schedules import ScheduleService
from panel_escolar.services.sections import SectionService
from panel_escolar.services.teachers import TeacherService
from panel_escolar.services.users import UserService

logger = get_logger(__name__)


class Panel:
    def __init__(self, client: ApiClient):
        self.client = client
        self.school_cycles = SchoolCycleService(client)
        self.grades = GradeService(client)
        self.sections = SectionService(client)
        self.courses = CourseService(client)
        self.teachers = TeacherService(client)
        self.users = UserService(client)
        self.bimesters = BimesterService(client)
        self.academic_weeks = AcademicWeekService(client)
        self.holidays = HolidayService(client)
        self.schedules = ScheduleService(client)
        self.course_assignments = CourseAssignmentService(client)
        self.enrollments = EnrollmentService(client)
        self.attendance = AttendanceService(client)
        self.cotejos = CotejoService(client)
        self.cascade = CascadeService(client)

    def cascade_loaders(self) -> Dict[str, StageLoader]:
        """Loaders de la cascada respaldados por los servicios REST"""

        def teachers(course_id: int, ancestors: Dict[str, Any]):
            return self.teachers.get_by_course(course_id, section_id=ancestors.get("section"))

        return {
            "cycle": self.school_cycles.selectable,
            "grade": lambda cycle_id, ancestors: self.grades.get_by_cycle(cycle_id),
            "section": lambda grade_id, ancestors: self.sections.get_by_grade(grade_id),
            "course": lambda section_id, ancestors: self.courses.get_by_section(section_id),
            "teacher": teachers,
        }

    def build_cascade(
        self,
        from_snapshot: bool = False,
        auto_select_single: bool = False,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> CascadeCoordinator:
        if from_snapshot:
            loaders = self.cascade.get_cascade_data().loaders()
        else:
            loaders = self.cascade_loaders()
        return CascadeCoordinator.build(
            loaders, auto_select_single=auto_select_single, executor=executor
        )

    def close(self):
        self.client.close()


def create_panel(
    settings: Optional[Settings] = None, session: Optional[requests.Session] = None
) -> Panel:
    client = ApiClient(settings=settings, session=session)
    logger.info(f"Panel escolar conectado a {client.settings.api_root}")
    return Panel(client)
