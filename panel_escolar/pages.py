"""
Páginas del panel: cada una arma su cascada, el listado ligado a la
selección y el formulario que dispara la mutación final.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from panel_escolar.core.cascade import CascadeCoordinator
from panel_escolar.core.errors import ValidationFailed
from panel_escolar.core.fetcher import EntityFetcher, list_fetcher
from panel_escolar.core.notifications import Notifier
from panel_escolar.core.submission import FormSubmission, PageState
from panel_escolar.main import Panel
from panel_escolar.schemas.attendance import BulkAttendanceCreate
from panel_escolar.schemas.cotejo import BulkCotejoGenerate
from panel_escolar.schemas.course_assignment import CourseAssignmentCreate
from panel_escolar.schemas.enrollment import EnrollmentCreate
from panel_escolar.schemas.schedule import ScheduleCreate, DAY_NAMES


class CascadePage:
    """Base: cascada + listado ligado a una etapa + formulario"""

    stages: Tuple[str, ...] = ("cycle", "grade", "section", "course", "teacher")
    list_stage = "section"

    def __init__(
        self,
        panel: Panel,
        notifier: Optional[Notifier] = None,
        coordinator: Optional[CascadeCoordinator] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        auto_select_single: bool = False,
    ):
        self.panel = panel
        self.notifier = notifier or Notifier()
        if coordinator is None:
            loaders = panel.cascade_loaders()
            coordinator = CascadeCoordinator.build(
                {name: loaders[name] for name in self.stages},
                stages=self.stages,
                auto_select_single=auto_select_single,
                executor=executor,
            )
        self.cascade = coordinator
        self.listing = self.build_listing()
        self.form = self.build_form()
        self.cascade.subscribe(lambda selection: self._sync_listing())

    def build_listing(self) -> EntityFetcher:
        raise NotImplementedError

    def build_form(self) -> FormSubmission:
        raise NotImplementedError

    @property
    def state(self) -> PageState:
        return self.form.state

    def open(self) -> PageState:
        return self.form.prepare()

    def select(self, stage: str, value: Optional[Any]):
        return self.cascade.select(stage, value)

    def _sync_listing(self):
        scope = self.cascade.value(self.list_stage)
        if scope != self.listing.scope:
            self.listing.load(scope)

    def selection_values(self) -> Dict[str, Any]:
        return {}

    def submit(self, **values) -> bool:
        return self.form.submit({**self.selection_values(), **values})


class CourseAssignmentPage(CascadePage):
    def build_listing(self) -> EntityFetcher:
        return list_fetcher(
            self.panel.course_assignments.get_by_section, name="asignaciones"
        )

    def build_form(self) -> FormSubmission:
        return FormSubmission(
            CourseAssignmentCreate,
            self.panel.course_assignments.create,
            notifier=self.notifier,
            invalidates=[self.listing],
            dependencies=[self.cascade.load_root],
            success_message="Curso asignado correctamente",
            error_fallback="No se pudo asignar el curso",
        )

    def selection_values(self) -> Dict[str, Any]:
        selection = self.cascade.selection
        return {
            "sectionId": selection.section_id,
            "courseId": selection.course_id,
            "teacherId": selection.teacher_id,
        }


class SchedulePage(CascadePage):
    def __init__(self, panel: Panel, check_conflicts: bool = False, **kwargs):
        self.check_conflicts = check_conflicts
        super().__init__(panel, **kwargs)

    def build_listing(self) -> EntityFetcher:
        return list_fetcher(self.panel.schedules.get_by_section, name="horarios")

    def _create(self, schedule: ScheduleCreate):
        if self.check_conflicts:
            conflicts = self.panel.schedules.check_conflicts(schedule)
            if conflicts:
                first = conflicts[0]
                raise ValidationFailed(
                    {
                        "startTime": [
                            f"Choca con otro horario el {DAY_NAMES[first.day_of_week]} "
                            f"de {first.time_range}"
                        ]
                    },
                    message="El horario se cruza con otro existente",
                )
        return self.panel.schedules.create(schedule)

    def build_form(self) -> FormSubmission:
        return FormSubmission(
            ScheduleCreate,
            self._create,
            notifier=self.notifier,
            invalidates=[self.listing],
            dependencies=[self.cascade.load_root],
            success_message="Horario creado correctamente",
            error_fallback="No se pudo crear el horario",
        )

    def selection_values(self) -> Dict[str, Any]:
        selection = self.cascade.selection
        return {
            "sectionId": selection.section_id,
            "courseId": selection.course_id,
            "teacherId": selection.teacher_id,
        }


class EnrollmentPage(CascadePage):
    stages = ("cycle", "grade", "section")

    def build_listing(self) -> EntityFetcher:
        return list_fetcher(self.panel.enrollments.get_by_section, name="inscripciones")

    def build_form(self) -> FormSubmission:
        return FormSubmission(
            EnrollmentCreate,
            self.panel.enrollments.create,
            notifier=self.notifier,
            invalidates=[self.listing],
            dependencies=[self.cascade.load_root],
            success_message="Estudiante inscrito correctamente",
            error_fallback="No se pudo inscribir al estudiante",
            reset_on_success=True,
        )

    def selection_values(self) -> Dict[str, Any]:
        selection = self.cascade.selection
        return {
            "cycleId": selection.cycle_id,
            "gradeId": selection.grade_id,
            "sectionId": selection.section_id,
        }


class AttendancePage(CascadePage):
    """Toma de asistencia de una sección en una fecha"""

    stages = ("cycle", "grade", "section")

    def __init__(self, panel: Panel, day: Optional[date] = None, **kwargs):
        self.day = day or date.today()
        self.statuses = EntityFetcher(
            panel.attendance.get_statuses,
            name="estados de asistencia",
            requires_scope=False,
            empty_factory=list,
        )
        super().__init__(panel, **kwargs)

    def build_listing(self) -> EntityFetcher:
        return list_fetcher(
            lambda section_id, day: self.panel.attendance.get_by_section(section_id, day),
            name="asistencia",
        )

    def _sync_listing(self):
        scope = self.cascade.value(self.list_stage)
        if scope != self.listing.scope:
            self.listing.load(scope, day=self.day)

    def _register(self, bulk: BulkAttendanceCreate):
        """Sin bimestre activo no hay calendario de asuetos que consultar"""
        cycle_id = self.cascade.value("cycle")
        bimester = self.panel.bimesters.get_active(cycle_id) if cycle_id else None
        if bimester is not None:
            holiday = self.panel.holidays.find_by_date(bimester.id, bulk.attendance_date)
            if holiday is not None:
                raise ValidationFailed(
                    {"date": [f"{bulk.attendance_date.isoformat()} es asueto: {holiday.name}"]},
                    message="No se puede tomar asistencia en un día de asueto",
                )
        return self.panel.attendance.register_bulk(bulk)

    def build_form(self) -> FormSubmission:
        return FormSubmission(
            BulkAttendanceCreate,
            self._register,
            notifier=self.notifier,
            invalidates=[self.listing],
            dependencies=[self.cascade.load_root, self.statuses.load],
            success_message="Asistencia registrada",
            error_fallback="No se pudo registrar la asistencia",
        )

    def selection_values(self) -> Dict[str, Any]:
        return {"sectionId": self.cascade.value("section"), "date": self.day.isoformat()}

    def submit_records(self, records: List[Dict[str, Any]]) -> bool:
        return self.submit(records=records)


class CotejoPage(CascadePage):
    """Consolidado de notas por sección, curso y bimestre"""

    stages = ("cycle", "grade", "section", "course")
    list_stage = "course"

    def __init__(self, panel: Panel, **kwargs):
        self.bimesters = list_fetcher(panel.bimesters.get_by_cycle, name="bimestres")
        self.bimester_id: Optional[int] = None
        super().__init__(panel, **kwargs)

    def build_listing(self) -> EntityFetcher:
        return list_fetcher(
            lambda scope: self.panel.cotejos.get_by_section(*scope), name="cotejos"
        )

    def _cotejo_scope(self) -> Optional[Tuple[int, int, int]]:
        selection = self.cascade.selection
        if selection.section_id and selection.course_id and self.bimester_id:
            return (selection.section_id, selection.course_id, self.bimester_id)
        return None

    def _sync_listing(self):
        cycle_id = self.cascade.value("cycle")
        if cycle_id != self.bimesters.scope:
            self.bimester_id = None
            self.bimesters.load(cycle_id)
        scope = self._cotejo_scope()
        if scope != self.listing.scope:
            self.listing.load(scope)

    def select_bimester(self, bimester_id: Optional[int]):
        if bimester_id == self.bimester_id:
            return
        self.bimester_id = bimester_id
        self._sync_listing()

    def build_form(self) -> FormSubmission:
        return FormSubmission(
            BulkCotejoGenerate,
            self._generate_all,
            notifier=self.notifier,
            invalidates=[self.listing],
            dependencies=[self.cascade.load_root],
            success_message="Cotejos generados",
            error_fallback="No se pudieron generar los cotejos",
        )

    def _generate_all(self, request: BulkCotejoGenerate):
        return [
            self.panel.cotejos.generate(
                {
                    "enrollmentId": enrollment_id,
                    "courseId": request.course_id,
                    "bimesterId": request.bimester_id,
                }
            )
            for enrollment_id in request.enrollment_ids
        ]

    def selection_values(self) -> Dict[str, Any]:
        return {"courseId": self.cascade.value("course"), "bimesterId": self.bimester_id}
