from datetime import date

import pytest

from panel_escolar.core.notifications import NotificationLevel
from panel_escolar.core.submission import PageState
from panel_escolar.pages import (
    AttendancePage,
    CotejoPage,
    CourseAssignmentPage,
    EnrollmentPage,
    SchedulePage,
)

CYCLES = [
    {"id": 1, "name": "2025", "startDate": "2025-01-10", "endDate": "2025-10-30", "isActive": True},
    {"id": 2, "name": "2024", "startDate": "2024-01-10", "endDate": "2024-10-30", "isClosed": True},
]
GRADES = [{"id": 7, "name": "7mo Grado", "level": "Básico", "order": 7}]
SECTIONS = [
    {"id": 71, "name": "A", "capacity": 30, "gradeId": 7},
    {"id": 81, "name": "A", "capacity": 30, "gradeId": 8},
]
ASSIGNMENTS = [
    {
        "id": 500,
        "sectionId": 71,
        "courseId": 3,
        "teacherId": 9,
        "course": {"id": 3, "code": "MAT", "name": "Matemática"},
    }
]
TEACHERS = [{"id": 9, "givenNames": "Ana", "lastNames": "López"}]
BIMESTERS = [
    {
        "id": 3,
        "cycleId": 1,
        "number": 1,
        "startDate": "2025-01-10",
        "endDate": "2025-03-10",
        "isActive": True,
    }
]


@pytest.fixture
def school(backend):
    backend.ok("GET", "/api/school-cycles", data=CYCLES)
    backend.ok("GET", "/api/grade-cycles/cycle/1/grades", data=GRADES)
    backend.ok("GET", "/api/sections", data=SECTIONS)
    backend.ok("GET", "/api/course-assignments/section/71", data=ASSIGNMENTS)
    backend.ok("GET", "/api/users/teachers", data=TEACHERS)
    return backend


def test_asignar_curso(panel, school):
    page = CourseAssignmentPage(panel)
    assert page.open() == PageState.READY
    assert [c.id for c in page.cascade.options("cycle")] == [1]

    page.select("cycle", 1)
    page.select("grade", 7)
    assert [s.id for s in page.cascade.options("section")] == [71]
    page.select("section", 71)
    assert [a.id for a in page.listing.data] == [500]
    page.select("course", 3)
    page.select("teacher", 9)

    school.on_call(
        "POST",
        "/api/course-assignments",
        lambda params, json: (201, {"success": True, "data": {"id": 501, **json}}),
    )
    listing_calls = len(school.calls_to("GET", "/api/course-assignments/section/71"))

    assert page.submit() is True

    [post] = school.calls_to("POST", "/api/course-assignments")
    assert post["json"]["sectionId"] == 71
    assert post["json"]["courseId"] == 3
    assert post["json"]["teacherId"] == 9
    assert len(school.calls_to("GET", "/api/course-assignments/section/71")) == listing_calls + 1
    assert page.form.result.id == 501
    assert page.notifier.active[0].level == NotificationLevel.SUCCESS


def test_cambiar_ciclo_vacia_el_listado(panel, school):
    page = CourseAssignmentPage(panel)
    page.open()
    page.select("cycle", 1)
    page.select("grade", 7)
    page.select("section", 71)

    page.select("cycle", None)

    assert page.listing.data == []
    assert page.cascade.selection.section_id is None


def test_horario_invalido_no_llega_al_backend(panel, backend):
    page = SchedulePage(panel)

    ok = page.submit(sectionId=71, courseId=3, dayOfWeek=1, startTime="09:00", endTime="08:00")

    assert ok is False
    assert "endTime" in page.form.field_errors
    assert backend.calls_to("POST", "/api/schedules") == []


def test_horario_con_choque(panel, backend):
    backend.ok(
        "GET",
        "/api/schedules/section/71",
        data=[
            {
                "id": 40,
                "sectionId": 71,
                "courseId": 4,
                "dayOfWeek": 1,
                "startTime": "08:00",
                "endTime": "09:00",
            }
        ],
    )
    page = SchedulePage(panel, check_conflicts=True)

    ok = page.submit(sectionId=71, courseId=3, dayOfWeek=1, startTime="08:30", endTime="09:15")

    assert ok is False
    assert page.form.field_errors["startTime"] == ["Choca con otro horario el Lunes de 08:00 a 09:00"]
    assert backend.calls_to("POST", "/api/schedules") == []


def test_listado_sin_permiso(panel, school):
    school.on(
        "GET",
        "/api/course-assignments/section/71",
        {"success": False, "message": "No tienes acceso a esta sección"},
        status=403,
    )
    page = CourseAssignmentPage(panel)
    page.open()
    page.select("cycle", 1)
    page.select("grade", 7)
    page.select("section", 71)

    assert page.listing.state.forbidden is True
    assert page.listing.error == "No tienes acceso a esta sección"


def test_tomar_asistencia(panel, school):
    school.ok("GET", "/api/attendance-statuses/active", data=[{"id": 1, "code": "P", "name": "Presente"}])
    school.ok("GET", "/api/attendance/section/71", data=[])
    school.ok("GET", "/api/bimesters/cycle/1", data=BIMESTERS)
    school.ok("POST", "/api/attendance/bulk", data=[])
    page = AttendancePage(panel, day=date(2025, 3, 3))

    page.open()
    assert [s.code for s in page.statuses.data] == ["P"]
    page.select("cycle", 1)
    page.select("grade", 7)
    page.select("section", 71)
    assert school.calls_to("GET", "/api/attendance/section/71")[0]["params"] == {"date": "2025-03-03"}

    assert page.submit_records([{"enrollmentId": 10, "attendanceStatusId": 1}]) is True

    [post] = school.calls_to("POST", "/api/attendance/bulk")
    assert post["json"]["sectionId"] == 71
    assert post["json"]["date"] == "2025-03-03"


def test_inscribir_limpia_el_formulario(panel, school):
    school.on_call(
        "POST",
        "/api/enrollments",
        lambda params, json: (201, {"success": True, "data": {"id": 900, **json}}),
    )
    school.ok("GET", "/api/enrollments", data=[])
    page = EnrollmentPage(panel)
    page.open()
    page.select("cycle", 1)
    page.select("grade", 7)
    page.select("section", 71)

    assert page.submit(studentId=15) is True

    [post] = school.calls_to("POST", "/api/enrollments")
    assert post["json"]["cycleId"] == 1
    assert post["json"]["gradeId"] == 7
    assert post["json"]["status"] == "ACTIVE"
    assert page.form.values == {}
    assert school.calls_to("GET", "/api/enrollments")[-1]["params"] == {"sectionId": 71}


def test_cotejos_por_bimestre(panel, school):
    school.ok(
        "GET",
        "/api/bimesters/cycle/1",
        data=[
            {"id": 4, "cycleId": 1, "number": 2, "startDate": "2025-03-11", "endDate": "2025-05-10"},
            {"id": 3, "cycleId": 1, "number": 1, "startDate": "2025-01-10", "endDate": "2025-03-10"},
        ],
    )
    school.ok("GET", "/api/cotejos/section/71", data=[])
    school.on_call(
        "POST",
        "/api/cotejos/generate",
        lambda params, json: (201, {"success": True, "data": {"id": json["enrollmentId"], **json}}),
    )
    page = CotejoPage(panel)
    page.open()
    page.select("cycle", 1)
    assert [b.number for b in page.bimesters.data] == [1, 2]
    page.select("grade", 7)
    page.select("section", 71)
    page.select("course", 3)
    # sin bimestre no hay listado
    assert school.calls_to("GET", "/api/cotejos/section/71") == []

    page.select_bimester(3)

    [listing] = school.calls_to("GET", "/api/cotejos/section/71")
    assert listing["params"] == {"courseId": 3, "bimesterId": 3}

    assert page.submit(enrollmentIds=[10, 11]) is True
    assert [c.id for c in page.form.result] == [10, 11]
    assert len(school.calls_to("POST", "/api/cotejos/generate")) == 2

    page.select("cycle", None)
    assert page.bimester_id is None
    assert page.listing.data == []


def test_asistencia_en_asueto(panel, school):
    school.ok("GET", "/api/attendance-statuses/active", data=[{"id": 1, "code": "P", "name": "Presente"}])
    school.ok("GET", "/api/attendance/section/71", data=[])
    school.ok("GET", "/api/bimesters/cycle/1", data=BIMESTERS)
    school.ok(
        "GET",
        "/api/attendance/holiday/by-date",
        data={"id": 2, "bimesterId": 3, "date": "2025-03-03", "name": "Día del Maestro"},
    )
    page = AttendancePage(panel, day=date(2025, 3, 3))
    page.open()
    page.select("cycle", 1)
    page.select("grade", 7)
    page.select("section", 71)

    assert page.submit_records([{"enrollmentId": 10, "attendanceStatusId": 1}]) is False

    assert page.form.field_errors == {"date": ["2025-03-03 es asueto: Día del Maestro"]}
    [lookup] = school.calls_to("GET", "/api/attendance/holiday/by-date")
    assert lookup["params"] == {"bimesterId": 3, "date": "2025-03-03"}
    assert school.calls_to("POST", "/api/attendance/bulk") == []


def test_seleccion_automatica_carga_el_listado(panel, school):
    """Un solo ciclo abierto, un grado y una sección: el listado llega sin elegir nada"""
    school.ok(
        "GET",
        "/api/enrollments",
        data=[{"id": 900, "studentId": 15, "cycleId": 1, "gradeId": 7, "sectionId": 71}],
    )
    page = EnrollmentPage(panel, auto_select_single=True)

    page.open()

    assert page.cascade.selection.section_id == 71
    assert page.listing.scope == 71
    assert [e.id for e in page.listing.data] == [900]

    page.cascade.reset()

    assert page.listing.scope is None
    assert page.listing.data == []
