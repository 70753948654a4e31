from unittest.mock import MagicMock

from panel_escolar.main import Panel, create_panel

SNAPSHOT = {
    "cycle": {"id": 1, "name": "2025"},
    "activeBimester": {"id": 3, "number": 1},
    "grades": [{"id": 7, "name": "7mo Grado"}, {"id": 8, "name": "8vo Grado"}],
    "gradesSections": {
        "7": [
            {
                "id": 71,
                "name": "A",
                "gradeId": 7,
                "courseAssignments": [
                    {
                        "id": 1,
                        "course": {"id": 3, "name": "Matemática"},
                        "teacher": {"id": 9, "givenNames": "Ana", "lastNames": "López"},
                    },
                    {"id": 2, "course": {"id": 4, "name": "Inglés"}},
                ],
            }
        ],
        "8": [],
    },
}


def test_create_panel(test_settings):
    session = MagicMock()
    panel = create_panel(settings=test_settings, session=session)

    assert isinstance(panel, Panel)
    assert panel.sections.client is panel.client
    assert panel.client.session is session
    session.headers.update.assert_called_once()

    panel.close()
    session.close.assert_called_once_with()


def test_cascada_desde_snapshot(panel, backend):
    backend.ok("GET", "/api/assignments/cascade", data=SNAPSHOT)

    cascade = panel.build_cascade(from_snapshot=True, auto_select_single=True)
    calls = len(backend.calls)
    cascade.load_root()

    # un solo ciclo: se elige solo
    assert cascade.value("cycle") == 1
    assert [g.id for g in cascade.options("grade")] == [7, 8]
    cascade.set_grade(7)
    assert cascade.value("section") == 71
    assert [c.id for c in cascade.options("course")] == [3, 4]
    cascade.set_course(3)
    assert cascade.value("teacher") == 9
    assert cascade.stage("teacher").options[0].full_name == "Ana López"
    # todo se resolvió en memoria
    assert len(backend.calls) == calls
