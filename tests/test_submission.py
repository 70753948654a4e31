from datetime import time
from unittest.mock import MagicMock

from panel_escolar.core.errors import ErrorKind, NetworkError, ValidationFailed
from panel_escolar.core.fetcher import list_fetcher
from panel_escolar.core.notifications import NotificationLevel, Notifier
from panel_escolar.core.submission import FormSubmission, PageState
from panel_escolar.schemas.schedule import ScheduleCreate

VALID = {
    "sectionId": 71,
    "courseId": 3,
    "teacherId": 9,
    "dayOfWeek": 1,
    "startTime": "08:00",
    "endTime": "09:00",
}


def make_form(action, **kwargs):
    return FormSubmission(ScheduleCreate, action, notifier=Notifier(), **kwargs)


def test_validacion_antes_de_enviar():
    """09:00 a 08:00: error en endTime y ninguna llamada"""
    action = MagicMock()
    form = make_form(action)

    ok = form.submit({**VALID, "startTime": "09:00", "endTime": "08:00"})

    assert ok is False
    action.assert_not_called()
    assert form.field_errors == {
        "endTime": ["La hora de fin debe ser posterior a la hora de inicio"]
    }
    assert form.state == PageState.READY
    assert form.error_kind == ErrorKind.VALIDATION


def test_fallo_de_red_conserva_los_valores():
    action = MagicMock(side_effect=NetworkError("Error de conexión con el servidor"))
    form = make_form(action)

    assert form.submit(dict(VALID)) is False

    assert form.state == PageState.ERROR
    assert form.error == "Error de conexión con el servidor"
    assert form.error_kind == ErrorKind.NETWORK
    assert form.values == VALID

    [notification] = form.notifier.active
    assert notification.level == NotificationLevel.ERROR
    assert notification.message == "Error de conexión con el servidor"
    assert form.notifier.dismiss(notification.id) is True
    assert form.notifier.active == []
    assert form.notifier.dismiss(notification.id) is False


def test_error_del_backend_por_campo():
    action = MagicMock(side_effect=ValidationFailed({"startTime": ["Choca con otro horario"]}))
    form = make_form(action)

    form.submit(dict(VALID))

    assert form.field_errors == {"startTime": ["Choca con otro horario"]}
    assert form.error_kind == ErrorKind.VALIDATION


def test_error_inesperado_usa_mensaje_del_formulario():
    form = make_form(MagicMock(side_effect=KeyError("id")), error_fallback="No se pudo crear el horario")
    form.submit(dict(VALID))
    assert form.error == "No se pudo crear el horario"


def test_exito_recarga_listados_dependientes():
    loader = MagicMock(return_value=[])
    listing = list_fetcher(loader, name="horarios")
    listing.load(71)
    on_success = MagicMock()
    action = MagicMock(return_value="creado")
    form = make_form(
        action,
        invalidates=[listing],
        success_message="Horario creado correctamente",
        on_success=on_success,
    )

    assert form.submit(dict(VALID)) is True

    model = action.call_args.args[0]
    assert isinstance(model, ScheduleCreate)
    assert model.start_time == time(8, 0)
    assert model.to_payload()["startTime"] == "08:00"
    assert loader.call_count == 2
    loader.assert_called_with(71)
    assert form.state == PageState.SUCCESS
    assert form.notifier.active[0].message == "Horario creado correctamente"
    on_success.assert_called_once_with("creado")


def test_reset_tras_exito():
    form = make_form(MagicMock(), reset_on_success=True)
    form.submit(dict(VALID))
    assert form.values == {}


def test_prepare_y_update():
    dependency = MagicMock()
    form = make_form(MagicMock(), dependencies=[dependency])

    assert form.prepare() == PageState.READY
    dependency.assert_called_once_with()

    form.submit({"startTime": "09:00", "endTime": "08:00"})
    assert "endTime" in form.field_errors
    form.update(endTime="10:00")
    assert "endTime" not in form.field_errors


def test_no_se_envia_dos_veces():
    form = make_form(MagicMock())
    form.state = PageState.SUBMITTING
    assert form.submit(dict(VALID)) is False
    form.action.assert_not_called()
