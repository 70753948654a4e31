import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

from panel_escolar.core.errors import ApiError, ErrorKind, PermissionDeniedError
from panel_escolar.core.fetcher import EntityFetcher, FetchState, list_fetcher


def test_scope_vacio_no_llama_al_loader():
    loader = MagicMock(return_value=["A"])
    fetcher = list_fetcher(loader, name="secciones")

    for scope in (None, 0, ""):
        state = fetcher.load(scope)
        assert state.data == []
        assert state.is_loading is False
        assert state.error is None

    loader.assert_not_called()


def test_carga_exitosa():
    loader = MagicMock(return_value=["A", "B"])
    fetcher = list_fetcher(loader, name="secciones")

    state = fetcher.load(7)

    loader.assert_called_once_with(7)
    assert state.data == ["A", "B"]
    assert state.scope == 7
    assert fetcher.is_loading is False


def test_error_queda_en_el_estado():
    """El mensaje del backend queda como texto; el llamador no recibe la excepción"""
    fetcher = list_fetcher(MagicMock(side_effect=ApiError("X")), name="secciones")

    state = fetcher.load(7)

    assert state.error == "X"
    assert state.error_kind == ErrorKind.NETWORK
    assert state.data == []


def test_error_desconocido_usa_mensaje_generico():
    fetcher = list_fetcher(MagicMock(side_effect=KeyError("id")), name="secciones")
    assert fetcher.load(7).error == "Error al cargar secciones"


def test_forbidden():
    fetcher = EntityFetcher(
        MagicMock(side_effect=PermissionDeniedError("Sin acceso", 403)), name="cotejo"
    )
    state = fetcher.load(1)
    assert state.forbidden is True
    assert state.error == "Sin acceso"


def test_sin_scope_requerido_llama_sin_argumentos():
    loader = MagicMock(return_value=[1])
    fetcher = EntityFetcher(loader, name="ciclos", requires_scope=False, empty_factory=list)
    assert fetcher.load().data == [1]
    loader.assert_called_once_with()


def test_respuesta_obsoleta_se_descarta():
    """A se pide primero y llega después de B: el estado final es B"""
    release_a = threading.Event()

    def loader(grade_id):
        if grade_id == 1:
            release_a.wait(timeout=5)
            return ["secciones de A"]
        return ["secciones de B"]

    with ThreadPoolExecutor(max_workers=2) as executor:
        fetcher = list_fetcher(loader, name="secciones", executor=executor)
        future_a = fetcher.load_in_background(1)
        future_b = fetcher.load_in_background(2)

        assert future_b.result(timeout=5).data == ["secciones de B"]
        release_a.set()
        future_a.result(timeout=5)

    assert fetcher.data == ["secciones de B"]
    assert fetcher.scope == 2
    assert fetcher.is_loading is False


def test_reset_invalida_la_carga_en_curso():
    release = threading.Event()

    def loader(grade_id):
        release.wait(timeout=5)
        return ["tarde"]

    with ThreadPoolExecutor(max_workers=1) as executor:
        fetcher = list_fetcher(loader, name="secciones", executor=executor)
        future = fetcher.load_in_background(1)
        fetcher.reset()
        release.set()
        future.result(timeout=5)

    assert fetcher.data == []
    assert fetcher.scope is None


def test_load_in_background_sin_scope_resuelve_inmediatamente():
    loader = MagicMock()
    fetcher = list_fetcher(loader, name="secciones", executor=MagicMock())
    future = fetcher.load_in_background(None)
    assert future.done()
    assert future.result().data == []
    loader.assert_not_called()


def test_refresh_repite_scope_y_argumentos():
    loader = MagicMock(return_value=[])
    fetcher = list_fetcher(loader, name="asistencia")
    fetcher.load(5, day="2025-03-01")
    fetcher.refresh()
    assert loader.call_count == 2
    loader.assert_called_with(5, day="2025-03-01")


def test_observadores():
    fetcher = list_fetcher(MagicMock(return_value=["A"]), name="secciones")
    seen = []
    unsubscribe = fetcher.subscribe(seen.append)

    fetcher.load(3)
    assert [s.is_loading for s in seen] == [True, False]
    assert all(isinstance(s, FetchState) for s in seen)

    unsubscribe()
    fetcher.load(4)
    assert len(seen) == 2


def test_notificaciones_en_orden():
    """Una entrega lenta de A no puede llegar al observador después del estado de B"""
    delivering = threading.Event()
    release = threading.Event()
    seen = []

    def observer(state):
        if state.scope == 1 and not state.is_loading:
            delivering.set()
            release.wait(timeout=5)
        seen.append(state)

    with ThreadPoolExecutor(max_workers=1) as executor:
        fetcher = list_fetcher(MagicMock(return_value=["A"]), name="secciones", executor=executor)
        fetcher.subscribe(observer)
        future = fetcher.load_in_background(1)
        assert delivering.wait(timeout=5)

        other = threading.Thread(target=fetcher.load, args=(None,))
        other.start()
        for _ in range(500):
            if fetcher.generation == 2:
                break
            time.sleep(0.01)
        release.set()
        other.join(timeout=5)
        future.result(timeout=5)

    assert seen[-1] == fetcher.state
    assert seen[-1].scope is None
    assert seen[-1].data == []


def test_generacion_superada_no_notifica():
    fetcher = list_fetcher(MagicMock(return_value=["A"]), name="secciones")
    seen = []
    fetcher.subscribe(seen.append)

    fetcher.load(3)
    fetcher._notify(fetcher.generation - 1)

    assert len(seen) == 2
