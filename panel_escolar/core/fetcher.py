"""
Estado de carga de una entidad (datos, cargando, error).

Cada EntityFetcher envuelve una función de carga. Las cargas pueden
solaparse (p. ej. el usuario cambia de grado antes de que lleguen las
secciones del grado anterior): cada carga recibe un número de generación y
solo la más reciente puede escribir el estado. Los errores se guardan como
texto en el estado, nunca se propagan al llamador.
"""

import atexit
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from panel_escolar.config.settings import settings
from panel_escolar.core.errors import ErrorKind, classify_error, error_message
from panel_escolar.core.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def get_fetch_executor() -> ThreadPoolExecutor:
    """Pool compartido para las cargas en segundo plano"""
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=settings.max_fetch_workers, thread_name_prefix="FetchWorker"
            )
        return _executor


def shutdown_fetch_executor():
    global _executor
    with _executor_lock:
        if _executor is not None:
            _executor.shutdown(wait=False)
            _executor = None


atexit.register(shutdown_fetch_executor)


@dataclass(frozen=True)
class FetchState(Generic[T]):
    data: Optional[T] = None
    is_loading: bool = False
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    scope: Any = None

    @property
    def forbidden(self) -> bool:
        return self.error_kind == ErrorKind.FORBIDDEN


class EntityFetcher(Generic[T]):
    def __init__(
        self,
        loader: Callable[..., T],
        name: str = "entidad",
        requires_scope: bool = True,
        empty_factory: Callable[[], Any] = lambda: None,
        fallback_message: Optional[str] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.loader = loader
        self.name = name
        self.requires_scope = requires_scope
        self.empty_factory = empty_factory
        self.fallback_message = fallback_message or f"Error al cargar {name}"
        self.executor = executor

        self._lock = threading.Lock()
        self._notify_lock = threading.RLock()
        self._generation = 0
        self._kwargs: Dict[str, Any] = {}
        self._state: FetchState = FetchState(data=empty_factory())
        self._subscribers: List[Callable[[FetchState], None]] = []

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def data(self):
        return self._state.data

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def scope(self):
        return self._state.scope

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, callback: Callable[[FetchState], None]) -> Callable[[], None]:
        """Registrar un observador; devuelve la función para darlo de baja"""
        self._subscribers.append(callback)
        return lambda: self._subscribers.remove(callback)

    def _notify(self, generation: int):
        """Entregar el estado vigente, en orden; una generación superada no notifica"""
        with self._notify_lock:
            with self._lock:
                if generation != self._generation:
                    return
                state = self._state
            self._deliver(state)

    def _deliver(self, state: FetchState):
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception(f"Error en observador de {self.name}")

    # ------------------------------------------------------------------
    # Carga
    # ------------------------------------------------------------------

    def _begin(self, scope, kwargs) -> Optional[int]:
        """Abrir una nueva generación; None si el scope vacío evita la llamada"""
        with self._lock:
            self._generation += 1
            generation = current = self._generation
            self._kwargs = kwargs
            if self.requires_scope and not scope:
                self._state = FetchState(data=self.empty_factory(), scope=scope)
                generation = None
            else:
                self._state = replace(
                    self._state, is_loading=True, error=None, error_kind=None, scope=scope
                )
        self._notify(current)
        return generation

    def _run(self, generation: int, scope, kwargs) -> FetchState:
        args = (scope,) if scope is not None else ()
        try:
            data = self.loader(*args, **kwargs)
        except Exception as e:
            kind = classify_error(e)
            message = error_message(e, self.fallback_message)
            if kind == ErrorKind.UNKNOWN:
                logger.exception(f"Error inesperado cargando {self.name}")
            else:
                logger.warning(f"Error cargando {self.name} ({scope}): {message}")
            new_state = FetchState(
                data=self.empty_factory(), error=message, error_kind=kind, scope=scope
            )
        else:
            new_state = FetchState(data=data, scope=scope)

        with self._lock:
            if generation != self._generation:
                logger.debug(
                    f"Respuesta descartada de {self.name} ({scope}): "
                    f"generación {generation} != {self._generation}"
                )
                return self._state
            self._state = new_state
        self._notify(generation)
        return new_state

    def load(self, scope=None, **kwargs) -> FetchState:
        """Cargar de forma síncrona y devolver el estado resultante"""
        generation = self._begin(scope, kwargs)
        if generation is None:
            return self._state
        return self._run(generation, scope, kwargs)

    def load_in_background(self, scope=None, **kwargs) -> Future:
        """Cargar en el pool; el Future resuelve al estado que dejó esta carga"""
        generation = self._begin(scope, kwargs)
        if generation is None:
            done: Future = Future()
            done.set_result(self._state)
            return done
        executor = self.executor or get_fetch_executor()
        return executor.submit(self._run, generation, scope, kwargs)

    def refresh(self) -> FetchState:
        return self.load(self._state.scope, **self._kwargs)

    def reset(self):
        """Vaciar los datos e invalidar cualquier carga en curso"""
        with self._lock:
            self._generation += 1
            self._kwargs = {}
            self._state = FetchState(data=self.empty_factory())
            current = self._generation
        self._notify(current)


def list_fetcher(loader: Callable[..., List[Any]], name: str, **options) -> EntityFetcher:
    """Fetcher de listados: el valor vacío es []"""
    return EntityFetcher(loader, name=name, empty_factory=list, **options)
