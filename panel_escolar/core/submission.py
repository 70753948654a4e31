"""
Flujo de envío de formularios.

    IDLE -> LOADING (opciones) -> READY -> SUBMITTING -> SUCCESS | ERROR

La validación ocurre antes de cualquier llamada al backend. Si el backend
falla, el formulario conserva sus valores y el error queda en el estado y
en un aviso descartable. Tras un envío exitoso se recargan los listados
que dependen del recurso modificado.
"""

from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from panel_escolar.core.errors import (
    ErrorKind,
    ValidationFailed,
    classify_error,
    error_message,
)
from panel_escolar.core.fetcher import EntityFetcher
from panel_escolar.core.logger import get_logger
from panel_escolar.core.notifications import Notifier

logger = get_logger(__name__)

SchemaType = TypeVar("SchemaType", bound=BaseModel)


class PageState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class FormSubmission(Generic[SchemaType]):
    def __init__(
        self,
        schema: Type[SchemaType],
        action: Callable[[SchemaType], Any],
        notifier: Optional[Notifier] = None,
        invalidates: Iterable[EntityFetcher] = (),
        dependencies: Iterable[Callable[[], Any]] = (),
        success_message: str = "Guardado correctamente",
        error_fallback: str = "No se pudo guardar",
        reset_on_success: bool = False,
        on_success: Optional[Callable[[Any], None]] = None,
        initial_values: Optional[Dict[str, Any]] = None,
    ):
        self.schema = schema
        self.action = action
        self.notifier = notifier or Notifier()
        self.invalidates: List[EntityFetcher] = list(invalidates)
        self.dependencies = list(dependencies)
        self.success_message = success_message
        self.error_fallback = error_fallback
        self.reset_on_success = reset_on_success
        self.on_success = on_success

        self.state = PageState.IDLE
        self.values: Dict[str, Any] = dict(initial_values or {})
        self.field_errors: Dict[str, List[str]] = {}
        self.error: Optional[str] = None
        self.error_kind: Optional[ErrorKind] = None
        self.result: Any = None

    @property
    def is_submitting(self) -> bool:
        return self.state == PageState.SUBMITTING

    def prepare(self) -> PageState:
        """Cargar las opciones que necesita el formulario"""
        self.state = PageState.LOADING
        for load in self.dependencies:
            load()
        self.state = PageState.READY
        return self.state

    def update(self, **values) -> None:
        self.values.update(values)
        for key in values:
            self.field_errors.pop(key, None)
        if self.state in (PageState.IDLE, PageState.ERROR, PageState.SUCCESS):
            self.state = PageState.READY

    def validate(self) -> Optional[SchemaType]:
        try:
            model = self.schema.model_validate(self.values)
        except ValidationError as e:
            self.field_errors = ValidationFailed.from_pydantic(e).field_errors
            return None
        self.field_errors = {}
        return model

    def submit(self, values: Optional[Dict[str, Any]] = None) -> bool:
        if self.is_submitting:
            logger.warning("Envío ignorado: ya hay uno en curso")
            return False
        if values:
            self.values.update(values)

        self.error = None
        self.error_kind = None
        model = self.validate()
        if model is None:
            self.state = PageState.READY
            self.error_kind = ErrorKind.VALIDATION
            return False

        self.state = PageState.SUBMITTING
        try:
            result = self.action(model)
        except Exception as e:
            self.error_kind = classify_error(e)
            self.error = error_message(e, self.error_fallback)
            if isinstance(e, ValidationFailed):
                self.field_errors = e.field_errors
            if self.error_kind == ErrorKind.UNKNOWN:
                logger.exception("Error inesperado al enviar el formulario")
            else:
                logger.warning(f"Envío rechazado: {self.error}")
            self.notifier.error(self.error)
            self.state = PageState.ERROR
            return False

        self.result = result
        self.notifier.success(self.success_message)
        for fetcher in self.invalidates:
            fetcher.refresh()
        if self.reset_on_success:
            self.values = {}
        self.state = PageState.SUCCESS
        if self.on_success is not None:
            self.on_success(result)
        return True
