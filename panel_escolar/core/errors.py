from enum import Enum
from typing import Dict, List, Optional

from pydantic import ValidationError


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NETWORK = "network"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


GENERIC_ERROR_MESSAGE = "Ocurrió un error inesperado"


class PanelError(Exception):
    """Error base del panel"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(PanelError):
    """Error devuelto por el backend o durante la llamada HTTP"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or []


class NetworkError(ApiError):
    pass


class PermissionDeniedError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ContextNotProvidedError(PanelError):
    pass


def _wire_name(name: str) -> str:
    if "_" not in name:
        return name
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)


class ValidationFailed(PanelError):
    """Errores de validación por campo, detectados antes de llamar al backend"""

    def __init__(self, field_errors: Dict[str, List[str]], message: Optional[str] = None):
        super().__init__(message or "Revisa los campos del formulario")
        self.field_errors = field_errors

    @classmethod
    def from_pydantic(cls, error: ValidationError) -> "ValidationFailed":
        field_errors: Dict[str, List[str]] = {}
        for item in error.errors():
            loc = [str(part) for part in item.get("loc", ()) if not isinstance(part, int)]
            key = _wire_name(loc[0]) if loc else "__root__"
            msg = item.get("msg", "Valor inválido")
            # pydantic antepone "Value error, " a los ValueError propios
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            field_errors.setdefault(key, []).append(msg)
        return cls(field_errors)


def classify_error(exc: BaseException) -> ErrorKind:
    if isinstance(exc, (ValidationFailed, ValidationError)):
        return ErrorKind.VALIDATION
    if isinstance(exc, PermissionDeniedError):
        return ErrorKind.FORBIDDEN
    if isinstance(exc, NotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, ApiError):
        return ErrorKind.NETWORK
    return ErrorKind.UNKNOWN


def error_message(exc: BaseException, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """Mensaje visible para el usuario; los errores desconocidos usan el fallback"""
    if isinstance(exc, PanelError) and exc.message:
        return exc.message
    if isinstance(exc, ValidationError):
        return ValidationFailed.from_pydantic(exc).message
    return fallback
