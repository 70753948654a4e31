"""
Cliente HTTP del backend escolar.

Todas las respuestas del backend usan el sobre {success, message, data}
(más meta en los listados paginados). Este módulo traduce cualquier fallo,
de red o del backend, a una excepción ApiError con un mensaje legible.
"""

from typing import Any, Dict, Optional

import requests

from panel_escolar.config.settings import Settings, settings as default_settings
from panel_escolar.core.errors import (
    ApiError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
)
from panel_escolar.core.logger import get_logger
from panel_escolar.schemas.common import ApiEnvelope

logger = get_logger(__name__)

CONNECTION_ERROR_MESSAGE = "Error de conexión con el servidor"
TIMEOUT_ERROR_MESSAGE = "El servidor tardó demasiado en responder"
INVALID_RESPONSE_MESSAGE = "Respuesta inválida del servidor"


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Quitar parámetros vacíos antes de armar la query"""
    if not params:
        return {}
    cleaned = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = value
    return cleaned


def _message_from_body(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, list):
        return "; ".join(str(m) for m in message if m)
    if message:
        return str(message)
    error = body.get("error")
    return str(error) if isinstance(error, str) and error else None


def _details_from_body(body: Any) -> list:
    if isinstance(body, dict) and isinstance(body.get("details"), list):
        return [str(d) for d in body["details"]]
    return []


class ApiClient:
    """Envoltura delgada sobre requests.Session (la sesión conserva las cookies)"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings or default_settings
        self.session = session or requests.Session()
        self.session.headers.update(
            {"Accept": "application/json", "Content-Type": "application/json"}
        )

    def url_for(self, path: str) -> str:
        return f"{self.settings.api_root}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> ApiEnvelope:
        url = self.url_for(path)
        if self.settings.debug:
            logger.info(f"{method} {url} params={clean_params(params)}")

        try:
            response = self.session.request(
                method,
                url,
                params=clean_params(params),
                json=json,
                timeout=self.settings.request_timeout,
                verify=self.settings.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"Timeout en {method} {url}: {e}")
            raise NetworkError(TIMEOUT_ERROR_MESSAGE)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Error de red en {method} {url}: {e}")
            raise NetworkError(CONNECTION_ERROR_MESSAGE)

        return self._parse_response(response)

    def _parse_response(self, response: requests.Response) -> ApiEnvelope:
        status = response.status_code
        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None

        if status >= 400:
            message = _message_from_body(body) or f"Error {status} en la solicitud"
            details = _details_from_body(body)
            if status in (401, 403):
                raise PermissionDeniedError(message, status, details)
            if status == 404:
                raise NotFoundError(message, status, details)
            raise ApiError(message, status, details)

        if not response.content or status == 204:
            return ApiEnvelope(success=True, data=None)

        if not isinstance(body, dict):
            raise ApiError(INVALID_RESPONSE_MESSAGE, status)

        envelope = ApiEnvelope(
            success=body.get("success", True),
            message=_message_from_body(body) or "",
            data=body.get("data"),
            meta=body.get("meta"),
        )
        if not envelope.success:
            raise ApiError(
                _message_from_body(body) or "La operación no se pudo completar",
                status,
                _details_from_body(body),
            )
        return envelope

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiEnvelope:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, params=None) -> ApiEnvelope:
        return self.request("POST", path, params=params, json=json)

    def put(self, path: str, json: Any = None, params=None) -> ApiEnvelope:
        return self.request("PUT", path, params=params, json=json)

    def patch(self, path: str, json: Any = None, params=None) -> ApiEnvelope:
        return self.request("PATCH", path, params=params, json=json)

    def delete(self, path: str, params=None) -> ApiEnvelope:
        return self.request("DELETE", path, params=params)

    def close(self):
        self.session.close()
