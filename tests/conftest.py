import json
from typing import Any, Callable, Dict, List, Tuple, Union
from unittest.mock import MagicMock

import pytest

from panel_escolar.config.settings import Settings
from panel_escolar.core.api_client import ApiClient
from panel_escolar.main import Panel

BASE_URL = "http://api.test"


def fake_response(status: int = 200, body: Any = None, raw: bytes = None):
    response = MagicMock()
    response.status_code = status
    if raw is not None:
        response.content = raw
        response.json.side_effect = ValueError("no es JSON")
    elif body is None:
        response.content = b""
        response.json.side_effect = ValueError("vacío")
    else:
        response.content = json.dumps(body).encode()
        response.json.return_value = body
    return response


Route = Union[Tuple[int, Any], Callable[..., Tuple[int, Any]]]


class FakeBackend:
    """Backend en memoria: rutas (método, path) -> (status, body)"""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.calls: List[Dict[str, Any]] = []
        self.session = MagicMock()
        self.session.request.side_effect = self.request

    def on(self, method: str, path: str, body: Any = None, status: int = 200):
        self.routes[(method, path)] = (status, body)

    def on_call(self, method: str, path: str, handler: Callable[..., Tuple[int, Any]]):
        self.routes[(method, path)] = handler

    def ok(self, method: str, path: str, data: Any = None, meta: Any = None):
        body = {"success": True, "message": "OK", "data": data}
        if meta is not None:
            body["meta"] = meta
        self.on(method, path, body)

    def request(self, method, url, params=None, json=None, timeout=None, verify=None):
        path = url[len(BASE_URL):]
        self.calls.append({"method": method, "path": path, "params": params, "json": json})
        route = self.routes.get((method, path))
        if route is None:
            return fake_response(404, {"success": False, "message": f"Ruta {path} no existe"})
        if callable(route):
            status, body = route(params=params, json=json)
        else:
            status, body = route
        return fake_response(status, body)

    def calls_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method and c["path"] == path]


@pytest.fixture
def test_settings():
    return Settings(api_base_url=BASE_URL + "/", request_timeout=5, default_page_size=10)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(backend, test_settings):
    return ApiClient(settings=test_settings, session=backend.session)


@pytest.fixture
def panel(client):
    return Panel(client)
