"""Root test configuration: isolated HOME/cwd and an in-memory fake of the content API"""

import json
from typing import Any, Optional

import httpx
import pytest
import structlog

from cmspub.core.transport import Transport


BASE_URL = "http://cms.test"


class FakeAPI:
    """Routes (method, path) to canned responses and records every request.

    Unrouted requests answer 404 with an API-style error body.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, body: Any = None, text: Optional[str] = None) -> None:
        self.routes[(method, path)] = (status, text if text is not None else body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": "Not found.", "error_code": "not_found"})
        status, body = self.routes[key]
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body if body is not None else {})

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]

    def count(self, method: str) -> int:
        return sum(1 for r in self.requests if r.method == method)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    def mock(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(name="api")
def api_fixture():
    return FakeAPI()


@pytest.fixture(name="transport")
def transport_fixture(api):
    with Transport(BASE_URL, token="test-token", transport=api.mock()) as t:
        yield t


@pytest.fixture(name="home", autouse=True)
def home_fixture(tmp_path, monkeypatch):
    """Point HOME and the working directory at a temp dir so profiles and config.yaml stay local."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for name in ("HUMAN", "LOG_LEVEL", "BASE_URL", "PRIMARY_LOCALE", "SECONDARY_LOCALE"):
        monkeypatch.delenv(f"CMSPUB_{name}", raising=False)
    return home


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop any structlog configuration bound to a previous test's captured stream."""
    yield
    structlog.reset_defaults()
