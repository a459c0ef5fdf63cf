from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

import hookgen.serve.gemini as gemini_mod
from hookgen.common.settings import Settings, get_settings
from hookgen.serve.fastapi_app import app

TEST_KEY = "test-key-123"


class _FakeResponse:
    def __init__(self, status_code: int, json_data: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._json = json_data
        self.text = text if text is not None else ("" if json_data is None else str(json_data))

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("no JSON body")
        return self._json


class FakeUpstream:
    """Stands in for httpx.Client and records every post."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.timeouts: list[Any] = []
        self.respond: Callable[[], _FakeResponse] = lambda: _FakeResponse(200, {"candidates": []})

    def reply(self, status_code: int, json_data: Any = None, text: str | None = None) -> None:
        self.respond = lambda: _FakeResponse(status_code, json_data, text)

    def reply_text(self, text: str) -> None:
        self.reply(200, {"candidates": [{"content": {"parts": [{"text": text}]}}]})

    def fail(self, exc: Exception) -> None:
        def _raise() -> _FakeResponse:
            raise exc
        self.respond = _raise

    def __call__(self, timeout: Any = None) -> "FakeUpstream":  # signature-compatible with httpx.Client
        self.timeouts.append(timeout)
        return self

    def __enter__(self) -> "FakeUpstream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        return None

    def post(self, url: str, params=None, headers=None, json=None) -> _FakeResponse:  # noqa: A002, ANN001
        self.calls.append({"url": url, "params": params, "headers": headers, "json": json})
        return self.respond()


@pytest.fixture
def upstream(monkeypatch: pytest.MonkeyPatch) -> FakeUpstream:
    fake = FakeUpstream()
    monkeypatch.setattr(gemini_mod.httpx, "Client", fake)
    return fake


@pytest.fixture
def make_client() -> Any:
    def _make(api_key: str | None = TEST_KEY) -> TestClient:
        app.dependency_overrides[get_settings] = lambda: Settings(api_key=api_key)
        return TestClient(app)
    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client) -> TestClient:  # noqa: ANN001
    return make_client()


@pytest.fixture
def connect_error() -> httpx.ConnectError:
    return httpx.ConnectError("connection refused")


@pytest.fixture
def api_key() -> str:
    return TEST_KEY


@pytest.fixture
def real_upstream(monkeypatch: pytest.MonkeyPatch) -> list[httpx.Request]:
    """Route gemini's httpx.Client through a MockTransport so httpx's own logging runs."""
    seen: list[httpx.Request] = []
    real_client = httpx.Client
    body = {"candidates": [{"content": {"parts": [{"text": '{"suggestions": ["a"]}'}]}}]}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=body)

    def factory(timeout: Any = None) -> httpx.Client:
        return real_client(transport=httpx.MockTransport(handler), timeout=timeout)

    monkeypatch.setattr(gemini_mod.httpx, "Client", factory)
    return seen


@pytest.fixture
def env_client() -> Any:
    """Client whose settings come from the real environment and config file."""
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
