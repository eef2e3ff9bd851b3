"""
Shared fixtures: every outbound call goes through an httpx.MockTransport
installed on the shared client, so no test touches the network.
"""
import httpx
import pytest
from fastapi.testclient import TestClient

import smartkisan.http as http_module
from smartkisan.config import settings
from smartkisan.utils.cache import flush_all
from tests.payloads import completion_body, open_meteo_body


def _fresh(template: httpx.Response) -> httpx.Response:
    # a Response can only be sent once
    return httpx.Response(template.status_code, headers=template.headers, content=template.content)


class Upstream:
    """Programmable stand-in for Open-Meteo and OpenRouter."""

    def __init__(self):
        self.weather = httpx.Response(200, json=open_meteo_body())
        self.completion = httpx.Response(200, json=completion_body("Hello from the model"))
        self.unreachable = set()  # host fragments that refuse connections
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if any(h in request.url.host for h in self.unreachable):
            raise httpx.ConnectError("connection refused", request=request)
        if "open-meteo" in request.url.host:
            return _fresh(self.weather)
        if "openrouter" in request.url.host:
            return _fresh(self.completion)
        return httpx.Response(404)

    def calls_to(self, host_part):
        return [r for r in self.requests if host_part in r.url.host]


@pytest.fixture(autouse=True)
def clean_cache():
    flush_all()
    yield
    flush_all()


@pytest.fixture
def upstream(monkeypatch):
    up = Upstream()
    client = httpx.AsyncClient(transport=httpx.MockTransport(up.handler))
    monkeypatch.setattr(http_module, "client", client)
    return up


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.setattr(settings, "OPENROUTER_API_KEY", "")


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "OPENROUTER_API_KEY", "test-key")


@pytest.fixture
def api(upstream):
    from smartkisan.main import app
    # no context manager: startup would replace the mocked client
    return TestClient(app)
