"""
Lifecycle of the shared upstream client
"""
import httpx
import pytest

import smartkisan.http as http_module
from smartkisan.config import settings


class TestSharedClient:

    def test_uninitialized_client_raises(self, monkeypatch):
        monkeypatch.setattr(http_module, "client", None)
        with pytest.raises(RuntimeError):
            http_module.get_http_client()

    async def test_init_and_close(self, monkeypatch):
        monkeypatch.setattr(http_module, "client", None)

        await http_module.init_http()
        first = http_module.get_http_client()
        assert isinstance(first, httpx.AsyncClient)
        assert first.timeout.read == settings.HTTP_TIMEOUT_SEC

        await http_module.init_http()
        assert http_module.get_http_client() is first

        await http_module.close_http()
        assert http_module.client is None
        assert first.is_closed
