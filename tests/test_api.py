"""
End-to-end tests for the HTTP handlers
"""

import json

import httpx
import pytest

from smartkisan.di import get_chat_service
from tests.payloads import ADVICE_JSON, completion_body

SECTIONS = ("irrigation", "fertilizer", "pest_control", "sowing_harvest", "weather_alerts", "summary")


class TestServiceInfo:

    def test_root_and_health(self, api):
        assert api.get("/").json()["ok"] is True
        health = api.get("/health").json()
        assert health["ok"] is True
        assert "llm_configured" in health


class TestChatEndpoint:

    def test_hello_without_key(self, api, upstream, no_api_key):
        r = api.post("/chat", json={"message": "hello", "language": "en"})

        assert r.status_code == 200
        body = r.json()
        assert body["response"].startswith("Hello!")
        assert body["weather_used"] is True
        assert body["source"] == "fallback"
        assert body["context"]["tone"] == "friendly"
        assert upstream.calls_to("openrouter") == []

    def test_weather_used_false_when_weather_fails(self, api, upstream, no_api_key):
        upstream.weather = httpx.Response(500)
        body = api.post("/chat", json={"message": "hello"}).json()

        assert body["weather_used"] is False
        assert body["response"]

    def test_null_fields_in_history_are_skipped(self, api, upstream, api_key):
        history = [
            {"role": "assistant", "content": None},
            {"content": "I grow cotton"},
            {"role": "user", "content": "My rice field is dry"},
        ]
        r = api.post("/chat", json={"message": None, "conversationHistory": history})

        assert r.status_code == 200
        assert r.json()["context"]["crop"] == "rice"
        sent = json.loads(upstream.calls_to("openrouter")[0].content)["messages"]
        assert [m["content"] for m in sent if m["role"] == "assistant"] == []
        assert "My rice field is dry" in [m["content"] for m in sent]

    def test_model_reply(self, api, upstream, api_key):
        upstream.completion = httpx.Response(200, json=completion_body("<s>Check irrigation today</s>"))
        history = [{"role": "user", "content": "I grow rice in sindh"},
                   {"role": "assistant", "content": "Great!"}]
        r = api.post("/chat", json={"message": "what next?", "conversationHistory": history,
                                    "userRegion": "sindh"})

        body = r.json()
        assert r.status_code == 200
        assert body["response"] == "Check irrigation 💧 today"
        assert body["source"] == "openrouter-mistral-7b"
        assert body["context"]["crop"] == "rice"
        assert body["current_weather"]["region"] == "sindh"
        sent = json.loads(upstream.calls_to("openrouter")[0].content)
        assert [m["role"] for m in sent["messages"]] == ["system", "user", "assistant", "user"]

    def test_completion_failure_degrades_with_200(self, api, upstream, api_key):
        upstream.completion = httpx.Response(503)
        r = api.post("/chat", json={"message": "how often should I water?"})

        assert r.status_code == 200
        body = r.json()
        assert "irrigation" in body["response"]
        assert "503" in body["error"]

    def test_unexpected_failure_is_500_with_fallback(self, api, monkeypatch):
        async def explode(*args, **kwargs):
            raise RuntimeError("kaboom")
        monkeypatch.setattr(get_chat_service(), "reply", explode)

        r = api.post("/chat", json={"message": "hello"})
        assert r.status_code == 500
        body = r.json()
        assert body["error"] == "kaboom"
        assert body["fallback"]
        assert "context" in body and "timestamp" in body

    def test_options_and_methods(self, api):
        assert api.options("/chat").status_code == 200
        assert api.get("/chat").status_code == 405


class TestAdviceEndpoint:

    def test_upstream_503_returns_500_with_full_advice(self, api, upstream, api_key):
        upstream.completion = httpx.Response(503)
        r = api.post("/advice", json={"cropType": "wheat", "region": "punjab", "language": "en"})

        assert r.status_code == 500
        body = r.json()
        assert body["source"] == "dynamic-fallback"
        assert body["weather_used"] is False
        for name in SECTIONS:
            assert body["advice"][name]
        assert body["advice"]["confidence"]

    def test_unparseable_completion_returns_500(self, api, upstream, api_key):
        upstream.completion = httpx.Response(200, json=completion_body("Just irrigate."))
        r = api.post("/advice", json={"cropType": "rice", "region": "sindh", "language": "ur"})

        assert r.status_code == 500
        assert r.json()["advice"]["summary"]

    def test_no_key_returns_mock_advice(self, api, upstream, no_api_key):
        r = api.post("/advice", json={"cropType": "cotton", "region": "sindh", "language": "en"})

        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["source"] == "dynamic-mock-data"
        assert body["data_sources"]["real_time_weather"] is True
        assert body["data_sources"]["crop_performance"] is True

    def test_model_advice(self, api, upstream, api_key):
        upstream.completion = httpx.Response(200, json=completion_body(json.dumps(ADVICE_JSON)))
        r = api.post("/advice", json={"cropType": "wheat", "region": "punjab", "language": "en",
                                      "specificQuestion": "When to sow?",
                                      "coordinates": {"lat": 31.4, "lng": 74.2}})

        assert r.status_code == 200
        body = r.json()
        assert body["source"] == "openrouter-mistral-7b"
        assert body["advice"]["summary"] == "All good"
        assert body["current_weather"]["temperature"] == 25
        sent = json.loads(upstream.calls_to("openrouter")[0].content)
        assert "When to sow?" in sent["messages"][0]["content"]
        assert upstream.calls_to("openrouter")[0].headers["X-Title"] == "SmartKisan AI Advice"
        assert upstream.calls_to("open-meteo")[0].url.params["latitude"] == "31.4"

    def test_weather_failure_uses_regional_mock(self, api, upstream, no_api_key):
        upstream.weather = httpx.Response(500)
        body = api.post("/advice", json={"cropType": "maize", "region": "khyber"}).json()

        assert body["data_sources"]["real_time_weather"] is False
        assert body["weather_used"] is False
        assert body["advice"]["weather_alerts"]["timeline"]

    @pytest.mark.parametrize("coordinates", [{}, {"lat": 24.9}, {"lng": 67.5}, {"lat": None, "lng": None}])
    def test_incomplete_coordinates_use_region_centre(self, api, upstream, no_api_key, coordinates):
        r = api.post("/advice", json={"cropType": "rice", "region": "sindh", "coordinates": coordinates})

        assert r.status_code == 200
        params = upstream.calls_to("open-meteo")[0].url.params
        assert (params["latitude"], params["longitude"]) == ("24.8607", "67.0011")

    def test_null_specific_question_is_ignored(self, api, upstream, api_key):
        upstream.completion = httpx.Response(200, json=completion_body(json.dumps(ADVICE_JSON)))
        r = api.post("/advice", json={"cropType": "wheat", "specificQuestion": None})

        assert r.status_code == 200
        sent = json.loads(upstream.calls_to("openrouter")[0].content)
        assert "USER'S SPECIFIC QUESTION" not in sent["messages"][0]["content"]

    def test_get_not_allowed(self, api):
        assert api.get("/advice").status_code == 405


class TestSettingsEndpoint:

    def test_defaults(self, api):
        body = api.get("/settings").json()
        assert body["success"] is True
        assert body["settings"]["cropType"] == "wheat"
        assert body["settings"]["coordinates"] == {"lat": 31.5204, "lng": 74.3587}

    def test_save(self, api):
        settings = {"language": "ur", "cropType": "rice", "region": "sindh"}
        r = api.post("/settings", json={"settings": settings})
        assert r.status_code == 200
        assert r.json()["settings"] == settings

    @pytest.mark.parametrize("payload", [{}, {"settings": {"language": "en", "cropType": "wheat"}}])
    def test_missing_fields(self, api, payload):
        r = api.post("/settings", json=payload)
        assert r.status_code == 400
        assert r.json() == {"success": False, "error": "Missing required settings fields"}

    def test_delete_not_allowed(self, api):
        assert api.delete("/settings").status_code == 405
