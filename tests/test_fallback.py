"""
Unit tests for the rule-based fallback advisor
"""

import random

import pytest

from smartkisan.models.domain import ConversationContext, RegionWeather, WeatherSnapshot
from smartkisan.services.fallback import (
    fallback_reply,
    generate_dynamic_advice,
    irrigation_urgency,
    pest_risk,
)
from smartkisan.tools.history import crop_performance, soil_analysis, weather_trend
from smartkisan.tools.weather import mock_weather

SECTIONS = ("irrigation", "fertilizer", "pest_control", "sowing_harvest", "weather_alerts")


def _snapshot(temperature=28, humidity=65, rainfall=12):
    return WeatherSnapshot(temperature=temperature, humidity=humidity, rainfall=rainfall,
                           windSpeed=10, condition="Clear sky", weatherCode=0)


def _report(**kwargs):
    report = mock_weather(days=7, rng=random.Random(7))
    return report.model_copy(update={"current": _snapshot(**kwargs)})


class TestSelectors:

    @pytest.mark.parametrize("kwargs,expected", [
        ({"rainfall": 16}, "low"),
        ({"rainfall": 6}, "medium"),
        ({"rainfall": 0, "temperature": 31}, "high"),
        ({"rainfall": 0, "temperature": 25}, "medium"),
    ])
    def test_irrigation_urgency(self, kwargs, expected):
        assert irrigation_urgency(_snapshot(**kwargs)) == expected

    @pytest.mark.parametrize("kwargs,expected", [
        ({"humidity": 80, "temperature": 30}, "high"),
        ({"humidity": 80, "temperature": 20}, "medium"),
        ({"humidity": 70}, "medium"),
        ({"humidity": 50}, "low"),
    ])
    def test_pest_risk(self, kwargs, expected):
        assert pest_risk(_snapshot(**kwargs)) == expected


class TestStructuredFallback:

    @pytest.mark.parametrize("language", ["en", "ur"])
    @pytest.mark.parametrize("crop", ["wheat", "rice", "cotton", "sugarcane", "maize", "barley", ""])
    def test_every_section_populated(self, language, crop):
        advice = generate_dynamic_advice(crop, "punjab", language, _report())

        for name in SECTIONS:
            section = getattr(advice, name).model_dump()
            assert section and all(isinstance(v, str) and v.strip() for v in section.values()), name
        assert advice.summary.strip()
        assert advice.confidence

    @pytest.mark.parametrize("kwargs", [
        {"temperature": 40, "humidity": 85, "rainfall": 30},
        {"temperature": 5, "humidity": 30, "rainfall": 0},
    ])
    def test_extreme_weather(self, kwargs):
        advice = generate_dynamic_advice("wheat", "sindh", "en", _report(**kwargs))
        assert advice.weather_alerts.current_risks != "No major weather risks right now"

    def test_heavy_rain_skips_irrigation(self):
        advice = generate_dynamic_advice("wheat", "punjab", "en", _report(rainfall=25))
        assert "Skip next irrigation" in advice.irrigation.recommendation
        assert advice.irrigation.urgency == "low"

    def test_uses_historical_data(self):
        advice = generate_dynamic_advice(
            "wheat", "punjab", "en", _report(),
            trends=weather_trend("punjab"), soil=soil_analysis("punjab"),
            performance=crop_performance("wheat", "punjab"),
        )
        assert "historical average" in advice.sowing_harvest.yield_expectation
        assert "nitrogen" in advice.fertilizer.recommendation

    def test_urdu_text(self):
        advice = generate_dynamic_advice("wheat", "punjab", "ur", _report())
        assert "گندم" in advice.summary
        assert "پنجاب" in advice.summary


class TestConversationalFallback:

    @pytest.mark.parametrize("language", ["en", "ur"])
    @pytest.mark.parametrize("message", ["", "hello", "how often to water?", "urea dose", "my cotton", "???", None])
    def test_never_empty(self, language, message):
        assert fallback_reply(message, ConversationContext(), language, None).strip()

    def test_greeting(self):
        assert fallback_reply("hello", None, "en").startswith("Hello!")

    def test_topic_order(self):
        # irrigation wins over fertilizer and crop names
        assert "irrigation" in fallback_reply("water and urea for wheat", None, "en")
        assert "fertilizer" in fallback_reply("urea for wheat", None, "en")
        assert "Wheat" in fallback_reply("hello, my wheat", None, "en")

    def test_urdu_topic(self):
        assert "آبپاشی" in fallback_reply("پانی کب دوں؟", None, "ur")

    def test_generic_uses_context_crop(self):
        reply = fallback_reply("what now", ConversationContext(crop="rice"), "en")
        assert "Rice" in reply

    def test_weather_line(self):
        weather = RegionWeather(temperature=31, humidity=50, rainfall=0, windSpeed=8,
                                condition="Clear sky", region="punjab")
        reply = fallback_reply("hello", None, "en", weather)
        assert "Current weather in punjab: 31.0°C" in reply
