"""
Unit tests for prompt assembly
"""

import pytest

from smartkisan.models.domain import ConversationContext, RegionWeather
from smartkisan.services.prompts import (
    build_advice_prompt,
    build_chat_prompt,
    enhance_formatting,
    weather_impact,
    weather_impact_keys,
)
from smartkisan.tools.weather import mock_weather


def _weather(temperature=25, humidity=60, rainfall=3):
    return RegionWeather(temperature=temperature, humidity=humidity, rainfall=rainfall,
                         windSpeed=10, condition="Clear sky", region="punjab")


class TestWeatherImpact:

    @pytest.mark.parametrize("kwargs,expected", [
        ({"temperature": 36}, ["heat"]),
        ({"temperature": 35}, []),
        ({"temperature": 9}, ["cold"]),
        ({"rainfall": 21}, ["heavy_rain"]),
        ({"rainfall": 20}, ["moderate_rain"]),
        ({"rainfall": 5}, []),
        ({"rainfall": 0}, ["no_rain"]),
        ({"humidity": 81}, ["humid"]),
        ({"humidity": 39}, ["dry"]),
    ])
    def test_thresholds(self, kwargs, expected):
        assert weather_impact_keys(_weather(**kwargs)) == expected

    def test_normal_note_when_nothing_triggers(self):
        assert "Normal weather" in weather_impact(_weather())

    def test_urdu_notes(self):
        assert "زیادہ درجہ حرارت" in weather_impact(_weather(temperature=40), "ur")


class TestChatPrompt:

    def test_includes_weather_and_context(self):
        ctx = ConversationContext(crop="wheat", region="punjab", challenges=["pests"])
        prompt = build_chat_prompt("how much water?", ctx, "en", _weather(temperature=38))

        assert "CURRENT WEATHER IN PUNJAB" in prompt.system
        assert "HIGH TEMPERATURE" in prompt.system
        assert "- Crop: wheat" in prompt.system
        assert "- Challenges: pests" in prompt.system
        assert prompt.user == "how much water?"

    def test_missing_weather_is_tolerated(self):
        prompt = build_chat_prompt("hi", ConversationContext(), "en", None)
        assert "Weather data unavailable" in prompt.system

    def test_none_challenge_is_not_listed(self):
        prompt = build_chat_prompt("hi", ConversationContext(challenges=["none"]), "en", None)
        assert "Challenges" not in prompt.system


class TestAdvicePrompt:

    def test_requires_json_shape_and_question(self):
        prompt = build_advice_prompt("wheat", "punjab", "en", mock_weather(days=7),
                                     specific_question="Should I irrigate today?")
        for key in ("irrigation", "fertilizer", "pest_control", "sowing_harvest", "weather_alerts", "summary"):
            assert f'"{key}"' in prompt.system
        assert "Should I irrigate today?" in prompt.system
        assert "and 4 more days" in prompt.system
        assert "wheat" in prompt.user

    def test_historical_block(self):
        trends = {"temperature": {"trend": "increasing", "change": 0.6},
                  "rainfall": {"trend": "stable", "change": -2.0}, "extreme_events": []}
        prompt = build_advice_prompt("wheat", "punjab", "en", None, trends=trends)
        assert "Temperature Trend: increasing (+0.6°C)" in prompt.system
        assert "WEATHER DATA UNAVAILABLE" in prompt.system

    def test_urdu_user_prompt_uses_urdu_crop(self):
        prompt = build_advice_prompt("wheat", "punjab", "ur", None)
        assert "گندم" in prompt.user


class TestEnhanceFormatting:

    def test_strips_artifacts(self):
        assert enhance_formatting("<s>[INST] Plant now [/INST]</s>") == "Plant now"

    def test_adds_topic_emoji(self):
        text = enhance_formatting("Check irrigation before fertilizer.")
        assert "irrigation 💧" in text
        assert "fertilizer 🌿" in text

    def test_existing_emoji_not_repeated(self):
        assert enhance_formatting("irrigation 💧 done").count("💧") == 1
