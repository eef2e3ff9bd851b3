# smartkisan/services/advice.py
"""
Structured advice pipeline.

Weather is resolved first (real-time, else a regional mock), then the
historical tables are consulted, the prompt is assembled and a single
completion is attempted. Every path ends with a complete AdvicePayload:
    Ok(payload)                 parsed model output
    Degraded(payload, reason)   rule-based advice (no key, upstream or parse failure)
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from smartkisan.config import settings
from smartkisan.errors import MissingConfiguration, UpstreamUnavailable
from smartkisan.models.domain import AdvicePayload, WeatherReport
from smartkisan.models.result import Degraded, Ok
from smartkisan.services import completion
from smartkisan.services.fallback import generate_dynamic_advice
from smartkisan.services.prompts import build_advice_prompt
from smartkisan.services.weather import WeatherService
from smartkisan.tools.history import (
    crop_performance,
    predict_optimal_sowing,
    soil_analysis,
    weather_trend,
)
from smartkisan.tools.regions import resolve_region
from smartkisan.tools.weather import mock_weather
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)

SOURCE_LLM = "openrouter-mistral-7b"
SOURCE_MOCK = "dynamic-mock-data"
SOURCE_FALLBACK = "dynamic-fallback"
ADVICE_TITLE = "SmartKisan AI Advice"


@dataclass
class AdviceRun:
    outcome: Union[Ok[AdvicePayload], Degraded[AdvicePayload]]
    source: str
    report: WeatherReport
    weather_used: bool
    data_sources: Dict[str, bool] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        """True when the model was tried and could not be used."""
        return self.source == SOURCE_FALLBACK

    def current_weather(self) -> Dict[str, Any]:
        cur = self.report.current
        return {"temperature": cur.temperature, "rainfall": cur.rainfall, "condition": cur.condition}


def _history(crop: str, region: str) -> Dict[str, Optional[Dict[str, Any]]]:
    return {
        "trends": weather_trend(region),
        "soil": soil_analysis(region),
        "performance": crop_performance(crop, region),
        "sowing": predict_optimal_sowing(crop, region),
    }


class AdviceService:
    def __init__(self, weather: WeatherService):
        self.weather = weather

    async def advise(self, crop: Optional[str] = None, region: Optional[str] = None,
                     language: str = "en", specific_question: str = "",
                     coordinates: Optional[Any] = None) -> AdviceRun:
        crop = crop or settings.DEFAULT_CROP
        region = region or settings.DEFAULT_REGION
        log.info("🌾 Advice request (crop=%s, region=%s, lang=%s)", crop, region, language)

        report, live = await self.weather.realtime_weather(coordinates, region)
        hist = _history(crop, region)
        data_sources = {
            "real_time_weather": live,
            "historical_trends": hist["trends"] is not None,
            "soil_analysis": hist["soil"] is not None,
            "crop_performance": hist["performance"] is not None,
        }

        def rule_based(confidence: str) -> AdvicePayload:
            return generate_dynamic_advice(
                crop, region, language, report,
                trends=hist["trends"], soil=hist["soil"], performance=hist["performance"],
                confidence=confidence,
            )

        prompt = build_advice_prompt(
            crop, region, language, report,
            hist["trends"], hist["soil"], hist["performance"], hist["sowing"],
            specific_question=specific_question,
        )

        try:
            text = await completion.complete(
                prompt.system, prompt.user,
                max_tokens=settings.ADVICE_MAX_TOKENS, title=ADVICE_TITLE,
            )
            payload = completion.parse_structured_advice(text)
        except MissingConfiguration:
            log.info("🔑 OpenRouter key not set, returning rule-based advice")
            return AdviceRun(
                outcome=Degraded(rule_based("high" if live else "medium"), "missing-configuration"),
                source=SOURCE_MOCK, report=report, weather_used=live, data_sources=data_sources,
            )
        except UpstreamUnavailable as e:
            log.warning("⚠️ Advice completion failed, returning rule-based advice: %s", e)
            return AdviceRun(
                outcome=Degraded(rule_based("medium"), str(e)),
                source=SOURCE_FALLBACK, report=report, weather_used=False, data_sources=data_sources,
            )

        return AdviceRun(
            outcome=Ok(payload), source=SOURCE_LLM,
            report=report, weather_used=live, data_sources=data_sources,
        )


def emergency_advice(crop: Optional[str], region: Optional[str], language: str) -> AdvicePayload:
    """Rule-based advice over mock weather, for failures outside the pipeline."""
    region = region or settings.DEFAULT_REGION
    lat, lng = resolve_region(region)
    return generate_dynamic_advice(crop or settings.DEFAULT_CROP, region, language,
                                   mock_weather(lat, lng, 3), confidence="low")
