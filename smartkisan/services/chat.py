# smartkisan/services/chat.py
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from smartkisan.config import settings
from smartkisan.errors import MissingConfiguration, UpstreamUnavailable
from smartkisan.models.domain import ConversationContext, RegionWeather
from smartkisan.models.result import Degraded, Ok
from smartkisan.services import completion
from smartkisan.services.context import extract_context
from smartkisan.services.fallback import fallback_reply
from smartkisan.services.prompts import build_chat_prompt, enhance_formatting
from smartkisan.services.weather import WeatherService
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)

SOURCE_LLM = "openrouter-mistral-7b"
SOURCE_FALLBACK = "fallback"
MISSING_KEY_NOTE = "Please set OPENROUTER_API_KEY in .env"


@dataclass
class ChatReply:
    outcome: Union[Ok[str], Degraded[str]]
    context: ConversationContext
    weather: Optional[RegionWeather]
    source: str
    note: Optional[str] = None

    @property
    def weather_used(self) -> bool:
        return self.weather is not None


class ChatService:
    """Conversational turn: region weather → context → prompt → completion, else canned reply."""

    def __init__(self, weather: WeatherService):
        self.weather = weather

    async def reply(self, message: str, history: Optional[Iterable[Any]] = None,
                    language: str = "en", region: Optional[str] = None) -> ChatReply:
        history = list(history or [])
        region = region or settings.DEFAULT_REGION
        log.info("💬 Chat request (lang=%s, region=%s, history=%d)", language, region, len(history))

        weather = await self.weather.region_weather(region)
        ctx = extract_context(history, message)
        prompt = build_chat_prompt(message, ctx, language, weather)

        try:
            text = await completion.complete(
                prompt.system, prompt.user, history,
                max_tokens=settings.CHAT_MAX_TOKENS,
            )
        except MissingConfiguration:
            log.info("🔑 OpenRouter key not set, answering with fallback reply")
            return ChatReply(
                outcome=Ok(fallback_reply(message, ctx, language, weather)),
                context=ctx, weather=weather, source=SOURCE_FALLBACK, note=MISSING_KEY_NOTE,
            )
        except UpstreamUnavailable as e:
            log.warning("⚠️ Chat completion failed, answering with fallback reply: %s", e)
            return ChatReply(
                outcome=Degraded(fallback_reply(message, ctx, language, weather), str(e)),
                context=ctx, weather=weather, source=SOURCE_FALLBACK,
            )

        return ChatReply(
            outcome=Ok(enhance_formatting(text, language)),
            context=ctx, weather=weather, source=SOURCE_LLM,
        )
