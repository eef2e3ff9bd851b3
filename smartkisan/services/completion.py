# smartkisan/services/completion.py
import json
import re
import time
from typing import Any, Dict, Iterable, List, Optional

import httpx
from pydantic import ValidationError

from smartkisan.config import settings
from smartkisan.errors import MissingConfiguration, ParseFailure, UpstreamUnavailable
from smartkisan.http import get_http_client
from smartkisan.models.domain import AdvicePayload
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)

def t() -> float:
    return time.perf_counter()

_ALLOWED_ROLES = {"user", "assistant"}


def is_configured() -> bool:
    return bool(settings.OPENROUTER_API_KEY)


def trim_history(history: Optional[Iterable[Any]], window: Optional[int] = None) -> List[Dict[str, str]]:
    """Keep the last `window` user/assistant turns that carry text."""
    window = settings.CHAT_HISTORY_WINDOW if window is None else window
    turns = []
    for turn in history or []:
        role = turn.get("role") if isinstance(turn, dict) else getattr(turn, "role", None)
        content = turn.get("content") if isinstance(turn, dict) else getattr(turn, "content", None)
        if role in _ALLOWED_ROLES and isinstance(content, str) and content.strip():
            turns.append({"role": role, "content": content})
    return turns[-window:] if window > 0 else []


async def complete(system_prompt: str, user_prompt: str,
                   history: Optional[Iterable[Any]] = None, *,
                   max_tokens: int, title: Optional[str] = None) -> str:
    """
    One chat-completions call to OpenRouter; returns the reply text.

    Raises MissingConfiguration without touching the network when no key is
    set, and UpstreamUnavailable for transport errors, non-2xx responses, or
    a body without choices[0].message.content.
    """
    if not is_configured():
        raise MissingConfiguration("OPENROUTER_API_KEY is not set")

    start = t()
    messages = [{"role": "system", "content": system_prompt}]
    messages += trim_history(history)
    messages.append({"role": "user", "content": user_prompt})

    client = get_http_client()
    try:
        r = await client.post(
            settings.OPENROUTER_URL,
            headers={
                "Authorization": f"Bearer {settings.OPENROUTER_API_KEY}",
                "HTTP-Referer": settings.OPENROUTER_REFERER,
                "X-Title": title or settings.OPENROUTER_TITLE,
                "Content-Type": "application/json",
            },
            json={
                "model": settings.OPENROUTER_MODEL,
                "messages": messages,
                "max_tokens": int(max_tokens),
                "temperature": settings.LLM_TEMPERATURE,
                "top_p": settings.LLM_TOP_P,
            },
        )
    except httpx.HTTPError as e:
        raise UpstreamUnavailable(f"OpenRouter request failed: {e}") from e

    if r.status_code != 200:
        log.warning("OpenRouter API error %s: %s", r.status_code, r.text[:300])
        raise UpstreamUnavailable(f"OpenRouter API returned {r.status_code}", status_code=r.status_code)

    try:
        data = r.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise UpstreamUnavailable("Invalid response structure from OpenRouter API") from e
    if not isinstance(content, str) or not content.strip():
        raise UpstreamUnavailable("Invalid response structure from OpenRouter API")

    total_ms = round((t() - start) * 1000)
    approx_tokens = sum(len(m["content"]) for m in messages) // 4
    log.info("⏱️  LLM completion: %dms (~%d prompt tokens)", total_ms, approx_tokens)
    return content


_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def _json_candidate(text: str) -> str:
    fenced = _FENCE.search(text)
    if fenced:
        text = fenced.group(1)
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        raise ParseFailure("No JSON object in completion")
    return text[start:end + 1]


def parse_structured_advice(text: str) -> AdvicePayload:
    """Parse a completion into the six-section advice shape or raise ParseFailure."""
    try:
        raw = json.loads(_json_candidate(text or ""))
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Completion is not valid JSON: {e.msg}") from e
    try:
        return AdvicePayload.model_validate(raw)
    except ValidationError as e:
        raise ParseFailure(f"Completion does not match advice shape ({e.error_count()} errors)") from e
