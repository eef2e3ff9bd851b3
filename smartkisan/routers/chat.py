"""
Conversational farming assistant.
"""
import datetime as dt

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from smartkisan.di import get_chat_service
from smartkisan.models.result import Degraded
from smartkisan.schemas import ChatRequest, ChatResponse
from smartkisan.services.chat import ChatService
from smartkisan.services.context import extract_context
from smartkisan.services.fallback import fallback_reply
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["chat"])


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _drop_unset(body: dict) -> dict:
    return {k: v for k, v in body.items() if v is not None}


@router.post("/chat", response_model=ChatResponse)
async def chat(req: ChatRequest, chat_service: ChatService = Depends(get_chat_service)):
    """
    Completion failures degrade to a canned reply with `error` set (still 200).
    Anything unexpected answers 500 with a `fallback` reply attached.
    """
    try:
        reply = await chat_service.reply(
            req.message or "", req.conversationHistory, req.language, req.userRegion,
        )
    except Exception as e:
        log.exception("❌ Chat handler failed")
        ctx = extract_context(req.conversationHistory, req.message or "")
        return JSONResponse(status_code=500, content={
            "error": str(e) or "Failed to get AI response",
            "fallback": fallback_reply(req.message or "", ctx, req.language, None),
            "timestamp": _now(),
            "context": ctx.model_dump(),
            "weather_used": False,
        })

    body = ChatResponse(
        response=reply.outcome.value,
        timestamp=_now(),
        source=reply.source,
        context=reply.context,
        weather_used=reply.weather_used,
        current_weather=reply.weather.model_dump() if reply.weather else None,
        note=reply.note,
        error=reply.outcome.reason if isinstance(reply.outcome, Degraded) else None,
    )
    return JSONResponse(content=_drop_unset(body.model_dump()))


@router.options("/chat")
async def chat_options():
    return Response(status_code=200)


@router.api_route("/chat", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def chat_method_not_allowed():
    return JSONResponse(status_code=405, content={"error": "Method not allowed", "allowed": ["POST"]})
