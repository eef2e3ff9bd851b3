"""
Structured, weather-aware crop advice.
"""
import datetime as dt

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from smartkisan.di import get_advice_service
from smartkisan.schemas import AdviceRequest, AdviceResponse
from smartkisan.services.advice import SOURCE_FALLBACK, AdviceService, emergency_advice
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["advice"])


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _drop_unset(body: dict) -> dict:
    return {k: v for k, v in body.items() if v is not None}


def _failure(error: str, advice: dict) -> JSONResponse:
    return JSONResponse(status_code=500, content={
        "error": error or "Failed to generate AI advice",
        "advice": advice,
        "source": SOURCE_FALLBACK,
        "timestamp": _now(),
        "weather_used": False,
    })


@router.post("/advice", response_model=AdviceResponse)
async def advice(req: AdviceRequest, advice_service: AdviceService = Depends(get_advice_service)):
    """
    200 with model advice, or with rule-based advice when no key is configured.
    500 with rule-based advice when the model call or its parsing fails.
    """
    try:
        run = await advice_service.advise(
            crop=req.cropType,
            region=req.region,
            language=req.language,
            specific_question=req.specificQuestion or "",
            coordinates=req.coordinates,
        )
    except Exception as e:
        log.exception("❌ Advice handler failed")
        payload = emergency_advice(req.cropType, req.region, req.language)
        return _failure(str(e), payload.model_dump())

    if run.failed:
        return _failure(run.outcome.reason, run.outcome.value.model_dump())

    body = AdviceResponse(
        advice=run.outcome.value,
        source=run.source,
        timestamp=_now(),
        weather_used=run.weather_used,
        current_weather=run.current_weather() if run.weather_used else None,
        data_sources=run.data_sources,
    )
    return JSONResponse(content=_drop_unset(body.model_dump()))


@router.options("/advice")
async def advice_options():
    return Response(status_code=200)


@router.api_route("/advice", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def advice_method_not_allowed():
    return JSONResponse(status_code=405, content={
        "error": "Method not allowed",
        "message": "Only POST requests are supported",
    })
