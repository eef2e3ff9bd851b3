"""
Weather proxy: Open-Meteo current conditions + daily forecast.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from smartkisan.config import settings
from smartkisan.di import get_weather_service
from smartkisan.models.result import Degraded, Invalid
from smartkisan.services.weather import WeatherService
from smartkisan.tools.regions import REGION_COORDINATES, DEFAULT_REGION

router = APIRouter(tags=["weather"])

_DEFAULT_LAT, _DEFAULT_LNG = REGION_COORDINATES[DEFAULT_REGION]


@router.get("/weather")
async def get_weather(latitude: Optional[str] = Query(str(_DEFAULT_LAT)),
                      longitude: Optional[str] = Query(str(_DEFAULT_LNG)),
                      days: Optional[str] = Query(None),
                      weather_service: WeatherService = Depends(get_weather_service)):
    """
    Always answers 200 with usable weather unless the coordinates are bad.
    Provider failures are flagged with success=false / source=mock-fallback.
    """
    result = await weather_service.fetch_weather(latitude, longitude, days)

    if isinstance(result, Invalid):
        return JSONResponse(status_code=400, content={
            "error": "Invalid coordinates",
            "message": result.message,
        })

    if isinstance(result, Degraded):
        return JSONResponse(content={
            "success": False,
            "error": result.reason,
            "data": result.value.model_dump(),
            "source": "mock-fallback",
        })

    return JSONResponse(
        content={"success": True, "data": result.value.model_dump(), "source": "open-meteo"},
        headers={"Cache-Control": f"s-maxage={settings.WX_CACHE_TTL_SEC}, stale-while-revalidate"},
    )


@router.api_route("/weather", methods=["POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def weather_method_not_allowed():
    return JSONResponse(status_code=405, content={
        "error": "Method not allowed",
        "message": "Only GET requests are supported",
    })
