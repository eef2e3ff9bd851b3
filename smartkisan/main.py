from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartkisan.config import settings
from smartkisan.http import init_http, close_http
from smartkisan.routers import advice, chat, weather
from smartkisan.routers import settings as user_settings
from smartkisan.services.completion import is_configured
from smartkisan.utils.cache import cache, init_cache, close_cache
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)

# Single FastAPI instance
app = FastAPI(title="SmartKisan AI", version="1.0.0")

# Single startup event
@app.on_event("startup")
async def startup_event():
    """Initialize cache and HTTP client on startup."""
    await init_cache()
    await init_http()
    if not is_configured():
        log.info("🔑 OPENROUTER_API_KEY not set; chat and advice will use rule-based fallbacks")

# Single shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Close HTTP client and cache sweeper on shutdown."""
    await close_http()
    await close_cache()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(weather.router)
app.include_router(chat.router)
app.include_router(advice.router)
app.include_router(user_settings.router)

# API endpoints
@app.get("/")
async def root():
    return {"ok": True, "service": "SmartKisan AI", "version": app.version}

@app.get("/health")
async def health():
    return {
        "ok": True,
        "llm_configured": is_configured(),
        "model": settings.OPENROUTER_MODEL,
        "default_region": settings.DEFAULT_REGION,
        "default_crop": settings.DEFAULT_CROP,
        "wx_days": settings.WX_FORECAST_DAYS,
        "wx_cache_ttl_sec": settings.WX_CACHE_TTL_SEC,
        "cache": cache.stats(),
    }
