# smartkisan/config.py
import os
from dotenv import load_dotenv
from pathlib import Path

dotenv_path = Path(__file__).parents[1] / '.env'
load_dotenv(dotenv_path)


class Settings:
    # --- OpenRouter (chat completions) ---
    OPENROUTER_API_KEY: str = os.getenv("OPENROUTER_API_KEY", "")
    OPENROUTER_MODEL: str   = os.getenv("OPENROUTER_MODEL", "mistralai/mistral-7b-instruct:free")
    OPENROUTER_URL: str     = os.getenv("OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions")
    OPENROUTER_REFERER: str = os.getenv("OPENROUTER_REFERER", "http://localhost:3000")
    OPENROUTER_TITLE: str   = os.getenv("OPENROUTER_TITLE", "SmartKisan AI")

    # Sampling
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    LLM_TOP_P: float       = float(os.getenv("LLM_TOP_P", "0.9"))
    CHAT_MAX_TOKENS: int   = int(os.getenv("CHAT_MAX_TOKENS", "1200"))
    ADVICE_MAX_TOKENS: int = int(os.getenv("ADVICE_MAX_TOKENS", "2000"))

    # Only the tail of the chat history is forwarded to the model
    CHAT_HISTORY_WINDOW: int = int(os.getenv("CHAT_HISTORY_WINDOW", "10"))

    # --- Weather (Open-Meteo, no key) ---
    OPEN_METEO_URL: str = os.getenv("OPEN_METEO_URL", "https://api.open-meteo.com/v1/forecast")
    WX_FORECAST_DAYS: int     = int(os.getenv("WX_FORECAST_DAYS", "7"))
    WX_MAX_FORECAST_DAYS: int = 16  # provider limit
    WX_CACHE_TTL_SEC: int     = int(os.getenv("WX_CACHE_TTL_SEC", "300"))

    # Outbound calls
    HTTP_TIMEOUT_SEC: float = float(os.getenv("HTTP_TIMEOUT_SEC", "10"))

    # --- Request defaults ---
    DEFAULT_REGION: str   = os.getenv("DEFAULT_REGION", "punjab")
    DEFAULT_CROP: str     = os.getenv("DEFAULT_CROP", "wheat")
    DEFAULT_LANGUAGE: str = os.getenv("DEFAULT_LANGUAGE", "en")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
