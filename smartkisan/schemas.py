from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field

from smartkisan.config import settings
from smartkisan.models.domain import AdvicePayload, ConversationContext


# ---------- Request models ----------

class ChatTurn(BaseModel):
    role: Optional[str] = Field(None, description="'user' or 'assistant'")
    content: Optional[str] = ""

class ChatRequest(BaseModel):
    message: Optional[str] = Field("", description="Latest farmer message")
    conversationHistory: List[ChatTurn] = Field(default_factory=list)
    language: str = Field(settings.DEFAULT_LANGUAGE, description="'en' or 'ur'")
    userRegion: Optional[str] = Field(None, description="Region used for current weather, defaults to punjab")

class GeoPoint(BaseModel):
    # a missing half sends the lookup to the region centre
    lat: Optional[float] = None
    lng: Optional[float] = None

class AdviceRequest(BaseModel):
    cropType: Optional[str] = settings.DEFAULT_CROP
    region: Optional[str] = settings.DEFAULT_REGION
    language: str = settings.DEFAULT_LANGUAGE
    specificQuestion: Optional[str] = ""
    coordinates: Optional[GeoPoint] = None

class SettingsRequest(BaseModel):
    # missing keys answer 400 in the handler, not 422 here
    settings: Optional[Dict[str, Any]] = None


# ---------- Response models ----------

class ChatResponse(BaseModel):
    response: str
    timestamp: str
    source: str
    context: ConversationContext
    weather_used: bool
    current_weather: Optional[Dict[str, Any]] = None
    note: Optional[str] = None
    error: Optional[str] = None

class AdviceResponse(BaseModel):
    success: bool = True
    advice: AdvicePayload
    source: str
    timestamp: str
    weather_used: bool
    current_weather: Optional[Dict[str, Any]] = None
    data_sources: Dict[str, bool] = Field(default_factory=dict)
