"""
Dependency injection container for the application.
Constructs singletons and provides them to routes/handlers.
"""
from smartkisan.services.advice import AdviceService
from smartkisan.services.chat import ChatService
from smartkisan.services.weather import WeatherService

# Singletons - created once and reused
_weather_service = None
_chat_service = None
_advice_service = None

def get_weather_service() -> WeatherService:
    """Get singleton weather service."""
    global _weather_service
    if _weather_service is None:
        _weather_service = WeatherService()
    return _weather_service

def get_chat_service() -> ChatService:
    """Get singleton chat service."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService(weather=get_weather_service())
    return _chat_service

def get_advice_service() -> AdviceService:
    """Get singleton advice service."""
    global _advice_service
    if _advice_service is None:
        _advice_service = AdviceService(weather=get_weather_service())
    return _advice_service
