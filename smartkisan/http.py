import httpx
from typing import Optional

from smartkisan.config import settings
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)

# Global HTTP client instance
client: Optional[httpx.AsyncClient] = None

async def init_http():
    """Initialize the global HTTP client shared by the weather and completion gateways."""
    global client
    if client is not None:
        return

    # one bounded timeout for every upstream call
    timeout_config = httpx.Timeout(
        settings.HTTP_TIMEOUT_SEC,
        connect=min(5.0, settings.HTTP_TIMEOUT_SEC),
    )

    client = httpx.AsyncClient(
        timeout=timeout_config,
        limits=httpx.Limits(
            max_keepalive_connections=20,
            max_connections=50,
            keepalive_expiry=30
        ),
        headers={
            "Accept-Encoding": "gzip, deflate",
            "User-Agent": "SmartKisan/1.0 (+https://smartkisan.example.com)"
        },
    )
    log.info("🔗 HTTP client initialized (timeout %.0fs)", settings.HTTP_TIMEOUT_SEC)

async def close_http():
    """Close the global HTTP client."""
    global client
    if client:
        await client.aclose()
        client = None
        log.info("🔗 HTTP client closed")

def get_http_client() -> httpx.AsyncClient:
    """Get the global HTTP client instance."""
    if client is None:
        raise RuntimeError("HTTP client not initialized. Call init_http() first.")
    return client
