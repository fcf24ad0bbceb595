from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.config import Settings
from app.dependencies import get_result_cache, get_settings
from app.schemas.health import CacheStats, HealthResponse, MetricsResponse
from app.services.result_cache import ResultCache

router = APIRouter()

VERSION = "0.1.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(app_settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        environment=app_settings.environment,
        version=VERSION,
    )


@router.get("/metrics", response_model=MetricsResponse)
async def get_metrics(cache: ResultCache = Depends(get_result_cache)) -> MetricsResponse:
    """Result cache statistics for this process."""
    stats = cache.stats()
    return MetricsResponse(cache=CacheStats(enabled=stats["max_size"] > 0, **stats))
