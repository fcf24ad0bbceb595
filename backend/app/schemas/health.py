from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    environment: str
    version: str


class CacheStats(BaseModel):
    enabled: bool
    size: int
    max_size: int
    hits: int
    misses: int


class MetricsResponse(BaseModel):
    cache: CacheStats
