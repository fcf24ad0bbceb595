from fastapi import APIRouter

from app.api.v1 import analysis, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/v1", tags=["health"])
api_router.include_router(analysis.router, prefix="/v1/analysis", tags=["analysis"])
