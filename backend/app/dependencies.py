from fastapi import Depends

from app.config import Settings, settings
from app.document_extractor.pipeline import AnalysisPipeline
from app.services.result_cache import ResultCache

# Owned by the app process; tests swap it out through dependency_overrides
_result_cache = ResultCache(max_size=settings.result_cache_size)


def get_settings() -> Settings:
    return settings


def get_result_cache() -> ResultCache:
    return _result_cache


def get_analysis_pipeline(
    app_settings: Settings = Depends(get_settings),
    cache: ResultCache = Depends(get_result_cache),
) -> AnalysisPipeline:
    return AnalysisPipeline(app_settings, cache=cache)
