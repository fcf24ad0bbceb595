import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.document_extractor.pipeline import AnalysisPipeline, RawDocument
from app.services.result_cache import ResultCache


@pytest.fixture
def settings() -> Settings:
    return Settings(result_cache_size=0, sentry_dsn="")


@pytest.fixture
def pipeline(settings) -> AnalysisPipeline:
    return AnalysisPipeline(settings)


@pytest.fixture
def make_document():
    def _make(text: str, **kwargs) -> RawDocument:
        kwargs.setdefault("file_name", "invoice.pdf")
        kwargs.setdefault("file_type", "application/pdf")
        return RawDocument(text=text, **kwargs)
    return _make


@pytest.fixture
def result_cache() -> ResultCache:
    return ResultCache(max_size=16)


@pytest.fixture
async def client(result_cache):
    from app.dependencies import get_result_cache
    from app.main import app

    app.dependency_overrides[get_result_cache] = lambda: result_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
