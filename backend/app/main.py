import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.api.v1.health import VERSION
from app.config import Settings, settings
from app.middleware.logging import RequestLoggingMiddleware

logger = logging.getLogger("ledgerscope")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s - %(message)s"


def configure_logging(app_settings: Settings) -> None:
    """Root logging for the process. Unknown level names fall back to INFO."""
    level = getattr(logging, app_settings.log_level.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


def init_sentry(app_settings: Settings) -> bool:
    """Start Sentry when a DSN is configured. Returns whether it is active."""
    if not app_settings.sentry_dsn:
        return False
    try:
        import sentry_sdk
        sentry_sdk.init(
            dsn=app_settings.sentry_dsn,
            traces_sample_rate=0.1,
            environment=app_settings.environment,
            release=f"ledgerscope@{VERSION}",
        )
    except Exception as e:
        logger.warning("Failed to initialize Sentry: %s", e)
        return False
    logger.info("Sentry initialized (env=%s)", app_settings.environment)
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_sentry(settings)
    logger.info(
        "Starting ledgerscope %s (env=%s, result cache=%d, batch limit=%d)",
        VERSION,
        settings.environment,
        settings.result_cache_size,
        settings.batch_max_documents,
    )
    yield
    logger.info("Shutting down ledgerscope")


configure_logging(settings)

app = FastAPI(
    title="ledgerscope",
    description="Invoice understanding, tax compliance, fraud risk and approval scoring",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router, prefix="/api")
