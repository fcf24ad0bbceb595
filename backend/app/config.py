from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    environment: str = "development"
    log_level: str = "INFO"
    backend_host: str = "0.0.0.0"
    backend_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]

    # Compliance
    default_jurisdiction: str = "EU"
    vat_rate_tolerance: float = 0.02  # 2 percentage points either side of the expected range

    # Fraud / risk (absolute amounts, not currency-normalized)
    fraud_medium_amount_threshold: float = 25000.0
    fraud_high_amount_threshold: float = 40000.0

    # Approval
    approval_min_field_confidence: float = 0.5

    # Result cache (0 disables caching)
    result_cache_size: int = 256

    # Batch analysis
    batch_max_documents: int = 50

    # Sentry (optional)
    sentry_dsn: str = ""


settings = Settings()
