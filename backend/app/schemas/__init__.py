from app.schemas.extraction import Currency, Direction, DocClass, InvoiceType
from app.schemas.health import HealthResponse, MetricsResponse

__all__ = [
    "Currency",
    "Direction",
    "DocClass",
    "InvoiceType",
    "HealthResponse",
    "MetricsResponse",
]
