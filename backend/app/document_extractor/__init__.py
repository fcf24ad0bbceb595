from app.document_extractor.fields import ExtractedFields, extract_fields
from app.document_extractor.classifier import ClassificationResult, classify_document
from app.document_extractor.direction import DirectionResult, classify_direction

__all__ = [
    "ExtractedFields",
    "extract_fields",
    "ClassificationResult",
    "classify_document",
    "DirectionResult",
    "classify_direction",
]
