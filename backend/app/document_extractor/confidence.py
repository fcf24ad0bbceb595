"""Per-field confidence from presence and shape only. No field looks at another."""

from datetime import date

from app.document_extractor.fields import ExtractedFields

# (good shape, bad shape, absent)
VENDOR_NAME_SCORES = (0.85, 0.85, 0.3)
INVOICE_NUMBER_SCORES = (0.8, 0.6, 0.25)
INVOICE_DATE_SCORES = (0.8, 0.4, 0.25)
TOTAL_AMOUNT_SCORES = (0.85, 0.4, 0.2)
TAX_AMOUNT_SCORES = (0.75, 0.4, 0.3)
CURRENCY_SCORES = (0.9, 0.9, 0.5)

MIN_INVOICE_NUMBER_LENGTH = 5

SCORED_FIELDS = (
    "vendor_name",
    "invoice_number",
    "invoice_date",
    "total_amount",
    "tax_amount",
    "currency",
)


def _pick(scores: tuple[float, float, float], present: bool, good_shape: bool) -> float:
    good, bad, absent = scores
    if not present:
        return absent
    return good if good_shape else bad


def _is_calendar_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def score_vendor_name(value: str | None) -> float:
    return _pick(VENDOR_NAME_SCORES, bool(value), True)


def score_invoice_number(value: str | None) -> float:
    present = bool(value)
    return _pick(
        INVOICE_NUMBER_SCORES, present, present and len(value) >= MIN_INVOICE_NUMBER_LENGTH
    )


def score_invoice_date(value: str | None) -> float:
    present = bool(value)
    return _pick(INVOICE_DATE_SCORES, present, present and _is_calendar_date(value))


def score_total_amount(value: float | None) -> float:
    return _pick(TOTAL_AMOUNT_SCORES, value is not None, value is not None and value > 0)


def score_tax_amount(value: float | None) -> float:
    return _pick(TAX_AMOUNT_SCORES, value is not None, value is not None and value >= 0)


def score_currency(value) -> float:
    return _pick(CURRENCY_SCORES, value is not None, True)


def score_fields(fields: ExtractedFields) -> dict[str, float]:
    """Build the FieldConfidenceMap for one set of extracted fields."""
    scores = {
        "vendor_name": score_vendor_name(fields.vendor_name),
        "invoice_number": score_invoice_number(fields.invoice_number),
        "invoice_date": score_invoice_date(fields.invoice_date),
        "total_amount": score_total_amount(fields.total_amount),
        "tax_amount": score_tax_amount(fields.tax_amount),
        "currency": score_currency(fields.currency),
    }
    return {name: min(1.0, max(0.0, value)) for name, value in scores.items()}
