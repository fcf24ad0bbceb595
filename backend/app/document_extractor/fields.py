"""
Regex field extractor for invoice-like text.

Pulls a flat set of invoice fields out of already-extracted document text:
vendor, invoice number, invoice date, total and tax amounts, currency and a
coarse invoice type. Every lookup degrades to None (or a default) instead of
raising, so callers always get a complete ExtractedFields.
"""

import logging
import math
import re
from dataclasses import asdict, dataclass

from app.schemas.extraction import Currency, InvoiceType

logger = logging.getLogger("ledgerscope.extractor")

# Checked in order; the first symbol present decides the currency
CURRENCY_SYMBOLS: tuple[tuple[str, Currency], ...] = (
    ("€", Currency.EUR),
    ("£", Currency.GBP),
    ("$", Currency.USD),
)

# Number starting with a digit, optional thousands separators, up to 2 decimals.
# A trailing digit or percent sign means we stopped mid-number or hit a rate.
_AMOUNT = r"(\d[\d,]*(?:\.\d{1,2})?)(?![\d%])"

INVOICE_NUMBER_LABELED = re.compile(
    r"invoice\s*(?:number|no\b\.?|#)\s*[:\-]?\s*#?\s*([A-Z0-9][A-Z0-9\-/]*)", re.IGNORECASE
)
INVOICE_NUMBER_BARE = re.compile(r"\bINV[-\s]?\d{2,}(?:-\d+)*\b", re.IGNORECASE)

DATE_YMD = re.compile(r"\b((?:19|20)\d{2})[-/.](\d{1,2})[-/.](\d{1,2})\b")
DATE_DMY = re.compile(r"\b(\d{1,2})[-/.](\d{1,2})[-/.]((?:19|20)\d{2})\b")

TOTAL_LABELED = re.compile(
    r"\b(?:grand\s+total|total|amount\s+due)\b\s*[:\-]?\s*[$€£]?\s*" + _AMOUNT, re.IGNORECASE
)
CURRENCY_PREFIXED = re.compile(r"[$€£]\s*" + _AMOUNT)
TAX_LABELED = re.compile(
    r"\b(?:tax|vat)\b(?:\s*\(?\s*\d{1,2}(?:\.\d+)?\s*%\s*\)?)?\s*[:\-]?\s*[$€£]?\s*" + _AMOUNT,
    re.IGNORECASE,
)

VENDOR_LABELED = re.compile(r"\bvendor\s*[:\-]\s*(.+)", re.IGNORECASE)
FROM_LABELED = re.compile(r"\bfrom\s*[:\-]\s*(.+)", re.IGNORECASE)

SERVICE_TERMS = ("service", "consulting")
GOODS_TERMS = ("product", "item", "qty")

MAX_VENDOR_LINE_LENGTH = 60


@dataclass(frozen=True)
class ExtractedFields:
    """Invoice fields pulled from one document. Never mutated after creation."""

    vendor_name: str | None = None
    invoice_number: str | None = None
    invoice_date: str | None = None  # ISO yyyy-mm-dd
    total_amount: float | None = None
    tax_amount: float | None = None
    currency: Currency = Currency.USD
    invoice_type: InvoiceType = InvoiceType.OTHER
    language: str = "en"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["currency"] = self.currency.value
        data["invoice_type"] = self.invoice_type.value
        return data


def parse_amount(raw: str | None) -> float | None:
    """Parse a money string like '1,200.00'. Returns None for anything unparsable."""
    if raw is None:
        return None
    cleaned = str(raw).replace(",", "").strip()
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def detect_currency(text: str) -> Currency:
    for symbol, currency in CURRENCY_SYMBOLS:
        if symbol in text:
            return currency
    return Currency.USD


def extract_invoice_number(text: str) -> str | None:
    # Labels also occur in prose ("quote the invoice number on ..."); real numbers carry a digit
    for match in INVOICE_NUMBER_LABELED.finditer(text):
        if any(ch.isdigit() for ch in match.group(1)):
            return match.group(1)
    match = INVOICE_NUMBER_BARE.search(text)
    if match:
        return match.group(0)
    return None


def extract_invoice_date(text: str) -> str | None:
    """Find the first date and normalize it to yyyy-mm-dd.

    ISO ordering wins over day-first ordering when both appear.
    """
    match = DATE_YMD.search(text)
    if match:
        yyyy, mm, dd = match.groups()
        return f"{yyyy}-{int(mm):02d}-{int(dd):02d}"

    match = DATE_DMY.search(text)
    if match:
        dd, mm, yyyy = match.groups()
        return f"{yyyy}-{int(mm):02d}-{int(dd):02d}"

    return None


def extract_total_amount(text: str) -> float | None:
    """Labeled total first, then the first currency-prefixed number."""
    for pattern in (TOTAL_LABELED, CURRENCY_PREFIXED):
        match = pattern.search(text)
        if match:
            amount = parse_amount(match.group(1))
            if amount is not None:
                return amount
    return None


def extract_tax_amount(text: str) -> float | None:
    match = TAX_LABELED.search(text)
    if not match:
        return None
    return parse_amount(match.group(1))


def extract_vendor_name(text: str) -> str | None:
    for pattern in (VENDOR_LABELED, FROM_LABELED):
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()

    # Fall back to the letterhead: first line with some substance
    first_line = next(
        (line.strip() for line in text.splitlines() if len(line.strip()) > 3), ""
    )
    if first_line and len(first_line) < MAX_VENDOR_LINE_LENGTH:
        return first_line
    return None


def detect_invoice_type(text: str) -> InvoiceType:
    lower = text.lower()
    if any(term in lower for term in SERVICE_TERMS):
        return InvoiceType.SERVICES
    if any(term in lower for term in GOODS_TERMS):
        return InvoiceType.GOODS
    return InvoiceType.OTHER


def extract_fields(text: str) -> ExtractedFields:
    """Run every field extractor over the raw text."""
    text = text or ""

    fields = ExtractedFields(
        vendor_name=extract_vendor_name(text),
        invoice_number=extract_invoice_number(text),
        invoice_date=extract_invoice_date(text),
        total_amount=extract_total_amount(text),
        tax_amount=extract_tax_amount(text),
        currency=detect_currency(text),
        invoice_type=detect_invoice_type(text),
    )

    logger.debug(
        "Extracted fields: vendor=%r number=%r date=%r total=%r tax=%r currency=%s",
        fields.vendor_name,
        fields.invoice_number,
        fields.invoice_date,
        fields.total_amount,
        fields.tax_amount,
        fields.currency.value,
    )
    return fields
