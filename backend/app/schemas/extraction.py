import enum


class DocClass(str, enum.Enum):
    """Type of business document, determined by keyword classification."""

    INVOICE = "invoice"
    RECEIPT = "receipt"
    OFFER = "offer"
    PRESCRIPTION = "prescription"
    SICK_NOTE = "sick_note"
    OTHER = "other"


class Direction(str, enum.Enum):
    """Whether the document is a bill we pay (incoming) or one we issued (outgoing)."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"
    UNKNOWN = "unknown"


class Currency(str, enum.Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


class InvoiceType(str, enum.Enum):
    SERVICES = "services"
    GOODS = "goods"
    OTHER = "other"
