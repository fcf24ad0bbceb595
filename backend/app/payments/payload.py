"""Payment payload for payment-app consumption, plus the string a front end renders as a QR code."""

import enum
from dataclasses import asdict, dataclass

from app.document_extractor.fields import ExtractedFields, parse_amount

QR_PREFIX = "PAYMENT"
QR_SEPARATOR = "|"


class PaymentMethod(str, enum.Enum):
    SEPA = "sepa"
    ZAKAT = "zakat"
    CUSTOM = "custom"


@dataclass(frozen=True)
class PaymentPayload:
    payee: str | None
    reference: str | None
    amount: float | None
    currency: str | None
    method: PaymentMethod = PaymentMethod.SEPA

    def to_dict(self) -> dict:
        data = asdict(self)
        data["method"] = self.method.value
        return data

    def to_qr_string(self) -> str:
        """PAYMENT|<METHOD>|<reference>|<amount>|<currency>, empty segments for missing values."""
        amount = f"{self.amount:.2f}" if self.amount is not None else ""
        return QR_SEPARATOR.join([
            QR_PREFIX,
            self.method.value.upper(),
            (self.reference or "").replace(QR_SEPARATOR, " "),
            amount,
            self.currency or "",
        ])


def _coerce_amount(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return parse_amount(str(value))
    return parse_amount(value)


def build_payment_payload(
    fields: ExtractedFields,
    method: PaymentMethod = PaymentMethod.SEPA,
) -> PaymentPayload:
    """Remap extracted fields onto a payment payload. No validation beyond type coercion."""
    currency = fields.currency
    return PaymentPayload(
        payee=fields.vendor_name,
        reference=fields.invoice_number,
        amount=_coerce_amount(fields.total_amount),
        currency=currency.value if isinstance(currency, enum.Enum) else currency,
        method=method,
    )
