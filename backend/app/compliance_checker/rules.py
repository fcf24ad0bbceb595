"""
Tax compliance rules: expected VAT rates per jurisdiction, VAT-ID presence,
and the status vocabulary shared by every compliance verdict.

Two verdicts are computed from the same document:
  - the rate evaluator (pass / needs_review / fail), driven by issues;
  - the tax-presence check (compliant / needs_review), which only asks whether
    a positive tax amount was found.
Both are expressed as ComplianceStatus and reconciled explicitly, taking the
stricter of the two. LegacyComplianceStatus is the outward vocabulary of the
tax-presence check and of the stored `compliance_status` field.
"""

import enum
import logging
import re
from dataclasses import dataclass, field

from app.document_extractor.fields import ExtractedFields
from app.schemas.extraction import Currency, InvoiceType

logger = logging.getLogger("ledgerscope.compliance")


class Jurisdiction(str, enum.Enum):
    EU = "EU"
    UAE = "UAE"
    KSA = "KSA"


class IssueSeverity(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LegacyComplianceStatus(str, enum.Enum):
    COMPLIANT = "compliant"
    NEEDS_REVIEW = "needs_review"
    NON_COMPLIANT = "non_compliant"


class ComplianceStatus(str, enum.Enum):
    PASS = "pass"
    NEEDS_REVIEW = "needs_review"
    FAIL = "fail"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    def to_legacy(self) -> LegacyComplianceStatus:
        return _TO_LEGACY[self]

    @classmethod
    def from_legacy(cls, legacy: LegacyComplianceStatus) -> "ComplianceStatus":
        return _FROM_LEGACY[legacy]


_STATUS_RANK = {
    ComplianceStatus.PASS: 0,
    ComplianceStatus.NEEDS_REVIEW: 1,
    ComplianceStatus.FAIL: 2,
}
_TO_LEGACY = {
    ComplianceStatus.PASS: LegacyComplianceStatus.COMPLIANT,
    ComplianceStatus.NEEDS_REVIEW: LegacyComplianceStatus.NEEDS_REVIEW,
    ComplianceStatus.FAIL: LegacyComplianceStatus.NON_COMPLIANT,
}
_FROM_LEGACY = {legacy: status for status, legacy in _TO_LEGACY.items()}

# Expected VAT rate (min, max) as fractions of the total
VAT_RATE_RANGES: dict[Jurisdiction, tuple[float, float]] = {
    Jurisdiction.EU: (0.15, 0.27),
    Jurisdiction.UAE: (0.05, 0.05),
    Jurisdiction.KSA: (0.15, 0.15),
}

JURISDICTION_ALIASES: dict[str, Jurisdiction] = {
    "EU": Jurisdiction.EU,
    "UAE": Jurisdiction.UAE,
    "AE": Jurisdiction.UAE,
    "KSA": Jurisdiction.KSA,
    "SA": Jurisdiction.KSA,
    "SAUDI": Jurisdiction.KSA,
    "SAUDI ARABIA": Jurisdiction.KSA,
}

AED_TOKENS = re.compile(r"\bAED\b|\bdirhams?\b|د\.إ", re.IGNORECASE)
SAR_TOKENS = re.compile(r"\bSAR\b|\briyals?\b|﷼", re.IGNORECASE)

# EU VAT numbers: 2-letter member-state prefix + 8-12 alphanumerics
EU_VAT_NUMBER = re.compile(
    r"\b(?:AT|BE|BG|CY|CZ|DE|DK|EE|EL|ES|FI|FR|HR|HU|IE|IT|LT|LU|LV|MT|NL|PL|PT|RO|SE|SI|SK|XI)"
    r"\s?U?[0-9A-Z]{8,12}\b"
)
LABELED_VAT_ID = re.compile(
    r"\b(?:vat|tax)\s*(?:id|no\b\.?|number|reg(?:istration)?(?:\s*no\b\.?)?)\s*[:\-]?\s*[A-Z0-9]{6,}",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ComplianceIssue:
    code: str
    message: str
    severity: IssueSeverity

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "severity": self.severity.value}


@dataclass(frozen=True)
class ComplianceResult:
    issues: list[ComplianceIssue] = field(default_factory=list)
    computed_rate: float | None = None
    status: ComplianceStatus = ComplianceStatus.PASS
    jurisdiction: str = Jurisdiction.EU.value
    vat_amount_computed: float | None = None


def resolve_jurisdiction(
    explicit: str | None,
    currency: Currency | None,
    text: str,
    default: str = Jurisdiction.EU.value,
) -> tuple[str, Jurisdiction | None]:
    """Resolve the tax jurisdiction for a document.

    Returns (label, known). `known` is None when an explicit jurisdiction was
    given that has no VAT rate table.
    """
    if explicit and explicit.strip():
        label = explicit.strip().upper()
        known = JURISDICTION_ALIASES.get(label)
        return (known.value if known else label), known

    if currency == Currency.EUR:
        inferred = Jurisdiction.EU
    elif AED_TOKENS.search(text):
        inferred = Jurisdiction.UAE
    elif SAR_TOKENS.search(text):
        inferred = Jurisdiction.KSA
    else:
        inferred = JURISDICTION_ALIASES.get(default.strip().upper(), Jurisdiction.EU)
    return inferred.value, inferred


def has_vat_id(text: str) -> bool:
    return bool(EU_VAT_NUMBER.search(text) or LABELED_VAT_ID.search(text))


def aggregate_status(issues: list[ComplianceIssue]) -> ComplianceStatus:
    severities = {issue.severity for issue in issues}
    if IssueSeverity.ERROR in severities:
        return ComplianceStatus.FAIL
    if IssueSeverity.WARNING in severities:
        return ComplianceStatus.NEEDS_REVIEW
    return ComplianceStatus.PASS


def evaluate_compliance(
    fields: ExtractedFields,
    text: str,
    jurisdiction: str | None = None,
    *,
    tolerance: float = 0.02,
    default_jurisdiction: str = Jurisdiction.EU.value,
) -> ComplianceResult:
    """Check the extracted tax against the jurisdiction's expected VAT rate."""
    text = text or ""
    label, known = resolve_jurisdiction(jurisdiction, fields.currency, text, default_jurisdiction)
    issues: list[ComplianceIssue] = []

    total = fields.total_amount
    tax = fields.tax_amount
    rate = None
    computed_rate = None
    vat_amount_computed = None
    if total is not None and tax is not None and total > 0 and tax > 0:
        rate = tax / total
        computed_rate = round(rate, 4)
        vat_amount_computed = round(total * computed_rate, 2)

        if tax > total:
            issues.append(ComplianceIssue(
                code="TAX_EXCEEDS_TOTAL",
                message=f"Tax amount ({tax:,.2f}) exceeds the invoice total ({total:,.2f})",
                severity=IssueSeverity.ERROR,
            ))

    if known is None:
        issues.append(ComplianceIssue(
            code="JURISDICTION_UNSUPPORTED",
            message=f"No VAT rate table for jurisdiction '{label}', rate check skipped",
            severity=IssueSeverity.INFO,
        ))
    else:
        low, high = VAT_RATE_RANGES[known]
        # Range check uses the unrounded ratio; computed_rate is for display only
        if rate is not None and (rate < low - tolerance or rate > high + tolerance):
            expected = f"{low:.0%}" if low == high else f"{low:.0%} to {high:.0%}"
            issues.append(ComplianceIssue(
                code="VAT_RATE_OUT_OF_RANGE",
                message=f"VAT rate {rate:.1%} is outside the expected {expected} for {label}",
                severity=IssueSeverity.WARNING,
            ))

        if known == Jurisdiction.EU and not has_vat_id(text):
            issues.append(ComplianceIssue(
                code="VAT_ID_MISSING",
                message="No VAT identification number found on the document",
                severity=IssueSeverity.INFO,
            ))

    status = aggregate_status(issues)
    logger.debug(
        "Compliance for %s: status=%s rate=%s issues=%s",
        label,
        status.value,
        computed_rate,
        [issue.code for issue in issues],
    )
    return ComplianceResult(
        issues=issues,
        computed_rate=computed_rate,
        status=status,
        jurisdiction=label,
        vat_amount_computed=vat_amount_computed,
    )


def check_tax_presence(fields: ExtractedFields) -> LegacyComplianceStatus:
    """Simple verdict: a document without a positive tax amount needs review."""
    if fields.tax_amount is None or fields.tax_amount <= 0:
        return LegacyComplianceStatus.NEEDS_REVIEW
    return LegacyComplianceStatus.COMPLIANT


def reconcile_compliance(
    evaluator_status: ComplianceStatus,
    tax_check: LegacyComplianceStatus,
) -> ComplianceStatus:
    """Merge both verdicts into one, keeping the stricter."""
    tax_status = ComplianceStatus.from_legacy(tax_check)
    if tax_status != evaluator_status:
        logger.debug(
            "Compliance verdicts disagree: evaluator=%s tax_check=%s",
            evaluator_status.value,
            tax_check.value,
        )
    return max(evaluator_status, tax_status, key=lambda status: status.rank)


def tax_classification(invoice_type: InvoiceType) -> str:
    return "Service Tax" if invoice_type == InvoiceType.SERVICES else "Goods Tax"
