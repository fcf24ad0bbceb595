"""Approval triggers: pure functions that decide whether a document can pass
automatically, is blocked, or needs a human to supply missing information.

No service dependencies, easy to unit test.
"""

import enum
from dataclasses import dataclass, field

from app.anomaly_flagger.detectors import RiskLevel
from app.compliance_checker.rules import ComplianceStatus
from app.schemas.extraction import DocClass

REQUIRED_FIELDS = ("vendor_name", "invoice_number", "invoice_date", "total_amount")
PAYABLE_DOC_CLASSES = (DocClass.INVOICE, DocClass.RECEIPT)

NEEDS_INFO_CONFIDENCE = 0.65
FAIL_CONFIDENCE = 0.75
PASS_CONFIDENCE = 0.8

MISSING_FIELDS_REASON = "Missing or low-confidence required fields."
ALL_PASSED_REASON = "All checks passed."


class ApprovalDecision(str, enum.Enum):
    PASS = "pass"
    FAIL = "fail"
    NEEDS_INFO = "needs_info"


@dataclass(frozen=True)
class ApprovalResult:
    decision: ApprovalDecision
    confidence: float
    reasons: list[str] = field(default_factory=list)
    needs_info_fields: list[str] = field(default_factory=list)


def find_missing_fields(
    field_confidence: dict[str, float],
    min_confidence: float = 0.5,
) -> list[str]:
    """Required fields whose confidence is below min_confidence, in REQUIRED_FIELDS order."""
    return [
        name for name in REQUIRED_FIELDS
        if field_confidence.get(name, 0.0) < min_confidence
    ]


def should_block_for_risk(risk: RiskLevel) -> tuple[bool, str | None]:
    if risk == RiskLevel.HIGH:
        return True, "High fraud risk score."
    if risk == RiskLevel.MEDIUM:
        return False, "Elevated fraud risk score."
    return False, None


def should_block_for_compliance(status: ComplianceStatus) -> tuple[bool, str | None]:
    if status == ComplianceStatus.FAIL:
        return True, "Compliance check failed."
    if status == ComplianceStatus.NEEDS_REVIEW:
        return False, "Compliance needs review."
    return False, None


def doc_class_reason(doc_class: DocClass) -> str | None:
    """Documents that are not invoices or receipts always carry an explanation."""
    if doc_class in PAYABLE_DOC_CLASSES:
        return None
    return f"Document classified as '{doc_class.value}', not an invoice or receipt."


def decide_approval(
    doc_class: DocClass,
    field_confidence: dict[str, float],
    risk: RiskLevel,
    compliance_status: ComplianceStatus,
    *,
    min_field_confidence: float = 0.5,
) -> ApprovalResult:
    """Combine classification, field confidence, risk and compliance into one decision.

    Order of precedence: missing required fields (needs_info), then blocking
    risk or compliance (fail), otherwise pass.
    """
    reasons: list[str] = []

    class_reason = doc_class_reason(doc_class)
    if class_reason:
        reasons.append(class_reason)

    risk_blocks, risk_reason = should_block_for_risk(risk)
    if risk_reason:
        reasons.append(risk_reason)

    compliance_blocks, compliance_reason = should_block_for_compliance(compliance_status)
    if compliance_reason:
        reasons.append(compliance_reason)

    missing = find_missing_fields(field_confidence, min_field_confidence)
    if missing:
        return ApprovalResult(
            decision=ApprovalDecision.NEEDS_INFO,
            confidence=NEEDS_INFO_CONFIDENCE,
            reasons=reasons + [MISSING_FIELDS_REASON],
            needs_info_fields=missing,
        )

    if risk_blocks or compliance_blocks:
        return ApprovalResult(
            decision=ApprovalDecision.FAIL,
            confidence=FAIL_CONFIDENCE,
            reasons=reasons,
        )

    return ApprovalResult(
        decision=ApprovalDecision.PASS,
        confidence=PASS_CONFIDENCE,
        reasons=reasons or [ALL_PASSED_REASON],
    )
