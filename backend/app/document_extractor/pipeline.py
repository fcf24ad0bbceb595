"""
Document understanding & risk-scoring pipeline.

Flow:
  1. Validate the request (fileName, fileType, extractedText)
  2. Extract invoice fields from the text
  3. Classify document type and payer/payee direction
  4. Score field confidence
  5. Evaluate tax compliance and reconcile with the tax-presence check
  6. Score fraud risk
  7. Decide approval
  8. Estimate emissions
  9. Build the payment payload

Every stage is a pure function; the pipeline object only carries settings and
an optional, externally owned result cache.
"""

import logging
from dataclasses import dataclass

from app.anomaly_flagger.detectors import FraudResult, score_fraud_risk
from app.compliance_checker.rules import (
    ComplianceResult,
    ComplianceStatus,
    LegacyComplianceStatus,
    check_tax_presence,
    evaluate_compliance,
    reconcile_compliance,
    tax_classification,
)
from app.config import Settings
from app.document_extractor.classifier import ClassificationResult, classify_document
from app.document_extractor.confidence import score_fields
from app.document_extractor.direction import DirectionResult, classify_direction
from app.document_extractor.fields import ExtractedFields, extract_fields
from app.esg_mapper.emissions import EmissionsResult, estimate_emissions
from app.hitl_workflow.triggers import ApprovalResult, decide_approval
from app.payments.payload import PaymentMethod, PaymentPayload, build_payment_payload
from app.services.result_cache import ResultCache, cache_key, content_hash

logger = logging.getLogger("ledgerscope.pipeline")


class DocumentValidationError(ValueError):
    """A required request field is missing; no pipeline stage has run."""

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = missing_fields
        super().__init__(f"Missing {', '.join(missing_fields)}")


@dataclass(frozen=True)
class RawDocument:
    file_name: str | None
    file_type: str | None
    text: str | None
    jurisdiction: str | None = None
    company_name: str | None = None
    payment_method: PaymentMethod = PaymentMethod.SEPA


@dataclass(frozen=True)
class AnalysisResult:
    """Complete, deterministic result of one pipeline run."""

    document_hash: str
    fields: ExtractedFields
    classification: ClassificationResult
    direction: DirectionResult
    field_confidence: dict[str, float]
    compliance: ComplianceResult
    tax_check: LegacyComplianceStatus
    compliance_status: ComplianceStatus
    fraud: FraudResult
    approval: ApprovalResult
    emissions: EmissionsResult
    payment: PaymentPayload

    def to_record(self) -> dict:
        """Flatten into the stored record shape. Returns fresh containers on every call."""
        return {
            **self.fields.to_dict(),
            "document_hash": self.document_hash,
            "doc_class": self.classification.doc_class.value,
            "doc_class_confidence": self.classification.confidence,
            "doc_class_signals": list(self.classification.signals),
            "direction": self.direction.direction.value,
            "direction_confidence": self.direction.confidence,
            "direction_signals": list(self.direction.signals),
            "field_confidence": dict(self.field_confidence),
            "jurisdiction": self.compliance.jurisdiction,
            "compliance_issues": [issue.to_dict() for issue in self.compliance.issues],
            "vat_rate": self.compliance.computed_rate,
            "vat_amount_computed": self.compliance.vat_amount_computed,
            "fraud_score": self.fraud.fraud_score,
            "anomaly_flags": list(self.fraud.anomalies),
            "approval": self.approval.decision.value,
            "approval_confidence": self.approval.confidence,
            "approval_reasons": list(self.approval.reasons),
            "needs_info_fields": list(self.approval.needs_info_fields),
            "esg_category": self.emissions.esg_category,
            "co2e_estimate": self.emissions.co2e_estimate,
            "emissions_confidence": self.emissions.confidence,
            "payment_payload": self.payment.to_dict(),
            "payment_qr_string": self.payment.to_qr_string(),
            "risk_score": self.fraud.risk_score.value,
            "compliance_status": self.compliance_status.to_legacy().value,
            "is_flagged": self.fraud.is_flagged,
            "flag_reason": self.fraud.flag_reason,
            "compliance": {
                "compliance_status": self.compliance_status.to_legacy().value,
                "evaluator_status": self.compliance.status.value,
                "tax_check_status": self.tax_check.value,
                "vat_valid": self.compliance_status == ComplianceStatus.PASS,
                "tax_classification": tax_classification(self.fields.invoice_type),
            },
            "fraud_detection": {
                "risk_score": self.fraud.risk_score.value,
                "is_duplicate": self.fraud.is_duplicate,
                "anomalies": list(self.fraud.anomalies),
            },
        }


def validate_document(document: RawDocument) -> None:
    """Reject requests missing fileName, fileType or extractedText.

    Blank names count as missing; an empty text body is still analyzed.
    """
    missing = []
    if not (document.file_name or "").strip():
        missing.append("fileName")
    if not (document.file_type or "").strip():
        missing.append("fileType")
    if document.text is None:
        missing.append("extractedText")
    if missing:
        raise DocumentValidationError(missing)


class AnalysisPipeline:
    """Runs every analysis stage over one document."""

    def __init__(self, settings: Settings, cache: ResultCache | None = None):
        self.settings = settings
        self.cache = cache

    def run(self, document: RawDocument) -> AnalysisResult:
        """Analyze one document.

        Raises:
            DocumentValidationError: a required request field is missing.
        """
        result, _ = self.run_with_status(document)
        return result

    def run_with_status(self, document: RawDocument) -> tuple[AnalysisResult, bool]:
        """Like run(), also reporting whether the result came from the cache."""
        validate_document(document)
        text = document.text

        key = None
        if self.cache is not None:
            key = cache_key(
                text,
                document.jurisdiction,
                document.company_name,
                document.payment_method.value,
            )
            cached = self.cache.get(key)
            if cached is not None:
                logger.info("Cache hit for %s", document.file_name)
                return cached, True

        logger.info(
            "Analyzing document: %s (type=%s, %d chars)",
            document.file_name,
            document.file_type,
            len(text),
        )
        result = self._analyze(text, document)

        logger.info(
            "Analysis complete: %s doc_class=%s approval=%s risk=%s compliance=%s",
            document.file_name,
            result.classification.doc_class.value,
            result.approval.decision.value,
            result.fraud.risk_score.value,
            result.compliance_status.value,
        )

        if key is not None:
            self.cache.put(key, result)
        return result, False

    def _analyze(self, text: str, document: RawDocument) -> AnalysisResult:
        settings = self.settings

        fields = extract_fields(text)
        classification = classify_document(text)
        direction = classify_direction(text, document.company_name)
        field_confidence = score_fields(fields)

        compliance = evaluate_compliance(
            fields,
            text,
            document.jurisdiction,
            tolerance=settings.vat_rate_tolerance,
            default_jurisdiction=settings.default_jurisdiction,
        )
        tax_check = check_tax_presence(fields)
        compliance_status = reconcile_compliance(compliance.status, tax_check)

        fraud = score_fraud_risk(
            fields,
            medium_threshold=settings.fraud_medium_amount_threshold,
            high_threshold=settings.fraud_high_amount_threshold,
        )

        approval = decide_approval(
            classification.doc_class,
            field_confidence,
            fraud.risk_score,
            compliance_status,
            min_field_confidence=settings.approval_min_field_confidence,
        )

        emissions = estimate_emissions(fields.vendor_name, fields.total_amount)
        payment = build_payment_payload(fields, document.payment_method)

        return AnalysisResult(
            document_hash=content_hash(text),
            fields=fields,
            classification=classification,
            direction=direction,
            field_confidence=field_confidence,
            compliance=compliance,
            tax_check=tax_check,
            compliance_status=compliance_status,
            fraud=fraud,
            approval=approval,
            emissions=emissions,
            payment=payment,
        )
