"""Pydantic schemas for the analysis endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.anomaly_flagger.detectors import RiskLevel
from app.compliance_checker.rules import IssueSeverity, LegacyComplianceStatus
from app.document_extractor.pipeline import RawDocument
from app.hitl_workflow.triggers import ApprovalDecision
from app.payments.payload import PaymentMethod
from app.schemas.extraction import Currency, Direction, DocClass, InvoiceType


class AnalysisRequest(BaseModel):
    """Text already extracted upstream, plus optional context for scoring."""

    model_config = {"populate_by_name": True}

    file_name: str | None = Field(None, alias="fileName")
    file_type: str | None = Field(None, alias="fileType")
    extracted_text: str | None = Field(None, alias="extractedText")
    jurisdiction: str | None = Field(None, description="EU, UAE or KSA; inferred when omitted")
    company_name: str | None = Field(None, alias="companyName")
    payment_method: PaymentMethod = Field(PaymentMethod.SEPA, alias="paymentMethod")

    def to_document(self) -> RawDocument:
        return RawDocument(
            file_name=self.file_name,
            file_type=self.file_type,
            text=self.extracted_text,
            jurisdiction=self.jurisdiction,
            company_name=self.company_name,
            payment_method=self.payment_method,
        )


class ComplianceIssueSchema(BaseModel):
    code: str
    message: str
    severity: IssueSeverity


class PaymentPayloadSchema(BaseModel):
    payee: str | None = None
    reference: str | None = None
    amount: float | None = None
    currency: str | None = None
    method: PaymentMethod = PaymentMethod.SEPA


class ComplianceSummary(BaseModel):
    compliance_status: LegacyComplianceStatus
    evaluator_status: str
    tax_check_status: LegacyComplianceStatus
    vat_valid: bool
    tax_classification: str


class FraudDetection(BaseModel):
    risk_score: RiskLevel
    is_duplicate: bool = False
    anomalies: list[str] = Field(default_factory=list)


class IngestionInfo(BaseModel):
    """Request metadata. The only time-dependent part of a response."""

    valid: bool = True
    file_name: str
    file_type: str
    timestamp: datetime
    processing_time_ms: int
    cached: bool = False


class AnalysisResponse(BaseModel):
    # Extracted fields
    vendor_name: str | None = None
    invoice_number: str | None = None
    invoice_date: str | None = None
    total_amount: float | None = None
    tax_amount: float | None = None
    currency: Currency
    invoice_type: InvoiceType
    language: str = "en"
    document_hash: str

    # Classification
    doc_class: DocClass
    doc_class_confidence: float
    doc_class_signals: list[str] = Field(default_factory=list)
    direction: Direction
    direction_confidence: float
    direction_signals: list[str] = Field(default_factory=list)
    field_confidence: dict[str, float]

    # Compliance
    jurisdiction: str
    compliance_issues: list[ComplianceIssueSchema] = Field(default_factory=list)
    vat_rate: float | None = None
    vat_amount_computed: float | None = None
    compliance_status: LegacyComplianceStatus
    compliance: ComplianceSummary

    # Risk
    fraud_score: float
    anomaly_flags: list[str] = Field(default_factory=list)
    risk_score: RiskLevel
    is_flagged: bool
    flag_reason: str | None = None
    fraud_detection: FraudDetection

    # Approval
    approval: ApprovalDecision
    approval_confidence: float
    approval_reasons: list[str] = Field(default_factory=list)
    needs_info_fields: list[str] = Field(default_factory=list)

    # ESG
    esg_category: str
    co2e_estimate: float | None = None
    emissions_confidence: float

    # Payment
    payment_payload: PaymentPayloadSchema
    payment_qr_string: str

    ingestion: IngestionInfo | None = None


class BatchAnalysisRequest(BaseModel):
    documents: list[AnalysisRequest] = Field(..., min_length=1)


class BatchItemResult(BaseModel):
    index: int
    result: AnalysisResponse | None = None
    error: str | None = None


class BatchAnalysisResponse(BaseModel):
    results: list[BatchItemResult]
    total: int
    succeeded: int
    failed: int
