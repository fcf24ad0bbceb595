"""Pure fraud/risk detection functions. No state, no cross-document lookups."""

import enum
from dataclasses import dataclass, field

from app.document_extractor.fields import ExtractedFields

HIGH_AMOUNT_ANOMALY = "Unusually high amount"


class RiskLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def fraud_score(self) -> float:
        return FRAUD_SCORES[self]


# Numeric score stored alongside the tier
FRAUD_SCORES = {
    RiskLevel.LOW: 0.2,
    RiskLevel.MEDIUM: 0.6,
    RiskLevel.HIGH: 0.9,
}


@dataclass(frozen=True)
class FraudResult:
    risk_score: RiskLevel = RiskLevel.LOW
    anomalies: list[str] = field(default_factory=list)
    # Duplicate detection needs stored documents and is not done here
    is_duplicate: bool = False

    @property
    def fraud_score(self) -> float:
        return self.risk_score.fraud_score

    @property
    def is_flagged(self) -> bool:
        return self.risk_score == RiskLevel.HIGH

    @property
    def flag_reason(self) -> str | None:
        return ", ".join(self.anomalies) if self.anomalies else None


def detect_amount_risk(
    total_amount: float | None,
    medium_threshold: float = 25000.0,
    high_threshold: float = 40000.0,
) -> tuple[RiskLevel, str | None]:
    """Tier an amount against absolute thresholds (not currency-normalized).

    Returns (risk level, anomaly description or None).
    """
    amount = total_amount or 0.0
    if amount > high_threshold:
        return RiskLevel.HIGH, HIGH_AMOUNT_ANOMALY
    if amount > medium_threshold:
        return RiskLevel.MEDIUM, None
    return RiskLevel.LOW, None


def score_fraud_risk(
    fields: ExtractedFields,
    *,
    medium_threshold: float = 25000.0,
    high_threshold: float = 40000.0,
) -> FraudResult:
    risk, anomaly = detect_amount_risk(fields.total_amount, medium_threshold, high_threshold)
    anomalies = [anomaly] if anomaly else []
    return FraudResult(risk_score=risk, anomalies=anomalies)
