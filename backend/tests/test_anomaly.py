"""Tests for amount-based fraud risk detection."""

from app.anomaly_flagger.detectors import (
    HIGH_AMOUNT_ANOMALY,
    FraudResult,
    RiskLevel,
    detect_amount_risk,
    score_fraud_risk,
)
from app.document_extractor.fields import ExtractedFields


class TestDetectAmountRisk:
    """Tests for detect_amount_risk pure function."""

    def test_high(self):
        assert detect_amount_risk(50000) == (RiskLevel.HIGH, HIGH_AMOUNT_ANOMALY)

    def test_medium(self):
        assert detect_amount_risk(30000) == (RiskLevel.MEDIUM, None)

    def test_thresholds_are_exclusive(self):
        assert detect_amount_risk(25000)[0] == RiskLevel.LOW
        assert detect_amount_risk(40000)[0] == RiskLevel.MEDIUM

    def test_missing_amount_is_low(self):
        assert detect_amount_risk(None) == (RiskLevel.LOW, None)

    def test_custom_thresholds(self):
        assert detect_amount_risk(600, medium_threshold=100, high_threshold=500)[0] == RiskLevel.HIGH


class TestScoreFraudRisk:
    def test_high_amount_is_flagged(self):
        result = score_fraud_risk(ExtractedFields(total_amount=50000.0, tax_amount=1.0))
        assert result.risk_score == RiskLevel.HIGH
        assert result.anomalies == [HIGH_AMOUNT_ANOMALY]
        assert result.is_flagged is True
        assert result.flag_reason == "Unusually high amount"
        assert result.fraud_score == 0.9

    def test_low_amount(self):
        result = score_fraud_risk(ExtractedFields(total_amount=120.0))
        assert result.risk_score == RiskLevel.LOW
        assert result.is_flagged is False
        assert result.flag_reason is None
        assert result.fraud_score == 0.2

    def test_medium_is_not_flagged(self):
        result = score_fraud_risk(ExtractedFields(total_amount=30000.0))
        assert result.is_flagged is False
        assert result.fraud_score == 0.6

    def test_duplicates_are_never_detected(self):
        assert FraudResult().is_duplicate is False
