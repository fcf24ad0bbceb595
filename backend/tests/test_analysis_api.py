"""Tests for the analysis HTTP endpoints."""

import pytest

from app.config import Settings
from app.dependencies import get_settings
from app.main import app
from tests.samples import SAMPLE_INVOICE_TEXT, SAMPLE_RECEIPT_TEXT


def _payload(text=SAMPLE_INVOICE_TEXT, **extra) -> dict:
    return {
        "fileName": "invoice.pdf",
        "fileType": "application/pdf",
        "extractedText": text,
        **extra,
    }


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_analyze_invoice(self, client):
        response = await client.post("/api/v1/analysis", json=_payload())
        assert response.status_code == 200
        data = response.json()
        assert data["invoice_number"] == "INV-2024-001"
        assert data["total_amount"] == 1200.0
        assert data["doc_class"] == "invoice"
        assert data["compliance_status"] == "needs_review"
        assert data["approval"] == "pass"
        assert data["payment_payload"]["method"] == "sepa"

    @pytest.mark.asyncio
    async def test_ingestion_wrapper(self, client):
        response = await client.post("/api/v1/analysis", json=_payload())
        ingestion = response.json()["ingestion"]
        assert ingestion["valid"] is True
        assert ingestion["file_name"] == "invoice.pdf"
        assert ingestion["file_type"] == "application/pdf"
        assert ingestion["processing_time_ms"] >= 0
        assert ingestion["cached"] is False

    @pytest.mark.asyncio
    async def test_repeat_is_identical_except_ingestion(self, client):
        first = (await client.post("/api/v1/analysis", json=_payload())).json()
        second = (await client.post("/api/v1/analysis", json=_payload())).json()
        assert second["ingestion"]["cached"] is True
        first.pop("ingestion")
        second.pop("ingestion")
        assert first == second

    @pytest.mark.asyncio
    async def test_optional_parameters(self, client):
        body = _payload(
            "Vendor: Gulf Trading\nInvoice No: 55120\nTotal: 105.00\nVAT: 5.00",
            jurisdiction="UAE",
            companyName="Gulf Trading",
            paymentMethod="zakat",
        )
        data = (await client.post("/api/v1/analysis", json=body)).json()
        assert data["jurisdiction"] == "UAE"
        assert data["direction"] == "outgoing"
        assert data["payment_qr_string"] == "PAYMENT|ZAKAT|55120|105.00|USD"

    @pytest.mark.asyncio
    async def test_empty_text_is_analyzed(self, client):
        response = await client.post("/api/v1/analysis", json=_payload(""))
        assert response.status_code == 200
        assert response.json()["approval"] == "needs_info"


class TestAnalyzeValidation:
    @pytest.mark.asyncio
    async def test_missing_file_name(self, client):
        body = _payload()
        del body["fileName"]
        response = await client.post("/api/v1/analysis", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing fileName"

    @pytest.mark.asyncio
    async def test_null_text(self, client):
        response = await client.post("/api/v1/analysis", json=_payload(None))
        assert response.status_code == 400
        assert "extractedText" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_blank_file_type(self, client):
        response = await client.post("/api/v1/analysis", json=_payload(fileType=" "))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_wrong_type_is_422(self, client):
        response = await client.post("/api/v1/analysis", json=_payload(12345))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_payment_method_is_422(self, client):
        response = await client.post("/api/v1/analysis", json=_payload(paymentMethod="bitcoin"))
        assert response.status_code == 422


class TestBatch:
    @pytest.mark.asyncio
    async def test_batch_reports_per_document(self, client):
        bad = _payload()
        del bad["fileType"]
        body = {"documents": [_payload(), bad, _payload(SAMPLE_RECEIPT_TEXT)]}

        response = await client.post("/api/v1/analysis/batch", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["succeeded"] == 2
        assert data["failed"] == 1

        results = data["results"]
        assert [r["index"] for r in results] == [0, 1, 2]
        assert results[0]["result"]["doc_class"] == "invoice"
        assert results[1]["result"] is None
        assert results[1]["error"] == "Missing fileType"
        assert results[2]["result"]["doc_class"] == "receipt"

    @pytest.mark.asyncio
    async def test_batch_matches_single(self, client):
        single = (await client.post("/api/v1/analysis", json=_payload())).json()
        batch = (await client.post(
            "/api/v1/analysis/batch", json={"documents": [_payload()]}
        )).json()
        item = batch["results"][0]["result"]
        single.pop("ingestion")
        item.pop("ingestion")
        assert item == single

    @pytest.mark.asyncio
    async def test_empty_batch_is_422(self, client):
        response = await client.post("/api/v1/analysis/batch", json={"documents": []})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_batch_size_limit(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(batch_max_documents=2)
        body = {"documents": [_payload()] * 3}
        response = await client.post("/api/v1/analysis/batch", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Batch exceeds 2 documents"


class TestSettingsDependency:
    @pytest.mark.asyncio
    async def test_scoring_thresholds_follow_settings(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(
            fraud_high_amount_threshold=1000.0, result_cache_size=0
        )
        response = await client.post("/api/v1/analysis", json=_payload())
        assert response.status_code == 200
        assert response.json()["risk_score"] == "high"

    @pytest.mark.asyncio
    async def test_default_settings_keep_sample_low_risk(self, client):
        response = await client.post("/api/v1/analysis", json=_payload())
        assert response.json()["risk_score"] == "low"
