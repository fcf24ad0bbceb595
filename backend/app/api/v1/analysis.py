"""Analysis endpoints: single document and batch."""

import asyncio
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from app.config import Settings
from app.dependencies import get_analysis_pipeline, get_settings
from app.document_extractor.pipeline import AnalysisPipeline, DocumentValidationError
from app.schemas.analysis import (
    AnalysisRequest,
    AnalysisResponse,
    BatchAnalysisRequest,
    BatchAnalysisResponse,
    BatchItemResult,
    IngestionInfo,
)

logger = logging.getLogger("ledgerscope.api")

router = APIRouter()


async def _analyze(pipeline: AnalysisPipeline, request: AnalysisRequest) -> AnalysisResponse:
    """Run the pipeline off the event loop and wrap the record with ingestion metadata."""
    start = time.monotonic()
    result, cached = await run_in_threadpool(pipeline.run_with_status, request.to_document())

    response = AnalysisResponse(**result.to_record())
    response.ingestion = IngestionInfo(
        file_name=request.file_name,
        file_type=request.file_type,
        timestamp=datetime.now(timezone.utc),
        processing_time_ms=int((time.monotonic() - start) * 1000),
        cached=cached,
    )
    return response


@router.post("", response_model=AnalysisResponse)
async def analyze_document(
    request: AnalysisRequest,
    pipeline: AnalysisPipeline = Depends(get_analysis_pipeline),
) -> AnalysisResponse:
    """Analyze one document's extracted text."""
    try:
        return await _analyze(pipeline, request)
    except DocumentValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/batch", response_model=BatchAnalysisResponse)
async def analyze_batch(
    request: BatchAnalysisRequest,
    pipeline: AnalysisPipeline = Depends(get_analysis_pipeline),
    app_settings: Settings = Depends(get_settings),
) -> BatchAnalysisResponse:
    """Analyze several documents concurrently. Per-document failures are reported inline."""
    if len(request.documents) > app_settings.batch_max_documents:
        raise HTTPException(
            status_code=400,
            detail=f"Batch exceeds {app_settings.batch_max_documents} documents",
        )

    outcomes = await asyncio.gather(
        *(_analyze(pipeline, doc) for doc in request.documents),
        return_exceptions=True,
    )

    results = []
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, DocumentValidationError):
            results.append(BatchItemResult(index=index, error=str(outcome)))
        elif isinstance(outcome, BaseException):
            logger.error("Batch item %d failed: %s", index, outcome, exc_info=outcome)
            results.append(BatchItemResult(index=index, error="Analysis failed"))
        else:
            results.append(BatchItemResult(index=index, result=outcome))

    failed = sum(1 for r in results if r.error is not None)
    logger.info("Batch analyzed: %d documents, %d failed", len(results), failed)

    return BatchAnalysisResponse(
        results=results,
        total=len(results),
        succeeded=len(results) - failed,
        failed=failed,
    )
