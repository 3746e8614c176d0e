from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from recipe_assistant.api.deps import (
    get_metrics,
    get_ocr,
    get_pantry_repo,
    get_receipt_extractor,
    get_settings,
    get_user_id,
)
from recipe_assistant.config import Settings
from recipe_assistant.core.merge import apply_merge
from recipe_assistant.core.models import ReceiptScanResponse
from recipe_assistant.services.exceptions import PayloadTooLargeError, ValidationError
from recipe_assistant.services.llm import ReceiptItemExtractor
from recipe_assistant.services.metrics import MetricsLogger
from recipe_assistant.services.ocr import TesseractOCR
from recipe_assistant.services.repo.json_repo import JSONPantryRepo

router = APIRouter(tags=["receipts"])
logger = logging.getLogger(__name__)

# ---- Routes ------------------------------------------------------------------

@router.post("/api/receipts/scan", response_model=ReceiptScanResponse)
async def scan_receipt(
    receipt: UploadFile = File(..., description="Receipt photo (image/*)"),
    user_id: str = Depends(get_user_id),
    settings: Settings = Depends(get_settings),
    ocr: TesseractOCR = Depends(get_ocr),
    extractor: ReceiptItemExtractor = Depends(get_receipt_extractor),
    repo: JSONPantryRepo = Depends(get_pantry_repo),
    metrics: MetricsLogger = Depends(get_metrics),
):
    # UPLOADED
    if not (receipt.content_type or "").startswith("image/"):
        raise ValidationError(f"Receipt must be an image, got {receipt.content_type or 'unknown type'}")
    content = await receipt.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise PayloadTooLargeError(f"Receipt image exceeds {settings.max_upload_bytes} bytes")
    if not content:
        raise ValidationError("Receipt upload is empty")

    # OCR_DONE
    t0 = time.perf_counter()
    ocr_text = await run_in_threadpool(ocr.recognize, content)
    await run_in_threadpool(
        metrics.log_latency, "ocr", (time.perf_counter() - t0) * 1000.0, user_id=user_id,
        extra={"bytes": len(content), "chars": len(ocr_text)})

    # AI_EXTRACT_OK | FALLBACK_EXTRACT
    t0 = time.perf_counter()
    result = await run_in_threadpool(extractor.extract, ocr_text)
    await run_in_threadpool(
        metrics.log_latency, "receipt_extract", (time.perf_counter() - t0) * 1000.0, user_id=user_id,
        extra={"source": result.source, "count": len(result.items)})

    # MERGED -> PERSISTED
    pantry = await run_in_threadpool(repo.update, user_id, lambda current: apply_merge(current, result.items))
    logger.info(
        "Receipt for %s: %d items via %s, pantry now %d items",
        user_id, len(result.items), result.source, len(pantry.items),
    )
    return ReceiptScanResponse(
        ocr_text=ocr_text,
        items=result.items,
        extraction=result.source,
        pantry=pantry,
    )
