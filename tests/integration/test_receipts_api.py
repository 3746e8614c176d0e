import json

from recipe_assistant.api.v1 import receipts
from recipe_assistant.services.exceptions import UpstreamError, ValidationError

RECEIPT_TEXT = "FRESH MART\nGRND BEEF 2.5 LB   $9.99\nWHOLE MILK 1 CT $3.49\nTOTAL   $13.48"


def _upload(client, content=b"\x89PNG fake", content_type="image/png"):
    return client.post("/api/receipts/scan", files={"receipt": ("receipt.png", content, content_type)})


def test_scan_uses_model_extraction_and_merges_into_pantry(client, completer, ocr):
    client.post("/api/pantry/items", json=[{"name": "ground beef", "quantity": "1 lb"}])
    ocr.text = RECEIPT_TEXT
    completer.reply = "```json\n" + json.dumps([
        {"name": "Ground Beef", "quantity": "2.5 lb"},
        {"name": "whole milk", "quantity": "1"},
    ]) + "\n```"

    resp = _upload(client)
    assert resp.status_code == 200
    body = resp.json()
    assert body["extraction"] == "ai"
    assert body["ocrText"] == RECEIPT_TEXT
    assert body["pantry"]["items"] == [
        {"name": "ground beef", "quantity": "1 lb, 2.5 lb"},
        {"name": "whole milk", "quantity": "1"},
    ]
    assert client.get("/api/pantry").json()["pantry"] == body["pantry"]


def test_scan_falls_back_when_model_fails(client, completer, ocr):
    ocr.text = RECEIPT_TEXT
    completer.error = UpstreamError("connection refused")

    resp = _upload(client)
    assert resp.status_code == 200
    body = resp.json()
    assert body["extraction"] == "fallback"
    assert body["items"] == [
        {"name": "grnd beef", "quantity": "2.5 lb"},
        {"name": "whole milk", "quantity": "1 ct"},
    ]


def test_scan_rejects_non_images(client, ocr):
    resp = _upload(client, content=b"hello", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.json()["kind"] == "ValidationError"
    assert ocr.calls == 0


def test_scan_rejects_oversized_uploads(client, monkeypatch, ocr):
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "10")
    resp = _upload(client, content=b"x" * 11)
    assert resp.status_code == 413
    assert resp.json()["kind"] == "PayloadTooLargeError"
    assert ocr.calls == 0


def test_scan_reports_ocr_failures(client, ocr):
    ocr.error = UpstreamError("OCR failed: tesseract is not installed")
    resp = _upload(client)
    assert resp.status_code == 502
    assert resp.json()["success"] is False

    ocr.error = ValidationError("Uploaded file is not a readable image")
    resp = _upload(client)
    assert resp.status_code == 400
    assert client.get("/api/pantry").json()["pantry"]["items"] == []


def test_scan_keeps_blocking_work_off_the_event_loop(client, completer, ocr, monkeypatch):
    ocr.text = RECEIPT_TEXT
    completer.reply = json.dumps([{"name": "whole milk", "quantity": "1"}])
    offloaded = []
    real = receipts.run_in_threadpool

    async def recording(func, *args, **kwargs):
        offloaded.append(func.__name__)
        return await real(func, *args, **kwargs)

    monkeypatch.setattr(receipts, "run_in_threadpool", recording)
    resp = _upload(client)
    assert resp.status_code == 200
    assert offloaded == ["recognize", "log_latency", "extract", "log_latency", "update"]
