from __future__ import annotations

from typing import Optional


class ServiceError(RuntimeError):
    """Base class for service-layer errors."""
    status_code = 500


class NotFoundError(ServiceError):
    """A document the operation requires does not exist."""
    status_code = 404


class ValidationError(ServiceError):
    """Missing or malformed input."""
    status_code = 400


class PayloadTooLargeError(ValidationError):
    status_code = 413


class AIFormatError(ServiceError):
    """Model output could not be parsed into the expected JSON shape.

    The untouched model text is kept on ``raw_text`` so callers can show it.
    """
    status_code = 422

    def __init__(self, message: str, raw_text: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text


class UpstreamError(ServiceError):
    """Errors from the LLM or OCR adapters."""
    status_code = 502


class UpstreamTimeoutError(UpstreamError):
    status_code = 504


class StorageError(ServiceError):
    """Errors from repositories (I/O, parse, schema)."""
    status_code = 500
