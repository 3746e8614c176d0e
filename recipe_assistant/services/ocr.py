from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from .exceptions import UpstreamError, UpstreamTimeoutError, ValidationError
from recipe_assistant.config import Settings


class TesseractOCR:
    """
    Thin wrapper around pytesseract. No fallback: errors bubble as service errors.
    """
    def __init__(self, settings: Settings):
        try:
            import pytesseract  # local import to avoid hard dep at import-time
        except Exception as e:  # pragma: no cover
            raise UpstreamError("pytesseract not installed. `pip install pytesseract`") from e
        self._tesseract = pytesseract
        self.lang = settings.ocr_lang
        self.timeout = settings.ocr_timeout_seconds

    def recognize(self, image_bytes: bytes) -> str:
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise ValidationError(f"Uploaded file is not a readable image: {e}") from e

        try:
            text = self._tesseract.image_to_string(image, lang=self.lang, timeout=self.timeout)
        except (self._tesseract.TesseractNotFoundError, self._tesseract.TesseractError) as e:
            raise UpstreamError(f"OCR failed: {e}") from e
        except RuntimeError as e:
            # pytesseract signals its own timeout with a bare RuntimeError
            if "timeout" in str(e).lower():
                raise UpstreamTimeoutError(f"OCR timed out after {self.timeout}s") from e
            raise UpstreamError(f"OCR failed: {e}") from e
        return text.strip()
