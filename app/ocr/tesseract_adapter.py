import pytesseract
from PIL import Image

from app.ocr.base import BaseOcrEngine
from app.ocr.exceptions import OcrError


class TesseractOcrEngine(BaseOcrEngine):
    """Runs Tesseract through pytesseract."""

    def __init__(self, language: str = "eng", timeout_seconds: int = 60) -> None:
        self._language = language
        self._timeout_seconds = timeout_seconds

    def recognize(self, image: Image.Image) -> str:
        try:
            text = pytesseract.image_to_string(
                image,
                lang=self._language,
                timeout=self._timeout_seconds,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, RuntimeError) as exc:
            raise OcrError(f"Tesseract OCR failed: {exc}") from exc
        return text.strip()
