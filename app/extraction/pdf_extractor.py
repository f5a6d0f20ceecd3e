from pathlib import Path

from app.extraction.base import BaseContentExtractor
from app.extraction.exceptions import ExtractionError
from app.extraction.models import ExtractedContent
from app.logging.logger import Log
from app.ocr.base import BaseOcrEngine
from app.ocr.exceptions import OcrError
from app.pdf import rasterizer
from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError, PdfRenderError


class PdfContentExtractor(BaseContentExtractor):
    """Text layer first; OCR of the leading pages when the layer is too thin.

    A PDF whose text layer yields fewer than `min_text_chars` characters is
    treated as scanned. Up to `ocr_max_pages` pages are rasterized and run
    through OCR. If OCR produces nothing, whatever the text layer had is kept;
    if both are empty the extraction fails.
    """

    def __init__(
        self,
        text_extractor: BasePdfExtractor,
        ocr_engine: BaseOcrEngine | None = None,
        *,
        min_text_chars: int = 50,
        ocr_max_pages: int = 5,
        ocr_dpi: int = 200,
    ) -> None:
        self._text_extractor = text_extractor
        self._ocr_engine = ocr_engine
        self._min_text_chars = min_text_chars
        self._ocr_max_pages = ocr_max_pages
        self._ocr_dpi = ocr_dpi

    def extract(self, path: Path) -> ExtractedContent:
        try:
            text = self._text_extractor.extract(path.read_bytes()).strip()
        except (PdfExtractionError, OSError) as exc:
            raise ExtractionError(f"PDF extraction failed: {exc}") from exc

        if len(text) >= self._min_text_chars:
            return ExtractedContent(text=text, extraction_method="pdf_text_layer")

        if self._ocr_engine is None:
            if text:
                return ExtractedContent(text=text, extraction_method="pdf_text_layer")
            raise ExtractionError("PDF has no text layer and OCR is disabled")

        Log.info(
            f"PDF text layer has {len(text)} chars, falling back to OCR "
            f"on up to {self._ocr_max_pages} pages"
        )
        try:
            ocr_text = self._ocr(path)
        except (OcrError, PdfRenderError) as exc:
            if text:
                Log.warning(f"OCR failed, keeping text layer: {exc}")
                return ExtractedContent(
                    text=text,
                    extraction_method="pdf_text_layer",
                    warnings=[f"OCR failed: {exc}"],
                )
            raise ExtractionError(f"PDF OCR failed: {exc}") from exc

        if ocr_text:
            return ExtractedContent(text=ocr_text, extraction_method="ocr")
        if text:
            return ExtractedContent(
                text=text,
                extraction_method="pdf_text_layer",
                warnings=["OCR found no text"],
            )
        raise ExtractionError("No text found in PDF after OCR")

    def _ocr(self, path: Path) -> str:
        assert self._ocr_engine is not None
        pages = rasterizer.render_pages(path, self._ocr_max_pages, self._ocr_dpi)
        page_texts = []
        for number, image in enumerate(pages, start=1):
            page_text = self._ocr_engine.recognize(image)
            Log.debug(f"OCR page {number}: {len(page_text)} chars")
            if page_text:
                page_texts.append(page_text)
        return "\n\n".join(page_texts).strip()
