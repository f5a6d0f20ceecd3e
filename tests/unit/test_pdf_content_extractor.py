from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from app.extraction.exceptions import ExtractionError
from app.extraction.pdf_extractor import PdfContentExtractor
from app.ocr.base import BaseOcrEngine
from app.ocr.exceptions import OcrError
from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter

LONG_TEXT = "This text layer is comfortably longer than the fifty character threshold."


def _write_pdf(tmp_path: Path, data: bytes) -> Path:
    path = tmp_path / "doc.pdf"
    path.write_bytes(data)
    return path


def _text_layer(text: str) -> MagicMock:
    extractor = MagicMock(spec=BasePdfExtractor)
    extractor.extract.return_value = text
    return extractor


def _ocr(*texts: str) -> MagicMock:
    engine = MagicMock(spec=BaseOcrEngine)
    engine.recognize.side_effect = list(texts)
    return engine


class TestTextLayer:
    def test_uses_text_layer_when_long_enough(self, tmp_path: Path) -> None:
        ocr = _ocr()
        extractor = PdfContentExtractor(_text_layer(LONG_TEXT), ocr)

        content = extractor.extract(_write_pdf(tmp_path, b"%PDF"))

        assert content.text == LONG_TEXT
        assert content.extraction_method == "pdf_text_layer"
        ocr.recognize.assert_not_called()

    def test_real_pdf_text_layer(self, tmp_path: Path, report_pdf_bytes: bytes) -> None:
        extractor = PdfContentExtractor(PdfPlumberAdapter(), None)

        content = extractor.extract(_write_pdf(tmp_path, report_pdf_bytes))

        assert "Quarterly Research Report" in content.text

    def test_text_layer_error_becomes_extraction_error(self, tmp_path: Path) -> None:
        text_layer = MagicMock(spec=BasePdfExtractor)
        text_layer.extract.side_effect = PdfExtractionError("broken xref")

        with pytest.raises(ExtractionError, match="broken xref"):
            PdfContentExtractor(text_layer).extract(_write_pdf(tmp_path, b"%PDF"))


class TestOcrFallback:
    @patch("app.extraction.pdf_extractor.rasterizer.render_pages")
    def test_ocr_used_when_text_layer_thin(self, mock_render: MagicMock, tmp_path: Path) -> None:
        mock_render.return_value = [Image.new("RGB", (10, 10)), Image.new("RGB", (10, 10))]
        extractor = PdfContentExtractor(
            _text_layer(""), _ocr("Scanned page one", "Scanned page two"), ocr_max_pages=2
        )

        content = extractor.extract(_write_pdf(tmp_path, b"%PDF"))

        assert content.text == "Scanned page one\n\nScanned page two"
        assert content.extraction_method == "ocr"
        mock_render.assert_called_once_with(tmp_path / "doc.pdf", 2, 200)

    @patch("app.extraction.pdf_extractor.rasterizer.render_pages")
    def test_keeps_short_text_layer_when_ocr_fails(
        self, mock_render: MagicMock, tmp_path: Path
    ) -> None:
        mock_render.return_value = [Image.new("RGB", (10, 10))]
        ocr = MagicMock(spec=BaseOcrEngine)
        ocr.recognize.side_effect = OcrError("tesseract missing")

        content = PdfContentExtractor(_text_layer("short"), ocr).extract(
            _write_pdf(tmp_path, b"%PDF")
        )

        assert content.text == "short"
        assert content.extraction_method == "pdf_text_layer"
        assert "OCR failed" in content.warnings[0]

    @patch("app.extraction.pdf_extractor.rasterizer.render_pages")
    def test_raises_when_nothing_found(self, mock_render: MagicMock, tmp_path: Path) -> None:
        mock_render.return_value = [Image.new("RGB", (10, 10))]

        with pytest.raises(ExtractionError, match="No text found"):
            PdfContentExtractor(_text_layer(""), _ocr("")).extract(_write_pdf(tmp_path, b"%PDF"))

    def test_raises_without_ocr_and_without_text(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionError, match="OCR is disabled"):
            PdfContentExtractor(_text_layer(""), None).extract(_write_pdf(tmp_path, b"%PDF"))

    def test_short_text_kept_when_ocr_disabled(self, tmp_path: Path) -> None:
        content = PdfContentExtractor(_text_layer("tiny"), None).extract(
            _write_pdf(tmp_path, b"%PDF")
        )

        assert content.text == "tiny"
