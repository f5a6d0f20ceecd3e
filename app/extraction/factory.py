from app.config.settings import Settings
from app.extraction.base import BaseContentExtractor
from app.extraction.content_extractor import ContentExtractor
from app.extraction.csv_extractor import CsvContentExtractor
from app.extraction.docx_extractor import DocxContentExtractor
from app.extraction.pdf_extractor import PdfContentExtractor
from app.extraction.pptx_extractor import PptxContentExtractor
from app.extraction.xlsx_extractor import XlsxContentExtractor
from app.ocr.base import BaseOcrEngine
from app.ocr.tesseract_adapter import TesseractOcrEngine
from app.pdf.factory import PdfExtractorFactory
from app.processor.models import FileType


class ContentExtractorFactory:
    """Builds the per-format extractor table from settings."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        ocr_engine: BaseOcrEngine | None = None,
    ) -> ContentExtractor:
        if ocr_engine is None and settings.ocr_enabled:
            ocr_engine = TesseractOcrEngine(language=settings.ocr_language)

        extractors: dict[FileType, BaseContentExtractor] = {
            FileType.PDF: PdfContentExtractor(
                PdfExtractorFactory.create(settings),
                ocr_engine if settings.ocr_enabled else None,
                min_text_chars=settings.pdf_min_text_chars,
                ocr_max_pages=settings.ocr_max_pages,
                ocr_dpi=settings.ocr_dpi,
            ),
            FileType.DOCX: DocxContentExtractor(),
            FileType.PPTX: PptxContentExtractor(),
            FileType.XLSX: XlsxContentExtractor(),
            FileType.CSV: CsvContentExtractor(),
        }
        return ContentExtractor(extractors)
