from app.config.settings import Settings
from app.pdf.base import BasePdfExtractor
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Selects the PDF text-layer engine (the fast path before OCR)."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        return cls.create_for(settings.pdf_engine)

    @classmethod
    def create_for(cls, engine: str) -> BasePdfExtractor:
        adapter_cls = cls.ADAPTERS.get(engine.strip().lower())
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF text engine '{engine}'. Choose from: {sorted(cls.ADAPTERS)}"
            )
        return adapter_cls()
