import pymupdf

from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Reads the PDF text layer with PyMuPDF, one block per page."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text().strip() for page in doc]
        except Exception as exc:
            raise PdfExtractionError(f"PDF extraction failed: {exc}") from exc
        return "\n\n".join(page for page in pages if page)
