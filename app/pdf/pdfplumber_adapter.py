import io

import pdfplumber

from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Reads the PDF text layer with pdfplumber, one block per page."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [(page.extract_text() or "").strip() for page in pdf.pages]
        except Exception as exc:
            raise PdfExtractionError(f"PDF extraction failed: {exc}") from exc
        return "\n\n".join(page for page in pages if page)
