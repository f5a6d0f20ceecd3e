from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text-layer extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from the PDF's text layer.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Extracted text as a single normalized string. Scanned (image-only)
            pages contribute nothing.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """
