class PdfExtractionError(Exception):
    """Raised when text cannot be extracted from a PDF."""


class PdfRenderError(Exception):
    """Raised when a PDF page cannot be rasterized."""
