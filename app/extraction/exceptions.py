class ExtractionError(Exception):
    """Raised when text content cannot be extracted from a document."""


class UnsupportedFileTypeError(ExtractionError):
    """Raised when no extractor is registered for a file type."""
