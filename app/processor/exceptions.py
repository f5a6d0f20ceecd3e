from typing import Any

from app.extraction.exceptions import ExtractionError


class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class NonRetryableError(Exception):
    """Marker for failures that will not go away on redelivery."""


class DocumentNotFoundError(ProcessorError, NonRetryableError):
    """Raised when a document cannot be found in the database."""


class UnsafeDocumentError(ProcessorError, NonRetryableError):
    """Raised when the security scan reports the uploaded file as unclean."""

    def __init__(self, message: str, scan_result: dict[str, Any]) -> None:
        super().__init__(message)
        self.scan_result = scan_result


class EmptyContentError(ProcessorError, ExtractionError):
    """Raised when extraction produced no usable text. Retryable."""


class DocumentStateConflictError(ProcessorError, NonRetryableError):
    """Raised when the document left 'processing' while the pipeline was running."""
