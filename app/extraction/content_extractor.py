from collections.abc import Mapping
from pathlib import Path

from app.extraction.base import BaseContentExtractor
from app.extraction.exceptions import ExtractionError, UnsupportedFileTypeError
from app.extraction.models import ExtractedContent
from app.logging.logger import Log
from app.processor.exceptions import EmptyContentError
from app.processor.models import FileType


class ContentExtractor:
    """Dispatches extraction to the extractor registered for the file type."""

    def __init__(self, extractors: Mapping[FileType, BaseContentExtractor]) -> None:
        self._extractors = dict(extractors)

    def extract(self, path: Path, file_type: FileType) -> ExtractedContent:
        """Extract text from a local file.

        Raises:
            UnsupportedFileTypeError: if no extractor handles file_type.
            EmptyContentError: if the result is empty or whitespace only.
            ExtractionError: on any other extraction failure.
        """
        extractor = self._extractors.get(file_type)
        if extractor is None:
            raise UnsupportedFileTypeError(f"Unsupported file type: {file_type.value}")

        try:
            content = extractor.extract(path)
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"{file_type.value.upper()} extraction failed: {exc}") from exc

        if not content.text.strip():
            raise EmptyContentError("No content extracted from document")

        for warning in content.warnings:
            Log.warning(f"Extraction warning ({file_type.value}): {warning}")
        return content
