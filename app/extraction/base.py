from abc import ABC, abstractmethod
from pathlib import Path

from app.extraction.models import ExtractedContent


class BaseContentExtractor(ABC):
    """Contract for per-format text extractors."""

    @abstractmethod
    def extract(self, path: Path) -> ExtractedContent:
        """Extract text from the local file at path.

        Raises:
            ExtractionError: if the file cannot be read.
        """
