from pathlib import Path

from app.extraction.base import BaseContentExtractor
from app.extraction.exceptions import ExtractionError
from app.extraction.models import ExtractedContent


def read_csv_text(path: Path) -> tuple[str, list[str]]:
    """File content as text, decoded as UTF-8 with a latin-1 fallback."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ExtractionError(f"CSV extraction failed: {exc}") from exc
    try:
        return raw.decode("utf-8-sig"), []
    except UnicodeDecodeError:
        return raw.decode("latin-1"), ["File decoded with latin-1 fallback"]


class CsvContentExtractor(BaseContentExtractor):
    """The CSV file verbatim."""

    def extract(self, path: Path) -> ExtractedContent:
        text, warnings = read_csv_text(path)
        return ExtractedContent(text=text, extraction_method="csv", warnings=warnings)
