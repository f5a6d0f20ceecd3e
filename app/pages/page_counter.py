"""Per-format page counting, independent of text extraction.

"Pages" are PDF pages, PPTX slides and XLSX sheets. Formats without a
structural page count (DOCX, or any structural read failure) are estimated
from the extracted text at 500 words or 3000 characters per page.
"""

import math
import zipfile
from collections.abc import Callable
from pathlib import Path

from openpyxl import load_workbook

from app.extraction.pptx_extractor import slide_entries
from app.logging.logger import Log
from app.pdf import rasterizer
from app.processor.models import FileType

WORDS_PER_PAGE = 500
CHARS_PER_PAGE = 3000


def estimate_page_count(text: str) -> int:
    """Rounded average of the word-based and character-based page estimates."""
    by_words = math.ceil(len(text.split()) / WORDS_PER_PAGE)
    by_chars = math.ceil(len(text) / CHARS_PER_PAGE)
    return max(1, math.floor((by_words + by_chars) / 2 + 0.5))


def _pdf_pages(path: Path, _text: str) -> int:
    return rasterizer.page_count(path)


def _docx_pages(_path: Path, text: str) -> int:
    return estimate_page_count(text)


def _pptx_slides(path: Path, _text: str) -> int:
    with zipfile.ZipFile(path) as archive:
        return len(slide_entries(archive))


def _xlsx_sheets(path: Path, _text: str) -> int:
    workbook = load_workbook(str(path), read_only=True)
    try:
        return len(workbook.sheetnames)
    finally:
        workbook.close()


def _single_page(_path: Path, _text: str) -> int:
    return 1


class PageCounter:
    """Counts pages with the strategy registered for each file type."""

    STRATEGIES: dict[FileType, Callable[[Path, str], int]] = {
        FileType.PDF: _pdf_pages,
        FileType.DOCX: _docx_pages,
        FileType.PPTX: _pptx_slides,
        FileType.XLSX: _xlsx_sheets,
        FileType.CSV: _single_page,
    }

    def count_pages(self, path: Path, file_type: FileType, extracted_text: str) -> int:
        """Return a positive page count; never raises for a readable text argument."""
        strategy = self.STRATEGIES.get(file_type)
        if strategy is None:
            return estimate_page_count(extracted_text)
        try:
            count = max(1, strategy(path, extracted_text))
        except Exception as exc:
            Log.error(f"Error calculating page count for {file_type.value}: {exc}")
            return estimate_page_count(extracted_text)
        Log.info(f"{file_type.value.upper()} page count: {count}")
        return count
