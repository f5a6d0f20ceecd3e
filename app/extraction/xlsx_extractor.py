import csv
import io
from pathlib import Path

from openpyxl import load_workbook

from app.extraction.base import BaseContentExtractor
from app.extraction.exceptions import ExtractionError
from app.extraction.models import ExtractedContent


def _cell_text(value: object) -> str:
    return "" if value is None else str(value)


class XlsxContentExtractor(BaseContentExtractor):
    """Every sheet flattened to CSV under a 'Sheet: <name>' header."""

    def extract(self, path: Path) -> ExtractedContent:
        try:
            workbook = load_workbook(str(path), read_only=True, data_only=True)
        except Exception as exc:
            raise ExtractionError(f"XLSX extraction failed: {exc}") from exc

        parts = []
        try:
            for sheet in workbook.worksheets:
                buffer = io.StringIO()
                writer = csv.writer(buffer, lineterminator="\n")
                for row in sheet.iter_rows(values_only=True):
                    writer.writerow([_cell_text(value) for value in row])
                parts.append(f"Sheet: {sheet.title}\n{buffer.getvalue()}")
        finally:
            workbook.close()

        return ExtractedContent(text="\n".join(parts), extraction_method="xlsx")
