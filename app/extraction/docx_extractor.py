from pathlib import Path

import docx

from app.extraction.base import BaseContentExtractor
from app.extraction.exceptions import ExtractionError
from app.extraction.models import ExtractedContent


def read_docx_blocks(path: Path) -> list[str]:
    """Non-empty paragraphs in body order, followed by tables as pipe-joined rows."""
    try:
        document = docx.Document(str(path))
    except Exception as exc:
        raise ExtractionError(f"DOCX extraction failed: {exc}") from exc

    blocks = [p.text.strip() for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        rows = [" | ".join(cell.text.strip() for cell in row.cells) for row in table.rows]
        rows = [row for row in rows if row.replace("|", "").strip()]
        if rows:
            blocks.append("\n".join(rows))
    return blocks


class DocxContentExtractor(BaseContentExtractor):
    """Raw text of a Word document, paragraphs separated by blank lines."""

    def extract(self, path: Path) -> ExtractedContent:
        return ExtractedContent(
            text="\n\n".join(read_docx_blocks(path)),
            extraction_method="docx",
        )
