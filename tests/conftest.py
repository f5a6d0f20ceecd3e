import io
import zipfile
from collections.abc import Callable
from pathlib import Path

import docx
import pytest
from openpyxl import Workbook
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from app.storage.local_disk import LocalDiskBlobStore

_PPTX_SLIDE = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<p:sld xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main">'
    "<p:cSld><p:spTree>{runs}</p:spTree></p:cSld></p:sld>"
)
_PPTX_RUN = "<p:sp><p:txBody><a:p><a:r><a:t>{text}</a:t></a:r></a:p></p:txBody></p:sp>"


def _pdf_bytes(pages: list[list[str]]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 16
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf_bytes([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _pdf_bytes([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf_bytes([[]])


@pytest.fixture()
def report_pdf_bytes() -> bytes:
    """Three pages of real prose, enough to pass the text-layer threshold."""
    body = [
        "Quarterly Research Report",
        "The research team ran every experiment twice to confirm the theory.",
        "Each scientist recorded the discovery in the shared lab notebook.",
    ]
    return _pdf_bytes([body, body[1:], body[1:]])


@pytest.fixture()
def make_docx(tmp_path: Path) -> Callable[..., Path]:
    def _make(paragraphs: list[str], name: str = "sample.docx") -> Path:
        document = docx.Document()
        for text in paragraphs:
            document.add_paragraph(text)
        path = tmp_path / name
        document.save(str(path))
        return path

    return _make


@pytest.fixture()
def make_xlsx(tmp_path: Path) -> Callable[..., Path]:
    def _make(sheets: dict[str, list[list[object]]], name: str = "sample.xlsx") -> Path:
        workbook = Workbook()
        workbook.remove(workbook.active)
        for title, rows in sheets.items():
            sheet = workbook.create_sheet(title)
            for row in rows:
                sheet.append(row)
        path = tmp_path / name
        workbook.save(str(path))
        return path

    return _make


@pytest.fixture()
def make_pptx(tmp_path: Path) -> Callable[..., Path]:
    """Minimal OOXML archive holding only the slide parts the worker reads."""

    def _make(slides: list[list[str]], name: str = "sample.pptx") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("[Content_Types].xml", "<Types/>")
            for number, texts in enumerate(slides, start=1):
                runs = "".join(_PPTX_RUN.format(text=text) for text in texts)
                archive.writestr(f"ppt/slides/slide{number}.xml", _PPTX_SLIDE.format(runs=runs))
        return path

    return _make


@pytest.fixture()
def blob_store(tmp_path: Path) -> LocalDiskBlobStore:
    return LocalDiskBlobStore(tmp_path / "blobs")
