"""Rasterize PDF pages into Pillow images with PyMuPDF."""

import io
from pathlib import Path

import pymupdf
from PIL import Image

from app.pdf.exceptions import PdfRenderError


def page_count(path: Path) -> int:
    """Structural page count read from the page tree."""
    try:
        with pymupdf.open(str(path)) as doc:  # type: ignore[no-untyped-call]
            return int(doc.page_count)
    except Exception as exc:
        raise PdfRenderError(f"Could not open PDF {path.name}: {exc}") from exc


def render_pages(path: Path, max_pages: int, dpi: int) -> list[Image.Image]:
    """Render up to max_pages leading pages at the given resolution."""
    try:
        with pymupdf.open(str(path)) as doc:  # type: ignore[no-untyped-call]
            images = []
            for index in range(min(max_pages, doc.page_count)):
                pixmap = doc[index].get_pixmap(dpi=dpi)
                images.append(_to_image(pixmap.tobytes("png")))
            return images
    except Exception as exc:
        raise PdfRenderError(f"PDF rasterization failed: {exc}") from exc


def render_first_page(path: Path, width: int) -> Image.Image:
    """Render the first page scaled so the image is `width` pixels wide."""
    try:
        with pymupdf.open(str(path)) as doc:  # type: ignore[no-untyped-call]
            if doc.page_count == 0:
                raise PdfRenderError("PDF has no pages")
            page = doc[0]
            zoom = width / max(page.rect.width, 1)
            pixmap = page.get_pixmap(matrix=pymupdf.Matrix(zoom, zoom), alpha=False)
            return _to_image(pixmap.tobytes("png"))
    except PdfRenderError:
        raise
    except Exception as exc:
        raise PdfRenderError(f"PDF first page render failed: {exc}") from exc


def _to_image(png_bytes: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(png_bytes))
    image.load()
    return image.convert("RGB")
