import math
from pathlib import Path

from PIL import Image, ImageDraw

from app.logging.logger import Log
from app.pdf import rasterizer
from app.pdf.exceptions import PdfRenderError
from app.thumbnails import canvas

PREVIEW_WIDTH = 1200

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size_bytes: int) -> str:
    """Human readable size, e.g. 1536 -> '1.5 KB'."""
    if size_bytes <= 0:
        return "0 Bytes"
    exponent = min(int(math.log(size_bytes, 1024)), len(_SIZE_UNITS) - 1)
    value = round(size_bytes / 1024**exponent, 2)
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def draw_pdf(path: Path) -> Image.Image:
    """The first page rendered at preview width, or an info card if rendering fails."""
    try:
        return rasterizer.render_first_page(path, PREVIEW_WIDTH)
    except PdfRenderError as exc:
        Log.warning(f"PDF thumbnail render failed, drawing info card: {exc}")
        return draw_pdf_card(path)


def draw_pdf_card(path: Path) -> Image.Image:
    """Red card naming the page count and file size of an unrenderable PDF."""
    page_count = 1
    file_size = "Unknown"
    try:
        file_size = format_file_size(path.stat().st_size)
        page_count = rasterizer.page_count(path)
    except (OSError, PdfRenderError) as exc:
        Log.warning(f"Could not determine PDF details for fallback card: {exc}")

    image = canvas.vertical_gradient(300, 400, "#dc3545", "#c82333")
    draw = ImageDraw.Draw(image)
    draw.rounded_rectangle((20, 20, 280, 320), radius=10, fill=canvas.WHITE, outline="#d9d9d9")
    draw.rectangle((120, 50, 180, 125), outline="#dc3545", width=5)
    canvas.draw_centered(draw, "PDF DOCUMENT", 150, 165, canvas.font(24, bold=True), "#2c3e50")
    pages = f"{page_count} Page{'s' if page_count != 1 else ''}"
    canvas.draw_centered(draw, pages, 150, 202, canvas.font(16, bold=True), "#6c757d")
    canvas.draw_centered(draw, file_size, 150, 230, canvas.font(14), "#6c757d")
    canvas.draw_centered(draw, "Preview Generated", 150, 258, canvas.font(12), "#adb5bd")
    return image
