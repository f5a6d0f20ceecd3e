from pathlib import Path

from PIL import Image, ImageDraw

from app.extraction.docx_extractor import read_docx_blocks
from app.thumbnails import canvas

PAGE_SIZE = (1200, 1600)
MARGIN = 80
LINE_HEIGHT = 35
MAX_LINES = 40


def draw_docx(path: Path) -> Image.Image:
    """A simulated first page: bold first paragraph, wrapped body text below."""
    width, height = PAGE_SIZE
    image = canvas.blank_page(width, height)
    draw = ImageDraw.Draw(image)
    content_width = width - 2 * MARGIN
    bottom = height - MARGIN

    paragraphs = [line.strip() for block in read_docx_blocks(path) for line in block.split("\n")]
    paragraphs = [line for line in paragraphs if line] or ["Document content"]

    y = MARGIN + 40
    for index, paragraph in enumerate(paragraphs[:MAX_LINES]):
        if index == 0:
            text_font, fill = canvas.font(32, bold=True), "#000000"
        else:
            text_font, fill = canvas.font(18), "#1a1a1a"
        for line in canvas.wrap_words(draw, paragraph, text_font, content_width):
            if y > bottom:
                return image
            draw.text((MARGIN, y), line, font=text_font, fill=fill)
            y += LINE_HEIGHT
    return image
