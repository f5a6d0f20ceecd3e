from pathlib import Path

from PIL import Image, ImageDraw

from app.extraction.pptx_extractor import read_slide_texts
from app.thumbnails import canvas

SLIDE_SIZE = (1200, 900)
CONTENT_BOXES = (
    (150, 300, 1050, 400),
    (150, 420, 570, 720),
    (630, 420, 1050, 720),
)


def draw_pptx(path: Path) -> Image.Image:
    """4:3 slide mockup titled with the first slide's leading text runs."""
    slides = read_slide_texts(path)
    first = slides[0] if slides else []
    title = canvas.truncate(first[0], 40, 37) if first else "PRESENTATION"
    subtitle = canvas.truncate(first[1], 60, 57) if len(first) > 1 else "First Slide Preview"

    width, height = SLIDE_SIZE
    image = canvas.blank_page(width, height)
    draw = ImageDraw.Draw(image)
    canvas.draw_centered(draw, title, width // 2, 110, canvas.font(48, bold=True), "#000000")
    canvas.draw_centered(draw, subtitle, width // 2, 195, canvas.font(28), "#333333")
    for box in CONTENT_BOXES:
        draw.rectangle(box, fill="#f5f5f5")
    return image
