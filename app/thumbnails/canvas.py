"""Small Pillow drawing helpers shared by the per-format thumbnail drawers."""

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont

WHITE = "#ffffff"

_BOLD_FONT_FILES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")


def font(size: int, bold: bool = False) -> Font:
    """A scalable font; bold falls back to the regular default face when unavailable."""
    if bold:
        for name in _BOLD_FONT_FILES:
            try:
                return ImageFont.truetype(name, size)
            except OSError:
                continue
    return ImageFont.load_default(size=size)


def blank_page(width: int, height: int, color: str = WHITE) -> Image.Image:
    return Image.new("RGB", (width, height), color)


def vertical_gradient(width: int, height: int, top: str, bottom: str) -> Image.Image:
    mask = Image.linear_gradient("L").resize((width, height))
    return Image.composite(
        Image.new("RGB", (width, height), bottom),
        Image.new("RGB", (width, height), top),
        mask,
    )


def text_width(draw: ImageDraw.ImageDraw, text: str, text_font: Font) -> float:
    return draw.textlength(text, font=text_font)


def draw_centered(
    draw: ImageDraw.ImageDraw,
    text: str,
    center_x: int,
    top: int,
    text_font: Font,
    fill: str,
) -> None:
    left = center_x - text_width(draw, text, text_font) / 2
    draw.text((left, top), text, font=text_font, fill=fill)


def wrap_words(
    draw: ImageDraw.ImageDraw,
    text: str,
    text_font: Font,
    max_width: int,
) -> list[str]:
    """Greedy word wrap; a single over-long word still gets its own line."""
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}".strip()
        if current and text_width(draw, candidate, text_font) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def truncate(text: str, limit: int, keep: int) -> str:
    return text if len(text) <= limit else text[:keep] + "..."


def save_jpeg(image: Image.Image, output_path: Path, quality: int) -> Path:
    image.convert("RGB").save(output_path, format="JPEG", quality=quality)
    return output_path
