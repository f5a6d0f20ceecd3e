"""Generic badge used whenever a real preview cannot be drawn."""

from PIL import Image, ImageDraw

from app.thumbnails import canvas

BADGE_SIZE = (300, 400)

GRADIENTS: dict[str, tuple[str, str]] = {
    "pdf": ("#ff6b6b", "#ee5a52"),
    "docx": ("#4f6bed", "#3b5bdb"),
    "pptx": ("#ffa726", "#f59f00"),
    "xlsx": ("#20c997", "#12b886"),
    "csv": ("#20c997", "#12b886"),
}
DEFAULT_GRADIENT = ("#6c757d", "#495057")


def draw_placeholder(file_type: str) -> Image.Image:
    """Type-colored gradient card with a round icon and the type label."""
    width, height = BADGE_SIZE
    top, bottom = GRADIENTS.get(file_type, DEFAULT_GRADIENT)
    image = canvas.vertical_gradient(width, height, top, bottom)
    draw = ImageDraw.Draw(image)

    draw.ellipse((90, 120, 210, 240), fill="#f2f2f2")
    label = (file_type or "file").upper()
    draw.rectangle((125, 155, 175, 205), outline=top, width=4)
    canvas.draw_centered(draw, label[:4], 150, 260, canvas.font(18, bold=True), canvas.WHITE)
    canvas.draw_centered(draw, "DOCUMENT", 150, 284, canvas.font(14), canvas.WHITE)
    draw.rectangle((10, 10, 290, 390), outline="#e6e6e6", width=2)
    return image
