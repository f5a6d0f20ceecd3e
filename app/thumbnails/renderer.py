"""First-page preview images, one drawer per file type.

Rendering never fails the pipeline: a drawer error produces the placeholder
badge, and only a failure to write even that badge yields None.
"""

from collections.abc import Callable
from pathlib import Path

from PIL import Image

from app.logging.logger import Log
from app.processor.models import FileType
from app.thumbnails import canvas
from app.thumbnails.docx_thumbnail import draw_docx
from app.thumbnails.pdf_thumbnail import draw_pdf
from app.thumbnails.placeholder import draw_placeholder
from app.thumbnails.pptx_thumbnail import draw_pptx
from app.thumbnails.sheet_thumbnail import draw_sheet


class ThumbnailRenderer:
    DRAWERS: dict[FileType, Callable[[Path], Image.Image]] = {
        FileType.PDF: draw_pdf,
        FileType.DOCX: draw_docx,
        FileType.PPTX: draw_pptx,
        FileType.XLSX: lambda path: draw_sheet(path, "xlsx"),
        FileType.CSV: lambda path: draw_sheet(path, "csv"),
    }

    def __init__(self, jpeg_quality: int = 90) -> None:
        self._jpeg_quality = jpeg_quality

    def render(self, path: Path, file_type: FileType | str, output_path: Path) -> Path | None:
        """Write a JPEG preview of `path` to `output_path` and return it."""
        type_name = file_type.value if isinstance(file_type, FileType) else str(file_type)
        Log.info(f"Generating first page thumbnail for {type_name}: {path.name}")

        drawer = self._drawer_for(type_name)
        if drawer is None or not path.exists():
            Log.warning(f"No preview available for {path.name} ({type_name}), using placeholder")
            return self.render_placeholder(type_name, output_path)

        try:
            image = drawer(path)
            canvas.save_jpeg(image, output_path, self._jpeg_quality)
        except Exception as exc:
            Log.error(f"Thumbnail generation failed for {path.name}: {exc}")
            return self.render_placeholder(type_name, output_path)

        Log.info(f"Thumbnail saved: {output_path}")
        return output_path

    def _drawer_for(self, type_name: str) -> Callable[[Path], Image.Image] | None:
        try:
            return self.DRAWERS.get(FileType(type_name))
        except ValueError:
            return None

    def render_placeholder(self, file_type: str, output_path: Path) -> Path | None:
        try:
            return canvas.save_jpeg(draw_placeholder(file_type), output_path, self._jpeg_quality)
        except Exception as exc:
            Log.error(f"Fallback thumbnail generation failed: {exc}")
            return None

