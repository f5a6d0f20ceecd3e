import re
import zipfile
from pathlib import Path
from xml.etree import ElementTree as ET

from app.extraction.base import BaseContentExtractor
from app.extraction.exceptions import ExtractionError
from app.extraction.models import ExtractedContent
from app.logging.logger import Log

PLACEHOLDER_TEXT = (
    "Presentation content extracted from PPTX file. "
    "Slide text could not be read from this presentation."
)

_SLIDE_PATTERN = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
_TEXT_RUN_TAG = "{http://schemas.openxmlformats.org/drawingml/2006/main}t"


def slide_entries(archive: zipfile.ZipFile) -> list[str]:
    """Slide part names in presentation order (slide2 before slide10)."""
    numbered = []
    for name in archive.namelist():
        match = _SLIDE_PATTERN.match(name)
        if match:
            numbered.append((int(match.group(1)), name))
    return [name for _, name in sorted(numbered)]


def read_slide_texts(path: Path) -> list[list[str]]:
    """Text runs of each slide, one list per slide.

    Raises:
        ExtractionError: if the file is not a readable OOXML archive.
    """
    try:
        with zipfile.ZipFile(path) as archive:
            slides = []
            for name in slide_entries(archive):
                try:
                    root = ET.fromstring(archive.read(name))
                except ET.ParseError:
                    Log.warning(f"Skipping unparseable slide part {name}")
                    slides.append([])
                    continue
                runs = [
                    node.text.strip()
                    for node in root.iter(_TEXT_RUN_TAG)
                    if node.text and node.text.strip()
                ]
                slides.append(runs)
            return slides
    except (zipfile.BadZipFile, OSError) as exc:
        raise ExtractionError(f"PPTX extraction failed: {exc}") from exc


class PptxContentExtractor(BaseContentExtractor):
    """Slide text from the OOXML parts; a fixed sentence when slides carry no text."""

    def extract(self, path: Path) -> ExtractedContent:
        slides = read_slide_texts(path)
        sections = [
            f"Slide {number}:\n" + "\n".join(runs)
            for number, runs in enumerate(slides, start=1)
            if runs
        ]
        if not sections:
            return ExtractedContent(
                text=PLACEHOLDER_TEXT,
                extraction_method="pptx_placeholder",
                warnings=["No readable slide text"],
            )
        return ExtractedContent(text="\n\n".join(sections), extraction_method="pptx_slides")
