from abc import ABC, abstractmethod

from PIL import Image


class BaseOcrEngine(ABC):
    """Contract for OCR engines: one page image in, its text out."""

    @abstractmethod
    def recognize(self, image: Image.Image) -> str:
        """Return the text found on the image ('' when there is none).

        Raises:
            OcrError: if the engine fails.
        """
