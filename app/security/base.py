from abc import ABC, abstractmethod

from app.security.models import ScanResult


class BaseScanner(ABC):
    """Contract for all security scanners."""

    name: str = "scanner"

    @abstractmethod
    def scan(self, blob_key: str) -> ScanResult:
        """Scan the blob stored under blob_key.

        Returns:
            ScanResult; clean=False means the file must not be ingested.

        Raises:
            ScannerError: if no verdict could be produced.
        """
