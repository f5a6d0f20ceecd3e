from app.logging.logger import Log
from app.security.base import BaseScanner
from app.security.models import ScanResult


class FallbackScanner(BaseScanner):
    """Tries the primary scanner and falls back to the secondary on any error.

    A verdict from the primary, clean or not, is final. Only a failure to
    produce a verdict (unreachable service, oversized file, bad response)
    routes the blob to the fallback, which applies its own fail-closed rules.
    """

    def __init__(self, primary: BaseScanner | None, fallback: BaseScanner) -> None:
        self._primary = primary
        self._fallback = fallback
        self.name = primary.name if primary is not None else fallback.name

    def scan(self, blob_key: str) -> ScanResult:
        Log.info(f"Starting security scan for {blob_key}")
        if self._primary is None:
            return self._fallback.scan(blob_key)
        try:
            return self._primary.scan(blob_key)
        except Exception as exc:
            Log.warning(
                f"{self._primary.name} scan failed for {blob_key}, "
                f"using {self._fallback.name}: {exc}"
            )
            return self._fallback.scan(blob_key)
