import httpx

from app.config.settings import Settings
from app.logging.logger import Log
from app.security.base import BaseScanner
from app.security.fallback_scanner import FallbackScanner
from app.security.signature_scanner import SignatureScanner
from app.security.virustotal_scanner import PollPolicy, VirusTotalScanner
from app.storage.base import BaseBlobStore


class ScannerFactory:
    """Builds the two-tier scanner from settings."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        blob_store: BaseBlobStore,
        http_client: httpx.Client | None = None,
    ) -> BaseScanner:
        fallback = SignatureScanner(
            blob_store=blob_store,
            max_file_bytes=settings.signature_scan_max_file_bytes,
        )
        if not settings.virustotal_api_key:
            Log.warning("VirusTotal API key not configured, using basic validation only")
            return FallbackScanner(primary=None, fallback=fallback)

        primary = VirusTotalScanner(
            blob_store=blob_store,
            api_key=settings.virustotal_api_key,
            base_url=settings.virustotal_base_url,
            timeout_seconds=settings.virustotal_timeout_seconds,
            max_file_bytes=settings.virustotal_max_file_bytes,
            poll_policy=PollPolicy(
                initial_seconds=settings.virustotal_poll_initial_seconds,
                multiplier=settings.virustotal_poll_multiplier,
                max_seconds=settings.virustotal_poll_max_seconds,
                max_attempts=settings.virustotal_poll_max_attempts,
            ),
            http_client=http_client,
        )
        return FallbackScanner(primary=primary, fallback=fallback)
