import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any

import httpx

from app.logging.logger import Log
from app.security.base import BaseScanner
from app.security.exceptions import (
    ScannerError,
    ScannerUnavailableError,
    ScanSizeLimitExceededError,
)
from app.security.models import MANUAL_REVIEW_REQUIRED, ScanResult
from app.storage.base import BaseBlobStore


@dataclass(frozen=True)
class PollPolicy:
    """Exponential backoff for polling the analysis endpoint."""

    initial_seconds: float = 2.0
    multiplier: float = 1.5
    max_seconds: float = 10.0
    max_attempts: int = 15

    def intervals(self) -> list[float]:
        waits: list[float] = []
        wait = self.initial_seconds
        for _ in range(self.max_attempts):
            waits.append(wait)
            wait = min(wait * self.multiplier, self.max_seconds)
        return waits


class VirusTotalScanner(BaseScanner):
    """Submits the blob to VirusTotal and polls for the analysis verdict.

    Verdict: any 'malicious' engine, or more than two 'suspicious' ones, is
    unclean. Running out of poll attempts is also unclean and flagged for
    manual review.
    """

    name = "virustotal"

    MAX_SUSPICIOUS = 2

    def __init__(
        self,
        *,
        blob_store: BaseBlobStore,
        api_key: str,
        base_url: str = "https://www.virustotal.com/api/v3",
        timeout_seconds: int = 30,
        max_file_bytes: int = 32 * 1024 * 1024,
        poll_policy: PollPolicy | None = None,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._blob_store = blob_store
        self._base_url = base_url.rstrip("/")
        self._headers = {"x-apikey": api_key}
        self._timeout_seconds = timeout_seconds
        self._max_file_bytes = max_file_bytes
        self._poll_policy = poll_policy or PollPolicy()
        self._sleep = sleep
        # An injected client carries transport settings only; key and URL always come from here.
        self._client = http_client or httpx.Client()

    def scan(self, blob_key: str) -> ScanResult:
        data = self._blob_store.get_buffer(blob_key)
        if len(data) > self._max_file_bytes:
            raise ScanSizeLimitExceededError(
                f"File too large for VirusTotal ({len(data)} bytes)"
            )

        Log.info(f"Uploading {blob_key} to VirusTotal")
        analysis_id = self._submit(PurePosixPath(blob_key).name, data)
        Log.info(f"VirusTotal analysis id for {blob_key}: {analysis_id}")

        for attempt, wait in enumerate(self._poll_policy.intervals(), start=1):
            self._sleep(wait)
            Log.debug(
                f"Checking VirusTotal analysis {analysis_id} "
                f"(attempt {attempt}/{self._poll_policy.max_attempts})"
            )
            attributes = self._fetch_analysis(analysis_id)
            if attributes.get("status") == "completed":
                return self._verdict(blob_key, analysis_id, attributes.get("stats") or {})

        Log.warning(f"VirusTotal scan timeout for {blob_key}, flagging for manual review")
        return ScanResult(
            clean=False,
            scanner=self.name,
            details="Scan timeout - requires manual review",
            threat="Unable to complete scan",
            warning=MANUAL_REVIEW_REQUIRED,
            analysis_id=analysis_id,
        )

    def _submit(self, filename: str, data: bytes) -> str:
        try:
            response = self._client.post(
                f"{self._base_url}/files",
                headers=self._headers,
                timeout=self._timeout_seconds,
                files={"file": (filename, data, "application/octet-stream")},
            )
        except httpx.HTTPError as exc:
            raise ScannerUnavailableError(f"VirusTotal upload failed: {exc}") from exc
        if response.is_error:
            raise ScannerError(
                f"VirusTotal upload failed: {response.status_code} - {response.text}"
            )
        try:
            return str(response.json()["data"]["id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise ScannerError(f"Unexpected VirusTotal upload response: {exc}") from exc

    def _fetch_analysis(self, analysis_id: str) -> dict[str, Any]:
        try:
            response = self._client.get(
                f"{self._base_url}/analyses/{analysis_id}",
                headers=self._headers,
                timeout=self._timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise ScannerUnavailableError(f"VirusTotal analysis fetch failed: {exc}") from exc
        if response.is_error:
            raise ScannerError(f"Failed to fetch analysis: {response.status_code}")
        try:
            attributes = response.json()["data"]["attributes"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ScannerError(f"Unexpected VirusTotal analysis response: {exc}") from exc
        if not isinstance(attributes, dict):
            raise ScannerError("VirusTotal analysis attributes must be an object")
        return attributes

    def _verdict(self, blob_key: str, analysis_id: str, stats: dict[str, Any]) -> ScanResult:
        malicious = int(stats.get("malicious", 0) or 0)
        suspicious = int(stats.get("suspicious", 0) or 0)
        harmless = int(stats.get("harmless", 0) or 0)
        undetected = int(stats.get("undetected", 0) or 0)
        counts = {
            "malicious": malicious,
            "suspicious": suspicious,
            "harmless": harmless,
            "undetected": undetected,
        }
        Log.info(
            f"VirusTotal results for {blob_key}: malicious={malicious} "
            f"suspicious={suspicious} harmless={harmless} undetected={undetected}"
        )

        if malicious > 0 or suspicious > self.MAX_SUSPICIOUS:
            Log.error(f"Threat detected in {blob_key}")
            return ScanResult(
                clean=False,
                scanner=self.name,
                details=(
                    f"Detected by {malicious} engines as malicious "
                    f"({suspicious} flagged as suspicious)"
                ),
                threat="Malware detected" if malicious > 0 else "Suspicious content detected",
                stats=counts,
                analysis_id=analysis_id,
            )

        return ScanResult(
            clean=True,
            scanner=self.name,
            details=f"Scanned by {harmless + undetected} engines - Clean",
            stats=counts,
            analysis_id=analysis_id,
        )
