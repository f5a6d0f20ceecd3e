"""Local heuristic validation used when the scanning service is not available.

Checks, in order:
1. Blocked executable extensions.
2. Empty or oversized files.
3. Magic-number signature against the claimed extension.
4. Suspicious byte patterns (embedded scripts, shebangs, eval calls).
Any hit produces an unclean verdict.
"""

from typing import ClassVar

from app.logging.logger import Log
from app.security.base import BaseScanner
from app.security.models import ScanResult
from app.storage.base import BaseBlobStore
from app.storage.keys import key_extension

_ZIP_SIGNATURE = b"PK\x03\x04"


class SignatureScanner(BaseScanner):
    """Extension, size, signature and byte-pattern validation."""

    name = "basic-validation"

    DANGEROUS_EXTENSIONS: ClassVar[frozenset[str]] = frozenset(
        {
            "exe", "bat", "cmd", "scr", "pif", "com", "vbs", "js", "jar",
            "wsf", "msi", "app", "deb", "rpm", "dmg", "pkg", "run", "bin",
        }
    )
    SIGNATURES: ClassVar[dict[str, bytes]] = {
        "pdf": b"%PDF",
        "docx": _ZIP_SIGNATURE,
        "xlsx": _ZIP_SIGNATURE,
        "pptx": _ZIP_SIGNATURE,
    }
    SUSPICIOUS_PATTERNS: ClassVar[tuple[bytes, ...]] = (
        b"eval(",
        b"<script",
        b"<?php",
        b"#!/bin/",
    )

    def __init__(self, blob_store: BaseBlobStore, max_file_bytes: int) -> None:
        self._blob_store = blob_store
        self._max_file_bytes = max_file_bytes

    def scan(self, blob_key: str) -> ScanResult:
        data = self._blob_store.get_buffer(blob_key)
        return self.inspect(data, key_extension(blob_key), blob_key)

    def inspect(self, data: bytes, extension: str, label: str = "") -> ScanResult:
        """Validate raw bytes claimed to be of the given extension."""
        if extension in self.DANGEROUS_EXTENSIONS:
            return self._unclean(
                f"Blocked executable file type: .{extension}",
                "Executable file type blocked",
            )
        if not data:
            return self._unclean("Empty file detected", "Invalid file")
        if len(data) > self._max_file_bytes:
            limit_mb = self._max_file_bytes // (1024 * 1024)
            return self._unclean(f"File exceeds {limit_mb}MB limit", "File too large")
        if not self._signature_matches(data, extension):
            return self._unclean(
                "File signature doesn't match extension",
                "Potential file spoofing",
            )
        for pattern in self.SUSPICIOUS_PATTERNS:
            if pattern in data:
                Log.warning(f"Suspicious pattern {pattern!r} found in {label or 'upload'}")
                return self._unclean(
                    "Suspicious code pattern detected",
                    "Potentially malicious content",
                )
        return ScanResult(clean=True, scanner=self.name, details="Basic validation passed")

    def _signature_matches(self, data: bytes, extension: str) -> bool:
        expected = self.SIGNATURES.get(extension)
        if expected is None:
            return True
        return data.startswith(expected)

    def _unclean(self, details: str, threat: str) -> ScanResult:
        return ScanResult(clean=False, scanner=self.name, details=details, threat=threat)
