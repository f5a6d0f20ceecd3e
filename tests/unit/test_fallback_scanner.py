from unittest.mock import MagicMock

from app.security.base import BaseScanner
from app.security.exceptions import ScannerUnavailableError, ScanSizeLimitExceededError
from app.security.factory import ScannerFactory
from app.security.fallback_scanner import FallbackScanner
from app.security.models import ScanResult
from app.security.signature_scanner import SignatureScanner
from app.security.virustotal_scanner import VirusTotalScanner


def _scanner(name: str) -> MagicMock:
    scanner = MagicMock(spec=BaseScanner)
    scanner.name = name
    return scanner


class TestFallbackScanner:
    def test_uses_primary_verdict(self) -> None:
        primary, fallback = _scanner("virustotal"), _scanner("basic-validation")
        verdict = ScanResult(clean=False, scanner="virustotal", details="bad")
        primary.scan.return_value = verdict

        result = FallbackScanner(primary, fallback).scan("uploads/a.pdf")

        assert result is verdict
        fallback.scan.assert_not_called()

    def test_falls_back_when_primary_unavailable(self) -> None:
        primary, fallback = _scanner("virustotal"), _scanner("basic-validation")
        primary.scan.side_effect = ScannerUnavailableError("down")
        fallback.scan.return_value = ScanResult(clean=True, scanner="basic-validation", details="ok")

        result = FallbackScanner(primary, fallback).scan("uploads/a.pdf")

        assert result.scanner == "basic-validation"
        fallback.scan.assert_called_once_with("uploads/a.pdf")

    def test_falls_back_when_file_too_large_for_primary(self) -> None:
        primary, fallback = _scanner("virustotal"), _scanner("basic-validation")
        primary.scan.side_effect = ScanSizeLimitExceededError("too big")
        fallback.scan.return_value = ScanResult(clean=True, scanner="basic-validation", details="ok")

        assert FallbackScanner(primary, fallback).scan("uploads/a.pdf").clean is True

    def test_falls_back_on_unexpected_error(self) -> None:
        primary, fallback = _scanner("virustotal"), _scanner("basic-validation")
        primary.scan.side_effect = KeyError("weird")
        fallback.scan.return_value = ScanResult(clean=False, scanner="basic-validation", details="x")

        assert FallbackScanner(primary, fallback).scan("uploads/a.pdf").clean is False

    def test_without_primary_uses_fallback_only(self) -> None:
        fallback = _scanner("basic-validation")
        fallback.scan.return_value = ScanResult(clean=True, scanner="basic-validation", details="ok")

        scanner = FallbackScanner(None, fallback)

        assert scanner.name == "basic-validation"
        assert scanner.scan("uploads/a.pdf").clean is True


def _make_settings(api_key: str) -> MagicMock:
    return MagicMock(
        virustotal_api_key=api_key,
        virustotal_base_url="https://vt.test/api/v3",
        virustotal_timeout_seconds=5,
        virustotal_max_file_bytes=1024,
        virustotal_poll_initial_seconds=1.0,
        virustotal_poll_multiplier=1.5,
        virustotal_poll_max_seconds=2.0,
        virustotal_poll_max_attempts=2,
        signature_scan_max_file_bytes=2048,
    )


class TestScannerFactory:
    def test_without_key_builds_signature_only(self) -> None:
        scanner = ScannerFactory.create(_make_settings(""), MagicMock())

        assert isinstance(scanner, FallbackScanner)
        assert scanner._primary is None
        assert isinstance(scanner._fallback, SignatureScanner)

    def test_with_key_puts_virustotal_first(self) -> None:
        scanner = ScannerFactory.create(_make_settings("vt"), MagicMock(), http_client=MagicMock())

        assert isinstance(scanner, FallbackScanner)
        assert isinstance(scanner._primary, VirusTotalScanner)
        assert scanner.name == "virustotal"
