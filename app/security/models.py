from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

MANUAL_REVIEW_REQUIRED = "MANUAL_REVIEW_REQUIRED"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ScanResult:
    """Verdict of a security scan on one uploaded blob."""

    clean: bool
    scanner: str
    details: str
    scanned_at: datetime = field(default_factory=utc_now)
    threat: str | None = None
    warning: str | None = None
    stats: dict[str, int] | None = None
    analysis_id: str | None = None

    def to_record(self) -> dict[str, Any]:
        """JSON-ready form stored in documents.virus_scan_result."""
        record: dict[str, Any] = {
            "clean": self.clean,
            "scanner": self.scanner,
            "scannedAt": self.scanned_at.isoformat(),
            "details": self.details,
        }
        if self.threat is not None:
            record["threat"] = self.threat
        if self.warning is not None:
            record["warning"] = self.warning
        if self.stats is not None:
            record["stats"] = dict(self.stats)
        if self.analysis_id is not None:
            record["analysisId"] = self.analysis_id
        return record
