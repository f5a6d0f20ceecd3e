from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class FileType(str, Enum):
    """Closed set of document formats accepted for upload."""

    PDF = "pdf"
    DOCX = "docx"
    PPTX = "pptx"
    XLSX = "xlsx"
    CSV = "csv"


class DocumentStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"
    QUARANTINED = "quarantined"
    REJECTED = "rejected"
    TAKEN_DOWN = "taken_down"


REPROCESSABLE_STATUSES: tuple[DocumentStatus, ...] = (
    DocumentStatus.UPLOADED,
    DocumentStatus.PROCESSING,
    DocumentStatus.PROCESSED,
    DocumentStatus.FAILED,
)

MAX_TITLE_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 500


@dataclass(frozen=True)
class Document:
    """Domain model for a stored document (subset of DB columns the worker reads)."""

    id: str
    user_id: str
    original_filename: str
    blob_path: str
    file_type: FileType
    size_bytes: int
    status: DocumentStatus
    processing_error: str | None = None


@dataclass
class ProcessedFields:
    """Every derived field written together when a document reaches 'processed'."""

    generated_title: str
    generated_description: str
    tags: list[str]
    category: str
    page_count: int
    thumbnail_path: str | None
    embeddings_id: str
    metadata: dict[str, Any]
    virus_scan_result: dict[str, Any]

    def __post_init__(self) -> None:
        self.generated_title = self.generated_title[:MAX_TITLE_LENGTH]
        self.generated_description = self.generated_description[:MAX_DESCRIPTION_LENGTH]
        if self.page_count < 1:
            raise ValueError("page_count must be a positive integer")


@dataclass(frozen=True)
class DocumentStatusView:
    """What the uploader sees when polling processing status."""

    id: str
    status: DocumentStatus
    processing_error: str | None = None
    generated_title: str | None = None
    updated_at: datetime | None = None


@dataclass
class ProcessorResult:
    """Summary of one successful pipeline run."""

    document_id: str
    status: DocumentStatus
    fields: ProcessedFields
    extraction_method: str = ""
    warnings: list[str] = field(default_factory=list)
