from dataclasses import dataclass
from datetime import datetime


@dataclass
class JobRecord:
    """Represents a row from the ingestion_jobs table."""

    id: int
    document_id: str
    blob_key: str
    status: str
    attempts: int
    error_message: str | None = None
    available_at: datetime | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
