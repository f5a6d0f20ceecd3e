from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from app.extraction.models import ExtractedContent
from app.metadata.models import DocumentMetadata
from app.processor.models import Document, ProcessedFields
from app.processor.temp_files import TempFileScope
from app.security.models import ScanResult


@dataclass(slots=True)
class PipelineContext:
    document_id: str
    blob_key: str
    temp_files: TempFileScope
    job_id: int | None = None
    document: Document | None = None
    scan_result: ScanResult | None = None
    local_path: Path | None = None
    content: ExtractedContent | None = None
    page_count: int = 0
    metadata: DocumentMetadata | None = None
    thumbnail_path: Path | None = None
    thumbnail_key: str | None = None
    embeddings_id: str = ""
    fields: ProcessedFields | None = None
    warnings: list[str] = field(default_factory=list)

    def require_document(self) -> Document:
        if self.document is None:
            raise ValueError("PipelineContext.document must be set before this step")
        return self.document

    def require_local_path(self) -> Path:
        if self.local_path is None:
            raise ValueError("PipelineContext.local_path must be set before this step")
        return self.local_path

    def require_content(self) -> ExtractedContent:
        if self.content is None:
            raise ValueError("PipelineContext.content must be set before this step")
        return self.content

    def require_metadata(self) -> DocumentMetadata:
        if self.metadata is None:
            raise ValueError("PipelineContext.metadata must be set before this step")
        return self.metadata


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
