from collections.abc import Sequence
from pathlib import Path
from typing import Any

import httpx

from app.config.settings import Settings
from app.database.repositories.documents_repository import DocumentsRepository
from app.embedding.fingerprint import EmbeddingGenerator
from app.extraction.factory import ContentExtractorFactory
from app.logging.logger import Log
from app.metadata.factory import MetadataGeneratorFactory
from app.pages.page_counter import PageCounter
from app.processor.exceptions import (
    DocumentNotFoundError,
    DocumentStateConflictError,
    UnsafeDocumentError,
)
from app.processor.models import DocumentStatus, ProcessorResult
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.steps import (
    CountPagesStep,
    DownloadStep,
    ExtractContentStep,
    GenerateEmbeddingStep,
    GenerateMetadataStep,
    LoadDocumentStep,
    PersistProcessedStep,
    RenderThumbnailStep,
    ScanStep,
    UploadThumbnailStep,
)
from app.processor.temp_files import TempFileScope
from app.security.factory import ScannerFactory
from app.storage.factory import BlobStoreFactory
from app.thumbnails.renderer import ThumbnailRenderer


class Processor:
    """Drives one document from 'processing' to a terminal status.

    Pipeline: load -> scan -> download -> extract -> count pages -> metadata
    -> thumbnail -> upload thumbnail -> embedding -> persist.

    Any failure after the document is loaded is recorded as 'failed' and
    re-raised so the job runner can apply its retry policy. Local files
    created during the run are removed on every outcome.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        doc_repo: DocumentsRepository,
        temp_dir: Path | None = None,
    ) -> None:
        self._steps = list(steps)
        self._doc_repo = doc_repo
        self._temp_dir = temp_dir

    def process(
        self,
        document_id: str,
        blob_key: str,
        job_id: int | None = None,
    ) -> ProcessorResult:
        """Run the full pipeline for a document.

        Raises:
            DocumentNotFoundError: the document does not exist (not retryable).
            DocumentStateConflictError: the document may not be processed now.
            UnsafeDocumentError: the security scan flagged the file.
            Exception: any other stage failure, after the document is marked failed.
        """
        Log.info(f"Processing document {document_id} for job {job_id}")
        with TempFileScope(self._temp_dir) as temp_files:
            context = PipelineContext(
                document_id=document_id,
                blob_key=blob_key,
                temp_files=temp_files,
                job_id=job_id,
            )
            try:
                for step in self._steps:
                    context = step.run(context)
            except (DocumentNotFoundError, DocumentStateConflictError):
                raise
            except UnsafeDocumentError as exc:
                self._record_failure(document_id, str(exc), exc.scan_result)
                raise
            except Exception as exc:
                scan_record = context.scan_result.to_record() if context.scan_result else None
                self._record_failure(document_id, str(exc), scan_record)
                raise

        if context.fields is None:
            raise ValueError("Pipeline finished without persisting processed fields")
        return ProcessorResult(
            document_id=document_id,
            status=DocumentStatus.PROCESSED,
            fields=context.fields,
            extraction_method=context.content.extraction_method if context.content else "",
            warnings=list(context.warnings),
        )

    def _record_failure(
        self,
        document_id: str,
        error: str,
        scan_record: dict[str, Any] | None,
    ) -> None:
        Log.exception(f"Processing failed for document {document_id}: {error}")
        try:
            self._doc_repo.save_failed(document_id, error, scan_record)
        except Exception as exc:
            Log.error(f"Could not record failure for document {document_id}: {exc}")


def build_processor(
    settings: Settings,
    http_client: httpx.Client | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    doc_repo = DocumentsRepository()
    blob_store = BlobStoreFactory.create(settings)
    steps: list[PipelineStep] = [
        LoadDocumentStep(doc_repo),
        ScanStep(ScannerFactory.create(settings, blob_store, http_client=http_client)),
        DownloadStep(blob_store),
        ExtractContentStep(ContentExtractorFactory.create(settings)),
        CountPagesStep(PageCounter()),
        GenerateMetadataStep(MetadataGeneratorFactory.create(settings)),
        RenderThumbnailStep(ThumbnailRenderer(jpeg_quality=settings.thumbnail_jpeg_quality)),
        UploadThumbnailStep(blob_store),
        GenerateEmbeddingStep(EmbeddingGenerator()),
        PersistProcessedStep(doc_repo),
    ]
    temp_dir = Path(settings.temp_dir) if settings.temp_dir else None
    return Processor(steps=steps, doc_repo=doc_repo, temp_dir=temp_dir)
