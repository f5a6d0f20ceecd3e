from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from app.database.repositories.documents_repository import DocumentsRepository
from app.embedding.fingerprint import EmbeddingGenerator
from app.extraction.content_extractor import ContentExtractor
from app.extraction.csv_extractor import CsvContentExtractor
from app.extraction.docx_extractor import DocxContentExtractor
from app.extraction.pdf_extractor import PdfContentExtractor
from app.extraction.pptx_extractor import PptxContentExtractor
from app.extraction.xlsx_extractor import XlsxContentExtractor
from app.metadata.generator import MetadataGenerator
from app.pages.page_counter import PageCounter
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.processor.exceptions import (
    DocumentNotFoundError,
    DocumentStateConflictError,
    EmptyContentError,
    NonRetryableError,
    UnsafeDocumentError,
)
from app.processor.models import Document, DocumentStatus, FileType, ProcessedFields
from app.processor.processor import Processor
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
from app.security.signature_scanner import SignatureScanner
from app.storage.exceptions import BlobNotFoundError
from app.storage.local_disk import LocalDiskBlobStore
from app.thumbnails.renderer import ThumbnailRenderer

PDF_KEY = "uploads/user-1/report.pdf"
CSV_KEY = "uploads/user-1/scores.csv"


def _make_document(file_type: FileType = FileType.PDF, filename: str = "report.pdf") -> Document:
    return Document(
        id="doc-1",
        user_id="user-1",
        original_filename=filename,
        blob_path=f"uploads/user-1/{filename}",
        file_type=file_type,
        size_bytes=1024,
        status=DocumentStatus.UPLOADED,
    )


def _make_processor(
    blob_store: LocalDiskBlobStore,
    temp_dir: Path,
    document: Document | None = None,
    renderer: ThumbnailRenderer | None = None,
) -> tuple[Processor, MagicMock]:
    doc_repo = MagicMock(spec=DocumentsRepository)
    doc_repo.find_by_id.return_value = document or _make_document()
    doc_repo.mark_processing.return_value = True

    extractor = ContentExtractor(
        {
            FileType.PDF: PdfContentExtractor(PdfPlumberAdapter(), None, min_text_chars=50),
            FileType.DOCX: DocxContentExtractor(),
            FileType.PPTX: PptxContentExtractor(),
            FileType.XLSX: XlsxContentExtractor(),
            FileType.CSV: CsvContentExtractor(),
        }
    )
    steps = [
        LoadDocumentStep(doc_repo),
        ScanStep(SignatureScanner(blob_store, max_file_bytes=10 * 1024 * 1024)),
        DownloadStep(blob_store),
        ExtractContentStep(extractor),
        CountPagesStep(PageCounter()),
        GenerateMetadataStep(MetadataGenerator([])),
        RenderThumbnailStep(renderer or ThumbnailRenderer()),
        UploadThumbnailStep(blob_store),
        GenerateEmbeddingStep(EmbeddingGenerator()),
        PersistProcessedStep(doc_repo),
    ]
    return Processor(steps=steps, doc_repo=doc_repo, temp_dir=temp_dir), doc_repo


@pytest.fixture()
def work_dir(tmp_path: Path) -> Path:
    return tmp_path / "work"


@pytest.fixture()
def pdf_upload(blob_store: LocalDiskBlobStore, report_pdf_bytes: bytes) -> str:
    blob_store.put(PDF_KEY, report_pdf_bytes, "application/pdf")
    return PDF_KEY


@pytest.fixture()
def blank_csv(blob_store: LocalDiskBlobStore) -> Document:
    blob_store.put(CSV_KEY, b"  \n\n", "text/csv")
    return _make_document(FileType.CSV, "scores.csv")


class TestSuccessfulRun:
    def test_persists_processed_fields(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, pdf_upload: str
    ) -> None:
        processor, doc_repo = _make_processor(blob_store, work_dir)

        result = processor.process("doc-1", pdf_upload, job_id=7)

        assert result.status == DocumentStatus.PROCESSED
        doc_repo.mark_processing.assert_called_once_with("doc-1")
        doc_repo.save_processed.assert_called_once()
        document_id, fields = doc_repo.save_processed.call_args.args
        assert document_id == "doc-1"
        assert isinstance(fields, ProcessedFields)
        assert fields.generated_title == "Quarterly Research Report"
        assert fields.category == "science"
        assert fields.embeddings_id.startswith("local-")
        assert fields.virus_scan_result["clean"] is True
        assert fields.metadata["generatedBy"] == "smart-local-processor"
        assert fields.metadata["extractionMethod"] == result.extraction_method
        doc_repo.save_failed.assert_not_called()

    def test_structural_page_count_overrides_estimate(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, pdf_upload: str
    ) -> None:
        processor, doc_repo = _make_processor(blob_store, work_dir)

        result = processor.process("doc-1", pdf_upload)

        assert result.fields.page_count == 3
        assert result.fields.metadata["pageCount"] == 3

    def test_uploads_thumbnail_next_to_source(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, pdf_upload: str
    ) -> None:
        processor, _doc_repo = _make_processor(blob_store, work_dir)

        result = processor.process("doc-1", pdf_upload)

        assert result.fields.thumbnail_path == "thumbnails/user-1/report.pdf.jpg"
        assert blob_store.exists("thumbnails/user-1/report.pdf.jpg")
        assert blob_store.get_buffer("thumbnails/user-1/report.pdf.jpg")[:2] == b"\xff\xd8"

    def test_thumbnail_failure_still_completes(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, pdf_upload: str
    ) -> None:
        renderer = MagicMock(spec=ThumbnailRenderer)
        renderer.render.return_value = None
        processor, doc_repo = _make_processor(blob_store, work_dir, renderer=renderer)

        result = processor.process("doc-1", pdf_upload)

        assert result.status == DocumentStatus.PROCESSED
        assert result.fields.thumbnail_path is None
        assert "Thumbnail could not be generated" in result.warnings
        doc_repo.save_processed.assert_called_once()

    def test_reprocessing_is_idempotent(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, pdf_upload: str
    ) -> None:
        processor, doc_repo = _make_processor(blob_store, work_dir)

        first = processor.process("doc-1", pdf_upload)
        second = processor.process("doc-1", pdf_upload)

        assert doc_repo.save_processed.call_count == 2
        assert first.fields.thumbnail_path == second.fields.thumbnail_path
        assert first.fields.embeddings_id == second.fields.embeddings_id
        assert first.fields.tags == second.fields.tags

    def test_csv_document(self, blob_store: LocalDiskBlobStore, work_dir: Path) -> None:
        blob_store.put(CSV_KEY, b"name,score\nalice,3\nbob,5\n", "text/csv")
        document = _make_document(FileType.CSV, "scores.csv")
        processor, _doc_repo = _make_processor(blob_store, work_dir, document=document)

        result = processor.process("doc-1", CSV_KEY)

        assert result.fields.page_count == 1
        assert result.fields.metadata["documentType"] == "csv"

    @pytest.mark.parametrize(
        ("file_type", "filename"),
        [
            (FileType.DOCX, "notes.docx"),
            (FileType.PPTX, "launch.pptx"),
            (FileType.XLSX, "budget.xlsx"),
        ],
    )
    def test_office_documents(
        self,
        blob_store: LocalDiskBlobStore,
        work_dir: Path,
        make_docx: Callable[..., Path],
        make_pptx: Callable[..., Path],
        make_xlsx: Callable[..., Path],
        file_type: FileType,
        filename: str,
    ) -> None:
        if file_type == FileType.DOCX:
            source = make_docx(
                [
                    "Annual Planning Notes",
                    "The committee reviewed the budget and agreed on the next steps.",
                ],
                name=filename,
            )
        elif file_type == FileType.PPTX:
            source = make_pptx(
                [["Launch Plan", "Timeline and owners"], ["Risks", "Supplier delays"]],
                name=filename,
            )
        else:
            source = make_xlsx({"Budget": [["item", "cost"], ["paper", 12]]}, name=filename)
        blob_key = f"uploads/user-1/{filename}"
        blob_store.put(blob_key, source.read_bytes(), "application/octet-stream")
        document = _make_document(file_type, filename)
        processor, doc_repo = _make_processor(blob_store, work_dir, document=document)

        result = processor.process("doc-1", blob_key)

        assert result.status == DocumentStatus.PROCESSED
        fields = doc_repo.save_processed.call_args.args[1]
        assert fields.generated_title.strip()
        assert fields.generated_description.strip()
        assert fields.page_count >= 1
        assert fields.thumbnail_path == f"thumbnails/user-1/{filename}.jpg"
        assert blob_store.exists(fields.thumbnail_path)
        assert fields.metadata["documentType"] == file_type.value
        assert list(work_dir.iterdir()) == []
        doc_repo.save_failed.assert_not_called()


class TestFailures:
    def test_unclean_scan_stops_before_download(
        self, blob_store: LocalDiskBlobStore, work_dir: Path
    ) -> None:
        blob_store.put(PDF_KEY, b"MZ this is not a pdf", "application/pdf")
        processor, doc_repo = _make_processor(blob_store, work_dir)

        with pytest.raises(UnsafeDocumentError, match="Virus scan failed: Potential file spoofing"):
            processor.process("doc-1", PDF_KEY)

        doc_repo.save_processed.assert_not_called()
        document_id, error, scan_record = doc_repo.save_failed.call_args.args
        assert document_id == "doc-1"
        assert error == "Virus scan failed: Potential file spoofing"
        assert scan_record["clean"] is False
        assert scan_record["scanner"] == "basic-validation"
        assert not work_dir.exists()

    def test_unclean_scan_is_not_retryable(self) -> None:
        assert issubclass(UnsafeDocumentError, NonRetryableError)
        assert not issubclass(EmptyContentError, NonRetryableError)

    def test_empty_content_marks_failed_and_reraises(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, blank_csv: Document
    ) -> None:
        processor, doc_repo = _make_processor(blob_store, work_dir, document=blank_csv)

        with pytest.raises(EmptyContentError):
            processor.process("doc-1", CSV_KEY)

        document_id, error, scan_record = doc_repo.save_failed.call_args.args
        assert document_id == "doc-1"
        assert error == "No content extracted from document"
        assert scan_record["clean"] is True
        doc_repo.save_processed.assert_not_called()

    def test_missing_document_is_not_recorded(
        self, blob_store: LocalDiskBlobStore, work_dir: Path
    ) -> None:
        processor, doc_repo = _make_processor(blob_store, work_dir)
        doc_repo.find_by_id.side_effect = DocumentNotFoundError("Document doc-1 not found")

        with pytest.raises(DocumentNotFoundError):
            processor.process("doc-1", PDF_KEY)

        doc_repo.save_failed.assert_not_called()

    def test_state_conflict_is_not_recorded(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, pdf_upload: str
    ) -> None:
        processor, doc_repo = _make_processor(blob_store, work_dir)
        doc_repo.mark_processing.return_value = False

        with pytest.raises(DocumentStateConflictError):
            processor.process("doc-1", pdf_upload)

        doc_repo.save_failed.assert_not_called()

    def test_missing_blob_marks_failed(
        self, blob_store: LocalDiskBlobStore, work_dir: Path
    ) -> None:
        processor, doc_repo = _make_processor(blob_store, work_dir)

        with pytest.raises(BlobNotFoundError):
            processor.process("doc-1", "uploads/user-1/missing.pdf")

        doc_repo.save_failed.assert_called_once()
        assert doc_repo.save_failed.call_args.args[2] is None

    def test_failure_recording_error_does_not_mask_original(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, blank_csv: Document
    ) -> None:
        processor, doc_repo = _make_processor(blob_store, work_dir, document=blank_csv)
        doc_repo.save_failed.side_effect = RuntimeError("db down")

        with pytest.raises(EmptyContentError):
            processor.process("doc-1", CSV_KEY)

        doc_repo.save_failed.assert_called_once()


class TestTempFileCleanup:
    def test_removed_after_success(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, pdf_upload: str
    ) -> None:
        processor, _doc_repo = _make_processor(blob_store, work_dir)

        processor.process("doc-1", pdf_upload)

        assert list(work_dir.iterdir()) == []

    def test_removed_after_failure(
        self, blob_store: LocalDiskBlobStore, work_dir: Path, blank_csv: Document
    ) -> None:
        processor, _doc_repo = _make_processor(blob_store, work_dir, document=blank_csv)

        with pytest.raises(EmptyContentError):
            processor.process("doc-1", CSV_KEY)

        assert list(work_dir.iterdir()) == []
