from app.database.repositories.documents_repository import DocumentsRepository
from app.embedding.fingerprint import EmbeddingGenerator
from app.extraction.content_extractor import ContentExtractor
from app.logging.logger import Log
from app.metadata.generator import MetadataGenerator
from app.pages.page_counter import PageCounter
from app.processor.exceptions import DocumentStateConflictError, UnsafeDocumentError
from app.processor.models import ProcessedFields
from app.processor.pipeline import PipelineContext, PipelineStep
from app.security.base import BaseScanner
from app.storage.base import BaseBlobStore
from app.storage.keys import key_extension, thumbnail_key_for
from app.thumbnails.renderer import ThumbnailRenderer


class LoadDocumentStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = self._doc_repo.find_by_id(context.document_id)
        if not self._doc_repo.mark_processing(context.document_id):
            raise DocumentStateConflictError(
                f"Document {context.document_id} is {document.status.value} and cannot be processed"
            )
        context.document = document
        Log.info(f"Loaded document {document.id} ({document.file_type.value})")
        return context


class ScanStep(PipelineStep):
    def __init__(self, scanner: BaseScanner) -> None:
        self._scanner = scanner

    def run(self, context: PipelineContext) -> PipelineContext:
        result = self._scanner.scan(context.blob_key)
        context.scan_result = result
        if not result.clean:
            Log.error(f"Document {context.document_id} failed security scan: {result.details}")
            raise UnsafeDocumentError(
                f"Virus scan failed: {result.threat or result.details}",
                result.to_record(),
            )
        Log.info(f"Document {context.document_id} passed {result.scanner} scan")
        return context


class DownloadStep(PipelineStep):
    def __init__(self, blob_store: BaseBlobStore) -> None:
        self._blob_store = blob_store

    def run(self, context: PipelineContext) -> PipelineContext:
        extension = key_extension(context.blob_key)
        path = context.temp_files.new_path(f".{extension}" if extension else "")
        size = 0
        with path.open("wb") as handle:
            for chunk in self._blob_store.get_stream(context.blob_key):
                handle.write(chunk)
                size += len(chunk)
        context.local_path = path
        Log.info(f"Downloaded {size} bytes of {context.blob_key} to {path}")
        return context


class ExtractContentStep(PipelineStep):
    def __init__(self, content_extractor: ContentExtractor) -> None:
        self._content_extractor = content_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        document = context.require_document()
        content = self._content_extractor.extract(context.require_local_path(), document.file_type)
        context.content = content
        context.warnings.extend(content.warnings)
        Log.info(
            f"Extracted {len(content.text)} chars from document {document.id} "
            f"via {content.extraction_method}"
        )
        return context


class CountPagesStep(PipelineStep):
    def __init__(self, page_counter: PageCounter) -> None:
        self._page_counter = page_counter

    def run(self, context: PipelineContext) -> PipelineContext:
        context.page_count = self._page_counter.count_pages(
            context.require_local_path(),
            context.require_document().file_type,
            context.require_content().text,
        )
        return context


class GenerateMetadataStep(PipelineStep):
    def __init__(self, metadata_generator: MetadataGenerator) -> None:
        self._metadata_generator = metadata_generator

    def run(self, context: PipelineContext) -> PipelineContext:
        document = context.require_document()
        metadata = self._metadata_generator.generate(
            context.require_content().text,
            document.original_filename,
            document.file_type.value,
        )
        # The structural count wins over the text-based estimate.
        metadata.page_count = context.page_count or metadata.page_count
        context.metadata = metadata
        Log.info(f"Metadata for document {document.id} generated by {metadata.generated_by}")
        return context


class RenderThumbnailStep(PipelineStep):
    def __init__(self, renderer: ThumbnailRenderer) -> None:
        self._renderer = renderer

    def run(self, context: PipelineContext) -> PipelineContext:
        output_path = context.temp_files.new_path(".jpg")
        context.thumbnail_path = self._renderer.render(
            context.require_local_path(),
            context.require_document().file_type,
            output_path,
        )
        if context.thumbnail_path is None:
            context.warnings.append("Thumbnail could not be generated")
        return context


class UploadThumbnailStep(PipelineStep):
    def __init__(self, blob_store: BaseBlobStore) -> None:
        self._blob_store = blob_store

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.thumbnail_path is None:
            return context
        key = thumbnail_key_for(context.blob_key)
        self._blob_store.put(key, context.thumbnail_path.read_bytes(), "image/jpeg")
        context.thumbnail_key = key
        Log.info(f"Thumbnail uploaded for document {context.document_id}: {key}")
        return context


class GenerateEmbeddingStep(PipelineStep):
    def __init__(self, embedding_generator: EmbeddingGenerator) -> None:
        self._embedding_generator = embedding_generator

    def run(self, context: PipelineContext) -> PipelineContext:
        context.embeddings_id = self._embedding_generator.embed(
            context.require_content().text,
            context.require_metadata(),
        )
        return context


class PersistProcessedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.scan_result is None:
            raise ValueError("PipelineContext.scan_result must be set before persist")
        metadata = context.require_metadata()
        record = metadata.to_record()
        record["extractionMethod"] = context.require_content().extraction_method

        fields = ProcessedFields(
            generated_title=metadata.title,
            generated_description=metadata.description,
            tags=list(metadata.tags),
            category=metadata.category,
            page_count=metadata.page_count,
            thumbnail_path=context.thumbnail_key,
            embeddings_id=context.embeddings_id,
            metadata=record,
            virus_scan_result=context.scan_result.to_record(),
        )
        self._doc_repo.save_processed(context.document_id, fields)
        context.fields = fields
        Log.info(f"Document {context.document_id} processed")
        return context
