from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.logging.logger import Log
from app.processor.exceptions import DocumentNotFoundError, DocumentStateConflictError
from app.processor.models import (
    REPROCESSABLE_STATUSES,
    Document,
    DocumentStatus,
    DocumentStatusView,
    FileType,
    ProcessedFields,
)


class DocumentsRepository:
    """Database operations for the documents table.

    Writes issued by the pipeline are conditional on the current status so a
    concurrent moderation action (takedown/restore) is never overwritten.
    """

    def find_by_id(self, document_id: str) -> Document:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, original_filename, s3_path, file_type,
                           size_bytes, status, processing_error
                    FROM documents
                    WHERE id = %s
                    """,
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        return Document(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            original_filename=row["original_filename"],
            blob_path=row["s3_path"],
            file_type=FileType(row["file_type"]),
            size_bytes=row["size_bytes"],
            status=DocumentStatus(row["status"]),
            processing_error=row["processing_error"],
        )

    def mark_processing(self, document_id: str) -> bool:
        """Move the document into 'processing'. Returns False if its status forbids it."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = 'processing', updated_at = NOW()
                    WHERE id = %s AND status = ANY(%s)
                    """,
                    (document_id, [s.value for s in REPROCESSABLE_STATUSES]),
                )
                applied = cur.rowcount > 0
            conn.commit()
        return applied

    def save_processed(self, document_id: str, fields: ProcessedFields) -> None:
        """Persist every derived field and flip status to 'processed' in one statement.

        Raises:
            DocumentStateConflictError: if the document is no longer 'processing'.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = 'processed',
                        generated_title = %s,
                        generated_description = %s,
                        tags = %s,
                        category = %s,
                        page_count = %s,
                        thumbnail_s3_path = %s,
                        embeddings_id = %s,
                        metadata = %s,
                        virus_scan_result = %s,
                        processing_error = NULL,
                        updated_at = NOW()
                    WHERE id = %s AND status = 'processing'
                    """,
                    (
                        fields.generated_title,
                        fields.generated_description,
                        Jsonb(fields.tags),
                        fields.category,
                        fields.page_count,
                        fields.thumbnail_path,
                        fields.embeddings_id,
                        Jsonb(fields.metadata),
                        Jsonb(fields.virus_scan_result),
                        document_id,
                    ),
                )
                applied = cur.rowcount > 0
            conn.commit()

        if not applied:
            raise DocumentStateConflictError(
                f"Document {document_id} left 'processing' before results were saved"
            )

    def save_failed(
        self,
        document_id: str,
        error: str,
        virus_scan_result: dict[str, Any] | None = None,
    ) -> None:
        """Record a failed run. Fields computed before the failure are left untouched."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = 'failed',
                        processing_error = %s,
                        virus_scan_result = COALESCE(%s, virus_scan_result),
                        updated_at = NOW()
                    WHERE id = %s AND status = 'processing'
                    """,
                    (
                        error,
                        Jsonb(virus_scan_result) if virus_scan_result is not None else None,
                        document_id,
                    ),
                )
                applied = cur.rowcount > 0
            conn.commit()

        if not applied:
            Log.warning(
                f"Document {document_id} is no longer processing; failure not recorded: {error}"
            )

    def get_status(self, document_id: str) -> DocumentStatusView:
        """Status-check view exposed to the uploading user.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, status, processing_error, generated_title, updated_at
                    FROM documents
                    WHERE id = %s
                    """,
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        return DocumentStatusView(
            id=str(row["id"]),
            status=DocumentStatus(row["status"]),
            processing_error=row["processing_error"],
            generated_title=row["generated_title"],
            updated_at=row["updated_at"],
        )
