from typing import Any

import psycopg
from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import JobRecord
from app.logging.logger import Log
from app.processor.exceptions import DocumentStateConflictError
from app.processor.models import REPROCESSABLE_STATUSES


class JobRepository:
    """Database operations for the ingestion_jobs table.

    The table is an at-least-once queue: a claimed job that is never marked
    done or returned to pending is picked up again once its lock goes stale.
    """

    def __init__(
        self,
        max_attempts: int,
        backoff_base_seconds: int = 5,
        stale_lock_seconds: int = 900,
    ) -> None:
        self._max_attempts = max_attempts
        self._backoff_base_seconds = backoff_base_seconds
        self._stale_lock_seconds = stale_lock_seconds

    def enqueue(self, document_id: str, blob_key: str) -> int:
        """Create a pending job and flag the document as processing.

        Raises:
            DocumentStateConflictError: if the document is missing or held in a
                moderation status (quarantined, rejected, taken_down).
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET status = 'processing', processing_error = NULL, updated_at = NOW()
                    WHERE id = %s AND status = ANY(%s)
                    """,
                    (document_id, [s.value for s in REPROCESSABLE_STATUSES]),
                )
                if cur.rowcount == 0:
                    conn.rollback()
                    raise DocumentStateConflictError(
                        f"Document {document_id} cannot be queued in its current status"
                    )
                cur.execute(
                    """
                    INSERT INTO ingestion_jobs (document_id, blob_key, status, attempts,
                                                available_at, created_at, updated_at)
                    VALUES (%s, %s, 'pending', 0, NOW(), NOW(), NOW())
                    RETURNING id
                    """,
                    (document_id, blob_key),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError(f"Failed to enqueue job for document {document_id}")
        return int(row[0])

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> JobRecord | None:
        """Claim the next due job using SELECT FOR UPDATE SKIP LOCKED.

        Jobs stuck in 'processing' past the stale-lock window are redelivered,
        or failed together with their document once no attempts are left.
        """
        self._fail_exhausted_stale_jobs(conn)
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, document_id, blob_key, status, attempts
                FROM ingestion_jobs
                WHERE attempts < %s
                  AND (
                    (status = 'pending' AND available_at <= NOW())
                    OR (status = 'processing'
                        AND locked_at < NOW() - make_interval(secs => %s))
                  )
                ORDER BY available_at, created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (self._max_attempts, self._stale_lock_seconds),
            )
            row = cur.fetchone()

        if row is None:
            conn.commit()
            return None

        # A stale claim means the previous worker died mid-job; that run counts as an attempt.
        attempts = row["attempts"] + (1 if row["status"] == "processing" else 0)
        conn.execute(
            """
            UPDATE ingestion_jobs
            SET status = 'processing', attempts = %s, locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (attempts, row["id"]),
        )
        conn.commit()

        return JobRecord(
            id=row["id"],
            document_id=str(row["document_id"]),
            blob_key=row["blob_key"],
            status="processing",
            attempts=attempts,
        )

    def _fail_exhausted_stale_jobs(self, conn: psycopg.Connection[Any]) -> None:
        """Fail stale claims that already used every attempt. Commits with the claim."""
        error = f"Exceeded maximum retry attempts ({self._max_attempts})"
        swept = conn.execute(
            """
            WITH exhausted AS (
                UPDATE ingestion_jobs
                SET status = 'failed', error_message = %s, locked_at = NULL, updated_at = NOW()
                WHERE status = 'processing'
                  AND attempts >= %s
                  AND locked_at < NOW() - make_interval(secs => %s)
                RETURNING document_id
            )
            UPDATE documents
            SET status = 'failed', processing_error = %s, updated_at = NOW()
            WHERE id IN (SELECT document_id FROM exhausted) AND status = 'processing'
            """,
            (error, self._max_attempts, self._stale_lock_seconds, error),
        )
        if swept.rowcount:
            Log.warning(f"Failed {swept.rowcount} document(s) whose stale jobs ran out of attempts")

    def mark_done(self, job_id: int) -> None:
        """Mark a job as done."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE ingestion_jobs
                SET status = 'done', locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def mark_failed(self, job_id: int, error: str) -> None:
        """Mark a job as permanently failed."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE ingestion_jobs
                SET status = 'failed', error_message = %s, locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def increment_attempts(self, job_id: int, attempts: int, error: str = "") -> None:
        """Increment attempt count and return job to pending after a backoff delay.

        The delay doubles with every failed attempt: base, 2*base, 4*base, ...
        """
        delay_seconds = self.backoff_seconds(attempts)
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE ingestion_jobs
                SET attempts = attempts + 1, status = 'pending', error_message = %s,
                    available_at = NOW() + make_interval(secs => %s),
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (error or None, delay_seconds, job_id),
            )
            conn.commit()

    def backoff_seconds(self, attempts: int) -> int:
        return self._backoff_base_seconds * (2 ** max(0, attempts))

    def find_by_id(self, job_id: int) -> JobRecord | None:
        """Find a job by ID. Useful for tests."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, document_id, blob_key, status, attempts, error_message,
                           available_at, locked_at, created_at, updated_at
                    FROM ingestion_jobs
                    WHERE id = %s
                    """,
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return JobRecord(
            id=row["id"],
            document_id=str(row["document_id"]),
            blob_key=row["blob_key"],
            status=row["status"],
            attempts=row["attempts"],
            error_message=row["error_message"],
            available_at=row["available_at"],
            locked_at=row["locked_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
