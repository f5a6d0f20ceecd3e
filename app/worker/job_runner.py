from app.database.models import JobRecord
from app.database.repositories.job_repository import JobRepository
from app.logging.logger import Log
from app.processor.exceptions import NonRetryableError
from app.processor.processor import Processor


class JobRunner:
    """Run one job, catch exceptions, and apply retry logic."""

    def __init__(
        self,
        processor: Processor,
        job_repo: JobRepository,
        max_attempts: int,
    ) -> None:
        self._processor = processor
        self._job_repo = job_repo
        self._max_attempts = max_attempts

    def run(self, job: JobRecord) -> None:
        """Execute a single job with error handling."""
        Log.info(f"Running job {job.id} for document {job.document_id} (attempt {job.attempts + 1})")
        try:
            self._processor.process(job.document_id, job.blob_key, job.id)
        except NonRetryableError as exc:
            self._job_repo.mark_failed(job.id, str(exc))
            Log.error(f"Job {job.id} failed permanently: {exc}")
            return
        except Exception as exc:
            self._handle_failure(job, exc)
            return

        self._job_repo.mark_done(job.id)
        Log.info(f"Job {job.id} completed successfully")

    def _handle_failure(self, job: JobRecord, exc: Exception) -> None:
        """Back to pending with a backoff delay, or failed once attempts run out."""
        Log.error(f"Job {job.id} failed: {exc}")
        if job.attempts + 1 >= self._max_attempts:
            self._job_repo.mark_failed(job.id, str(exc))
            Log.error(f"Job {job.id} permanently failed after {job.attempts + 1} attempts")
        else:
            self._job_repo.increment_attempts(job.id, job.attempts, str(exc))
            Log.warning(
                f"Job {job.id} will be retried in "
                f"{self._job_repo.backoff_seconds(job.attempts)}s (attempt {job.attempts + 1})"
            )
