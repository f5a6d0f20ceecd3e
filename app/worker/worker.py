import threading

from app.database.connection import get_connection
from app.database.models import JobRecord
from app.database.repositories.job_repository import JobRepository
from app.logging.logger import Log
from app.worker.job_runner import JobRunner


class Worker:
    """Poll loop: claim -> dispatch -> sleep when idle."""

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        poll_interval_seconds: float,
        stop_event: threading.Event | None = None,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._poll_interval_seconds = poll_interval_seconds
        self._stop_event = stop_event or threading.Event()

    def stop(self) -> None:
        self._stop_event.set()

    def run(self, max_jobs: int | None = None) -> None:
        """Main poll loop. Runs until interrupted or the stop event is set.

        If max_jobs is set, stop after processing that many jobs (for testing).
        """
        Log.info("Worker started, polling for jobs")
        jobs_done = 0
        try:
            while not self._stop_event.is_set():
                if max_jobs is not None and jobs_done >= max_jobs:
                    break
                job = self._try_claim_job()
                if job:
                    self._job_runner.run(job)
                    jobs_done += 1
                else:
                    Log.debug("No jobs available, sleeping")
                    self._stop_event.wait(self._poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")
        Log.info(f"Worker stopped after {jobs_done} jobs")

    def _try_claim_job(self) -> JobRecord | None:
        """Attempt to claim the next pending job. Gracefully handle DB errors."""
        try:
            with get_connection() as conn:
                return self._job_repo.claim_next_job(conn)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
