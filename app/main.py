import threading

from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.database.repositories.job_repository import JobRepository
from app.logging.logger import Log
from app.processor.processor import build_processor
from app.worker.job_runner import JobRunner
from app.worker.pool import WorkerPool
from app.worker.worker import Worker


def build_worker(settings: Settings, stop_event: threading.Event) -> Worker:
    """One fully wired poller: its own processor, runner and queue repository."""
    job_repo = JobRepository(
        settings.max_job_attempts,
        backoff_base_seconds=settings.job_backoff_base_seconds,
    )
    job_runner = JobRunner(build_processor(settings), job_repo, settings.max_job_attempts)
    return Worker(
        job_repo,
        job_runner,
        poll_interval_seconds=settings.job_poll_interval_seconds,
        stop_event=stop_event,
    )


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start worker threads."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        pool = WorkerPool(
            lambda stop_event: build_worker(settings, stop_event),
            concurrency=settings.worker_concurrency,
        )
        pool.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
