import threading
from collections.abc import Callable

from app.logging.logger import Log
from app.worker.worker import Worker


class WorkerPool:
    """Runs several pollers on threads; they share the connection pool and a stop event.

    Each worker gets its own Worker (and so its own JobRunner/Processor) from
    the factory, so no pipeline state is shared between threads.
    """

    def __init__(
        self,
        worker_factory: Callable[[threading.Event], Worker],
        concurrency: int = 1,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._worker_factory = worker_factory
        self._concurrency = concurrency
        self._stop_event = threading.Event()
        self._threads: list[threading.Thread] = []

    @property
    def stop_event(self) -> threading.Event:
        return self._stop_event

    def start(self) -> None:
        for index in range(self._concurrency):
            worker = self._worker_factory(self._stop_event)
            thread = threading.Thread(
                target=worker.run,
                name=f"worker-{index + 1}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)
        Log.info(f"Started {self._concurrency} worker thread(s)")

    def stop(self) -> None:
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        for thread in self._threads:
            thread.join(timeout)

    def run(self) -> None:
        """Start the workers and block until they exit or the process is interrupted."""
        self.start()
        try:
            while any(thread.is_alive() for thread in self._threads):
                self.join(timeout=1.0)
        except KeyboardInterrupt:
            Log.info("Shutting down worker pool")
            self.stop()
            self.join()
