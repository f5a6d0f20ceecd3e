import threading
from unittest.mock import MagicMock

import pytest

from app.worker.pool import WorkerPool
from app.worker.worker import Worker


def _factory(created: list[threading.Event]) -> MagicMock:
    def _build(stop_event: threading.Event) -> MagicMock:
        created.append(stop_event)
        worker = MagicMock(spec=Worker)
        worker.run.side_effect = lambda: stop_event.wait(5)
        return worker

    return MagicMock(side_effect=_build)


class TestWorkerPool:
    def test_rejects_zero_concurrency(self) -> None:
        with pytest.raises(ValueError, match="concurrency"):
            WorkerPool(MagicMock(), concurrency=0)

    def test_starts_one_worker_per_slot_sharing_stop_event(self) -> None:
        events: list[threading.Event] = []
        factory = _factory(events)
        pool = WorkerPool(factory, concurrency=3)

        pool.start()
        pool.stop()
        pool.join(timeout=5)

        assert factory.call_count == 3
        assert all(event is pool.stop_event for event in events)
        assert pool.stop_event.is_set()

    def test_run_returns_when_workers_exit(self) -> None:
        worker = MagicMock(spec=Worker)
        pool = WorkerPool(lambda _event: worker, concurrency=2)

        pool.run()

        assert worker.run.call_count == 2
