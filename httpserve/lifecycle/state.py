"""Server run state: accepting, draining, stopped."""

import threading
import time

from httpserve.domain.correlation_id import get_logger

LIFECYCLE_LOGGER = get_logger("lifecycle")


class ServerLifecycle:
    """Tracks live worker threads and the shutdown request."""

    def __init__(self) -> None:
        self._draining = threading.Event()
        self._idle = threading.Condition()
        self._workers: set[threading.Thread] = set()

    def is_draining(self) -> bool:
        return self._draining.is_set()

    def should_stop(self) -> bool:
        """True once shutdown has begun; the accept loop exits on its next poll."""
        return self._draining.is_set()

    def begin_draining(self) -> None:
        if self._draining.is_set():
            return
        self._draining.set()
        LIFECYCLE_LOGGER.info(
            "Beginning graceful shutdown", extra={"event": "shutdown_started"}
        )

    def register_worker(self, thread: threading.Thread) -> None:
        with self._idle:
            self._workers.add(thread)

    def cleanup_worker(self, thread: threading.Thread) -> None:
        with self._idle:
            self._workers.discard(thread)
            if not self._workers:
                self._idle.notify_all()

    def active_worker_count(self) -> int:
        with self._idle:
            return len(self._workers)

    def wait_for_workers(self, timeout: float) -> bool:
        """Block until every worker has finished or ``timeout`` elapses."""
        deadline = time.monotonic() + timeout
        with self._idle:
            while self._workers:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    LIFECYCLE_LOGGER.warning(
                        "Shutdown timeout exceeded",
                        extra={
                            "event": "shutdown_timeout",
                            "remaining_workers": len(self._workers),
                        },
                    )
                    return False
                self._idle.wait(remaining)
        return True
