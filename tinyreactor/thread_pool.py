"""Fixed-size pool of worker threads fed from a task queue."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)

Task = Callable[[], None]


class ThreadPool:
    """Runs queued tasks on worker threads.

    Before :meth:`start` has created any threads, :meth:`add` runs the task
    in the caller's thread. After :meth:`stop`, added tasks are dropped.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._threads: list[threading.Thread] = []
        self._tasks: deque[Task] = deque()
        self._running = False

    def start(self, num_threads: int) -> None:
        """Start ``num_threads`` worker threads."""
        if num_threads < 0:
            raise ValueError("num_threads must not be negative")
        self._running = True
        for _ in range(num_threads):
            thread = threading.Thread(
                target=self._run_in_thread,
                name=f"pool-worker-{len(self._threads)}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()

    def stop(self) -> None:
        """Tell workers to finish and wait for them."""
        with self._cond:
            self._running = False
            self._cond.notify_all()
        for thread in self._threads:
            thread.join()

    def add(self, task: Task) -> None:
        """Queue ``task``, or run it at once if the pool has no threads."""
        if not self._threads:
            task()
            return
        with self._cond:
            if not self._running:
                return
            self._tasks.append(task)
            self._cond.notify()

    def _run_in_thread(self) -> None:
        logger.debug("worker %s started", threading.current_thread().name)
        while self._running:
            task = None
            with self._cond:
                self._cond.wait_for(lambda: not self._running or bool(self._tasks))
                if self._tasks:
                    task = self._tasks.popleft()
            if task is not None:
                try:
                    task()
                except Exception:
                    logger.exception("task raised an exception")
        logger.debug("worker %s exiting", threading.current_thread().name)