from __future__ import annotations

import asyncio
import logging
import queue
import threading
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Set, TypeVar

logger = logging.getLogger(__name__)

TaskT = TypeVar("TaskT")

_STOP: Any = object()


class BackgroundTaskManager(ABC, Generic[TaskT]):
    """Generic background worker that processes queued tasks.

    A daemon thread owns a single asyncio event loop. Every task pulled from
    the queue is scheduled as its own asyncio task on that loop, so several
    submissions make progress concurrently while their handlers await I/O.
    """

    poll_interval: float = 0.5

    def __init__(self, *, task_queue: "queue.Queue[TaskT]" | None = None) -> None:
        self._queue: "queue.Queue[TaskT]" = task_queue or queue.Queue()
        self._worker: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def queue(self) -> "queue.Queue[TaskT]":
        return self._queue

    @property
    def is_running(self) -> bool:
        return bool(self._worker and self._worker.is_alive())

    def start(self) -> None:
        with self._lock:
            if self._worker and self._worker.is_alive():
                logger.debug("Worker already running; skipping start", extra={"manager": self.__class__.__name__})
                return
            logger.info("Starting worker thread", extra={"manager": self.__class__.__name__})
            self._worker = threading.Thread(
                target=self._run,
                name=f"{self.__class__.__name__}-worker",
                daemon=True,
            )
            self._worker.start()

    def submit(self, task: TaskT) -> None:
        logger.debug("Submitting task", extra={"manager": self.__class__.__name__, "task": str(task)})
        self._queue.put(task)
        self.start()

    def join(self) -> None:
        """Block until every submitted task has finished."""
        self._queue.join()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Let in-flight tasks finish, then stop the worker thread."""
        with self._lock:
            worker = self._worker
        if worker is None or not worker.is_alive():
            return
        logger.info("Stopping worker thread", extra={"manager": self.__class__.__name__})
        self._queue.put(_STOP)
        worker.join(timeout)

    def _run(self) -> None:
        logger.info("Worker loop started", extra={"manager": self.__class__.__name__})
        asyncio.run(self._serve())
        logger.info("Worker loop stopped", extra={"manager": self.__class__.__name__})

    async def _serve(self) -> None:
        loop = asyncio.get_running_loop()
        inflight: Set[asyncio.Task] = set()
        while True:
            task = await loop.run_in_executor(None, self._next_task)
            if task is None:
                continue
            if task is _STOP:
                self._queue.task_done()
                break
            handle = loop.create_task(self._execute(task))
            inflight.add(handle)
            handle.add_done_callback(inflight.discard)

        if inflight:
            await asyncio.gather(*inflight, return_exceptions=True)

    def _next_task(self) -> Optional[TaskT]:
        try:
            return self._queue.get(timeout=self.poll_interval)
        except queue.Empty:
            return None

    async def _execute(self, task: TaskT) -> None:
        try:
            logger.debug("Processing task", extra={"manager": self.__class__.__name__, "task": str(task)})
            await self.process(task)
            logger.debug("Finished task", extra={"manager": self.__class__.__name__, "task": str(task)})
        except Exception:
            logger.error(
                "Background task raised",
                extra={"manager": self.__class__.__name__, "task": str(task)},
                exc_info=True,
            )
        finally:
            self._queue.task_done()

    @abstractmethod
    async def process(self, task: TaskT) -> None:
        """Handle an individual task pulled from the queue."""
        raise NotImplementedError
