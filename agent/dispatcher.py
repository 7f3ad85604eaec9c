"""
Message dispatcher.

Queue handoff between the webhook (which must acknowledge immediately) and
the orchestrator. Each queued message runs under supervision: whatever
escapes the handler is logged and counted, and the worker keeps going.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[None]]


class MessageDispatcher:
    """Fixed pool of asyncio workers draining one queue."""

    def __init__(self, handler: Handler, workers: int = 4):
        """
        Args:
            handler: Coroutine function called once per message
            workers: Number of concurrent workers
        """
        self.handler = handler
        self.workers = max(1, workers)
        self.processed = 0
        self.failed = 0
        self._queue: Optional[asyncio.Queue] = None
        self._tasks: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def start(self) -> None:
        if self.running:
            return
        queue: asyncio.Queue = asyncio.Queue()
        self._queue = queue
        self._tasks = [
            asyncio.create_task(self._worker(i, queue), name=f"dispatch-worker-{i}")
            for i in range(self.workers)
        ]
        logger.info(f"Message dispatcher started with {self.workers} workers")

    def submit(self, message: Any) -> None:
        """Enqueue without blocking."""
        if self._queue is None:
            raise RuntimeError("Dispatcher is not running")
        self._queue.put_nowait(message)

    async def _worker(self, index: int, queue: asyncio.Queue) -> None:
        while True:
            message = await queue.get()
            try:
                await self.handler(message)
                self.processed += 1
            except Exception:
                self.failed += 1
                logger.exception(
                    "Unhandled error in dispatched message",
                    extra={"worker": index},
                )
            finally:
                queue.task_done()

    async def join(self) -> None:
        """Wait until every queued message has been handled."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self, timeout: float = 10.0) -> None:
        """Drain the queue (bounded by timeout), then cancel workers."""
        if not self.running:
            return

        try:
            await asyncio.wait_for(self.join(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Dispatcher stop timed out with {self.pending} messages pending"
            )

        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        self._queue = None

        logger.info(
            "Message dispatcher stopped",
            extra={"processed": self.processed, "failed": self.failed},
        )
