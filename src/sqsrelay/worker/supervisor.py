"""Supervisor owning the worker pool lifecycle."""

import asyncio
import threading
from typing import List, Optional

import structlog

from sqsrelay.delivery.interface import DeliveryClientInterface
from sqsrelay.queue.interface import QueueClientInterface
from sqsrelay.worker.models import WorkerConfig
from sqsrelay.worker.processor import MessageProcessor
from sqsrelay.worker.worker import Worker

logger = structlog.get_logger(__name__)


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Supervisor:
    """Starts a pool of workers once and stops them cooperatively.

    Workers run as tasks on one event loop: the loop passed in, or the one
    running when the supervisor is built. start() and shutdown() may be
    called from any thread.

    Example:
        supervisor = Supervisor(config, queue, delivery_client)
        supervisor.start(10)
        ...
        supervisor.shutdown()
        await supervisor.wait()
    """

    def __init__(
        self,
        config: WorkerConfig,
        queue: QueueClientInterface,
        delivery_client: DeliveryClientInterface,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize supervisor.

        Args:
            config: Configuration shared read-only by every worker
            queue: Queue client shared by every worker
            delivery_client: HTTP client shared by every worker
            loop: Event loop for the workers, defaults to the running loop
        """
        self.config = config
        self.queue = queue
        self.processor = MessageProcessor(config, delivery_client)
        self._start_lock = threading.Lock()
        self._started = False
        self._loop = loop or _running_loop()
        self._shutdown_event = asyncio.Event()
        self._spawned = asyncio.Event()
        self._workers: List[Worker] = []
        self._tasks: List[asyncio.Task] = []

    @property
    def worker_count(self) -> int:
        """Number of workers spawned by start()."""
        return len(self._workers)

    @property
    def is_shutting_down(self) -> bool:
        return self._shutdown_event.is_set()

    def start(self, num_workers: int) -> None:
        """
        Spawn num_workers workers on the supervisor's event loop.

        Only the first call has any effect, whichever thread makes it.

        Args:
            num_workers: Number of workers to spawn

        Raises:
            RuntimeError: If no event loop is bound and none is running
        """
        with self._start_lock:
            if self._started:
                logger.debug("Supervisor already started", requested=num_workers)
                return

            loop = self._loop or _running_loop()
            if loop is None:
                raise RuntimeError("Supervisor has no event loop to run workers on")

            self._loop = loop
            self._started = True
            self._workers = [
                Worker(
                    f"worker-{i + 1}",
                    self.config,
                    self.queue,
                    self.processor,
                    self._shutdown_event,
                )
                for i in range(num_workers)
            ]

            if _running_loop() is loop:
                self._spawn()
            else:
                loop.call_soon_threadsafe(self._spawn)

        logger.info("Supervisor started", workers=num_workers)

    def _spawn(self) -> None:
        for worker in self._workers:
            self._tasks.append(self._loop.create_task(worker.run(), name=worker.worker_id))
        self._spawned.set()

    def shutdown(self) -> None:
        """Ask every worker to stop after its current cycle. Safe from any thread."""
        logger.info("Shutdown requested")

        with self._start_lock:
            loop = self._loop
            if loop is None or _running_loop() is loop:
                self._shutdown_event.set()
            else:
                loop.call_soon_threadsafe(self._shutdown_event.set)

    async def wait(self) -> None:
        """Wait until every spawned worker has returned."""
        if not self._workers:
            return

        await self._spawned.wait()
        results = await asyncio.gather(*self._tasks, return_exceptions=True)

        for task, result in zip(self._tasks, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Worker exited with error",
                    worker_id=task.get_name(),
                    error=repr(result),
                )

        logger.info("All workers stopped", workers=len(self._tasks))
