"""Worker implementation for the receive, dispatch, acknowledge cycle."""

import asyncio
import contextlib
from typing import List

import structlog

from sqsrelay.exceptions import DeliveryError, QueueError
from sqsrelay.queue.interface import DeleteEntry, QueueClientInterface, QueueMessage
from sqsrelay.utils.metrics import metrics
from sqsrelay.worker.models import WorkerConfig
from sqsrelay.worker.processor import MessageProcessor

logger = structlog.get_logger(__name__)


class Worker:
    """Polls the queue and forwards messages until shutdown is requested.

    Each cycle receives a batch, delivers every message in order, then deletes
    the delivered ones with a single batch call. Failed deliveries stay in the
    queue and come back after the visibility timeout.
    """

    def __init__(
        self,
        worker_id: str,
        config: WorkerConfig,
        queue: QueueClientInterface,
        processor: MessageProcessor,
        shutdown_event: asyncio.Event,
    ):
        """
        Initialize worker.

        Args:
            worker_id: Unique worker identifier
            config: Shared worker configuration
            queue: Queue client shared by all workers
            processor: Message processor shared by all workers
            shutdown_event: Set when the pool should stop
        """
        self.worker_id = worker_id
        self.config = config
        self.queue = queue
        self.processor = processor
        self._shutdown_event = shutdown_event
        self._consecutive_errors = 0
        self.log = logger.bind(worker_id=worker_id)

    async def run(self) -> None:
        """Run cycles until the shutdown event is set."""
        self.log.info("Starting worker")
        metrics.worker_active.labels(worker_id=self.worker_id).set(1)

        try:
            while not self._shutdown_event.is_set():
                try:
                    await self.poll_once()
                except Exception:
                    self.log.exception("Unexpected error in worker cycle")
                    metrics.queue_errors_total.labels(operation="cycle").inc()
                    await self._backoff()
                # Let other workers and the shutdown signal run.
                await asyncio.sleep(0)
        finally:
            metrics.worker_active.labels(worker_id=self.worker_id).set(0)
            self.log.info("Worker stopped")

    async def poll_once(self) -> None:
        """Run a single receive, dispatch, acknowledge cycle."""
        try:
            messages = await self.queue.receive(
                self.config.queue_url,
                self.config.max_messages,
                self.config.wait_time_seconds,
            )
        except QueueError as e:
            self.log.error("Error while receiving messages from the queue", error=str(e))
            metrics.queue_errors_total.labels(operation="receive").inc()
            await self._backoff()
            return

        self._consecutive_errors = 0

        if not messages:
            return

        metrics.messages_received_total.inc(len(messages))

        entries = await self.dispatch(messages)
        if not entries:
            return

        await self.acknowledge(entries)

    async def dispatch(self, messages: List[QueueMessage]) -> List[DeleteEntry]:
        """
        Deliver messages in order.

        Args:
            messages: Messages from one receive call

        Returns:
            Delete entries for the messages that were delivered
        """
        entries = []

        for message in messages:
            try:
                await self.processor.deliver(message)
            except DeliveryError as e:
                self.log.error(
                    "Error while making HTTP request",
                    message_id=message.id,
                    status=e.status_code,
                    error=str(e),
                )
                metrics.deliveries_total.labels(status="failure").inc()
                continue
            except Exception:
                self.log.exception("Unexpected error during delivery", message_id=message.id)
                metrics.deliveries_total.labels(status="failure").inc()
                continue

            metrics.deliveries_total.labels(status="success").inc()
            entries.append(DeleteEntry.for_message(message))

        return entries

    async def acknowledge(self, entries: List[DeleteEntry]) -> None:
        """Delete delivered messages with one batch call."""
        try:
            failed = await self.queue.delete_batch(self.config.queue_url, entries)
        except QueueError as e:
            self.log.error(
                "Error while deleting messages from the queue",
                count=len(entries),
                error=str(e),
            )
            metrics.queue_errors_total.labels(operation="delete").inc()
            return

        metrics.messages_deleted_total.inc(len(entries) - len(failed))

    def backoff_delay(self) -> float:
        """Seconds to wait after the current run of receive errors."""
        if self.config.error_backoff_base <= 0 or self._consecutive_errors == 0:
            return 0.0

        exponent = min(self._consecutive_errors - 1, 32)
        return min(
            self.config.error_backoff_base * 2**exponent,
            self.config.error_backoff_max,
        )

    async def _backoff(self) -> None:
        """Wait after a receive error, returning early on shutdown."""
        self._consecutive_errors += 1

        delay = self.backoff_delay()
        if delay <= 0:
            return

        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._shutdown_event.wait(), timeout=delay)
