"""AWS SQS implementation of the queue client."""

import asyncio
import functools
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional

import boto3
import structlog
from botocore.config import Config

from sqsrelay.exceptions import QueueError
from sqsrelay.queue.interface import DeleteEntry, QueueClientInterface, QueueMessage

logger = structlog.get_logger(__name__)

# SQS limits
_MAX_MESSAGES = 10
_MAX_WAIT_TIME_SECONDS = 20


class SQSQueue(QueueClientInterface):
    """
    SQS queue client backed by boto3.

    boto3 is blocking, so every call runs on a dedicated thread pool sized to
    the number of workers. This keeps one worker's long poll from holding up
    the others.
    """

    def __init__(
        self,
        region_name: str,
        endpoint_url: Optional[str] = None,
        max_workers: int = 10,
    ):
        """
        Initialize SQS queue client.

        Args:
            region_name: AWS region of the queue
            endpoint_url: Custom endpoint (e.g. LocalStack), None for AWS
            max_workers: Number of concurrent callers to support
        """
        self.region_name = region_name
        self.endpoint_url = endpoint_url or None
        self.max_workers = max(max_workers, 1)
        self._client: Any = None
        self._client_lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None

    def _create_client(self) -> Any:
        session = boto3.session.Session()
        return session.client(
            "sqs",
            region_name=self.region_name,
            endpoint_url=self.endpoint_url,
            config=Config(max_pool_connections=self.max_workers),
        )

    async def connect(self) -> None:
        """Create the boto3 client and the thread pool."""
        try:
            with self._client_lock:
                self._client = self._create_client()
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="sqsrelay-sqs"
            )
            logger.info(
                "SQS client created",
                region=self.region_name,
                endpoint_url=self.endpoint_url,
            )
        except Exception as e:
            logger.error("Failed to create SQS client", error=str(e))
            raise QueueError(f"Failed to create SQS client: {e}") from e

    async def disconnect(self) -> None:
        """Shut down the thread pool."""
        executor, self._executor = self._executor, None
        if executor:
            # In-flight long polls finish on the pool threads, off the event loop.
            await asyncio.to_thread(executor.shutdown, wait=True, cancel_futures=True)
        self._client = None
        logger.info("SQS client closed")

    async def refresh_credentials(self) -> None:
        """Replace the client with one built from a fresh session."""
        try:
            client = await self._run(self._create_client)
        except QueueError:
            raise
        except Exception as e:
            raise QueueError(f"Failed to refresh SQS credentials: {e}") from e

        with self._client_lock:
            self._client = client
        logger.debug("SQS credentials refreshed")

    async def _run(self, func, *args, **kwargs) -> Any:
        if self._executor is None:
            raise QueueError("SQS client is not connected")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, functools.partial(func, *args, **kwargs)
        )

    def _current_client(self) -> Any:
        with self._client_lock:
            client = self._client
        if client is None:
            raise QueueError("SQS client is not connected")
        return client

    async def receive(
        self,
        queue_url: str,
        max_messages: int,
        wait_time_seconds: int,
    ) -> List[QueueMessage]:
        """Long poll the queue for up to max_messages messages."""
        client = self._current_client()
        max_messages = min(max(1, max_messages), _MAX_MESSAGES)
        wait_time_seconds = max(0, min(wait_time_seconds, _MAX_WAIT_TIME_SECONDS))

        try:
            response = await self._run(
                client.receive_message,
                QueueUrl=queue_url,
                MaxNumberOfMessages=max_messages,
                WaitTimeSeconds=wait_time_seconds,
            )
        except QueueError:
            raise
        except Exception as e:
            raise QueueError(f"Failed to receive messages: {e}") from e

        return [
            QueueMessage(
                id=msg["MessageId"],
                body=msg.get("Body", ""),
                receipt_handle=msg["ReceiptHandle"],
            )
            for msg in response.get("Messages", [])
        ]

    async def delete_batch(self, queue_url: str, entries: List[DeleteEntry]) -> List[str]:
        """Delete delivered messages with one DeleteMessageBatch call."""
        if not entries:
            return []

        client = self._current_client()

        try:
            response = await self._run(
                client.delete_message_batch,
                QueueUrl=queue_url,
                Entries=[
                    {"Id": entry.id, "ReceiptHandle": entry.receipt_handle}
                    for entry in entries
                ],
            )
        except QueueError:
            raise
        except Exception as e:
            raise QueueError(f"Failed to delete messages: {e}") from e

        failed = response.get("Failed", [])
        for failure in failed:
            logger.warning(
                "SQS did not delete message",
                message_id=failure.get("Id"),
                code=failure.get("Code"),
                reason=failure.get("Message"),
            )
        return [failure.get("Id") for failure in failed]
