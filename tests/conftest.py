"""Test configuration and fixtures."""

from unittest.mock import AsyncMock

import pytest

from sqsrelay.delivery.interface import DeliveryClientInterface, DeliveryResponse
from sqsrelay.queue.interface import QueueClientInterface, QueueMessage
from sqsrelay.worker.models import WorkerConfig

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/jobs"
HTTP_URL = "https://example.com/hook/"


@pytest.fixture
def worker_config() -> WorkerConfig:
    """Worker configuration with signing and a content type."""
    return WorkerConfig(
        queue_url=QUEUE_URL,
        max_messages=10,
        wait_time_seconds=5,
        secret_key=b"s3cr3t",
        http_url=HTTP_URL,
        content_type="application/json",
    )


@pytest.fixture
def mock_queue():
    """Create mock queue client that returns no messages."""
    queue = AsyncMock(spec=QueueClientInterface)
    queue.receive = AsyncMock(return_value=[])
    queue.delete_batch = AsyncMock(return_value=[])
    return queue


@pytest.fixture
def mock_delivery_client():
    """Create mock delivery client that accepts every request."""
    client = AsyncMock(spec=DeliveryClientInterface)
    client.send = AsyncMock(return_value=DeliveryResponse(status_code=200))
    return client


@pytest.fixture
def make_messages():
    """Factory for lists of queue messages."""

    def _make(count: int, prefix: str = "msg") -> list[QueueMessage]:
        return [
            QueueMessage(
                id=f"{prefix}-{i}",
                body=f'{{"n": {i}}}',
                receipt_handle=f"handle-{prefix}-{i}",
            )
            for i in range(count)
        ]

    return _make
