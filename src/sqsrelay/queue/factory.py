"""Factory for creating queue client instances."""

from typing import TYPE_CHECKING

import structlog

from sqsrelay.exceptions import QueueError
from sqsrelay.queue.interface import QueueClientInterface
from sqsrelay.queue.sqs_queue import SQSQueue

if TYPE_CHECKING:
    from sqsrelay.config.settings import Settings

logger = structlog.get_logger(__name__)


async def create_queue(settings: "Settings") -> QueueClientInterface:
    """
    Create and connect the queue client described by the settings.

    Args:
        settings: Application settings

    Returns:
        Connected queue client

    Raises:
        QueueError: If the client cannot be created
    """
    logger.info("Creating queue client", region=settings.queue.region)

    try:
        queue = SQSQueue(
            region_name=settings.queue.region,
            endpoint_url=settings.queue.endpoint_url or None,
            max_workers=settings.worker.count,
        )
        await queue.connect()
        return queue
    except QueueError:
        raise
    except Exception as e:
        logger.error("Failed to create queue client", error=str(e))
        raise QueueError(f"Failed to create SQS queue client: {e}") from e
