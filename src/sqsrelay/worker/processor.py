"""Message processor for forwarding queue messages to the configured endpoint."""

import time
from typing import Dict, Union

import structlog

from sqsrelay.delivery.interface import DeliveryClientInterface
from sqsrelay.delivery.signer import MAC_HEADER, sign
from sqsrelay.exceptions import DeliveryError
from sqsrelay.queue.interface import QueueMessage
from sqsrelay.utils.metrics import metrics
from sqsrelay.worker.models import WorkerConfig

logger = structlog.get_logger(__name__)

# Accepted status codes, 200 OK through 226 IM Used.
SUCCESS_STATUS_MIN = 200
SUCCESS_STATUS_MAX = 226


def is_success_status(status_code: int) -> bool:
    """Return True if the endpoint accepted the delivery."""
    return SUCCESS_STATUS_MIN <= status_code <= SUCCESS_STATUS_MAX


class MessageProcessor:
    """Deliver messages as signed POST requests."""

    def __init__(self, config: WorkerConfig, client: DeliveryClientInterface):
        """Initialize the processor.

        Args:
            config: Shared worker configuration
            client: HTTP delivery client
        """
        self.config = config
        self.client = client

    def build_headers(self, body: Union[str, bytes]) -> Dict[str, str]:
        """Headers for delivering body: MAC when signing, Content-Type when configured."""
        headers = {}

        if self.config.signing_enabled:
            headers[MAC_HEADER] = sign(self.config.http_url, body, self.config.secret_key)

        if self.config.content_type:
            headers["Content-Type"] = self.config.content_type

        return headers

    async def deliver(self, message: QueueMessage) -> int:
        """
        POST a message body to the endpoint.

        Args:
            message: Message to deliver

        Returns:
            Response status code

        Raises:
            DeliveryError: On transport failure or a non-success status
        """
        headers = self.build_headers(message.body)

        start_time = time.monotonic()
        try:
            response = await self.client.send(
                "POST",
                self.config.http_url,
                message.body,
                headers,
            )
        finally:
            metrics.delivery_duration_seconds.observe(time.monotonic() - start_time)

        if not is_success_status(response.status_code):
            raise DeliveryError(
                f"Non-success status code received: {response.status_code}",
                status_code=response.status_code,
            )

        logger.debug(
            "Message delivered",
            message_id=message.id,
            status=response.status_code,
        )
        return response.status_code
