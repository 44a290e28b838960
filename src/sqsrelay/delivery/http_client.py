"""aiohttp implementation of the delivery client."""

from typing import Dict, Optional, Union

import aiohttp
import structlog

from sqsrelay.delivery.interface import DeliveryClientInterface, DeliveryResponse
from sqsrelay.exceptions import DeliveryError

logger = structlog.get_logger(__name__)


def _has_header(headers: Dict[str, str], name: str) -> bool:
    return any(key.lower() == name.lower() for key in headers)


class AiohttpDeliveryClient(DeliveryClientInterface):
    """Delivery client sharing one pooled aiohttp session."""

    def __init__(self, max_connections: int = 50, timeout_seconds: float = 30.0):
        """Initialize the client.

        Args:
            max_connections: Connection pool size
            timeout_seconds: Total timeout for a single request
        """
        self.max_connections = max_connections
        self.timeout_seconds = timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.max_connections,
                limit_per_host=self.max_connections,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            )
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def send(
        self,
        method: str,
        url: str,
        body: Union[str, bytes],
        headers: Dict[str, str],
    ) -> DeliveryResponse:
        session = await self._get_session()
        data = body.encode("utf-8") if isinstance(body, str) else body

        # Only send a Content-Type when one is configured.
        skip_auto_headers = () if _has_header(headers, "Content-Type") else ("Content-Type",)

        try:
            async with session.request(
                method=method,
                url=url,
                data=data,
                headers=dict(headers),
                skip_auto_headers=skip_auto_headers,
            ) as response:
                # Drain the body so the connection goes back to the pool.
                payload = await response.read()
                logger.debug("Endpoint responded", url=url, status=response.status)
                return DeliveryResponse(status_code=response.status, body=payload)

        except aiohttp.ClientError as e:
            raise DeliveryError(f"HTTP request failed: {e}") from e
        except TimeoutError:
            raise DeliveryError("HTTP request timed out") from None
