"""Delivery client interface definition."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Union


@dataclass(frozen=True)
class DeliveryResponse:
    """Response from the delivery endpoint."""

    status_code: int
    body: bytes = b""


class DeliveryClientInterface(ABC):
    """
    Abstract interface for HTTP delivery clients.

    Implementations must be safe for concurrent use by many workers.
    """

    @abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        body: Union[str, bytes],
        headers: Dict[str, str],
    ) -> DeliveryResponse:
        """
        Send a single HTTP request.

        Args:
            method: HTTP method
            url: Target URL
            body: Raw request payload
            headers: Request headers

        Returns:
            Status code and body of the response

        Raises:
            DeliveryError: On network errors or timeouts
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the client."""
        pass
