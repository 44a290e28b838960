"""Message queue interface definition.

The worker pool consumes a queue through two operations: a long-polling
receive and a batch delete. Implementations must be safe to call from many
workers at once.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class QueueMessage:
    """A message received from the queue."""

    id: str
    body: str
    receipt_handle: str


@dataclass(frozen=True)
class DeleteEntry:
    """Identifies a delivered message for batch deletion."""

    id: str
    receipt_handle: str

    @classmethod
    def for_message(cls, message: QueueMessage) -> "DeleteEntry":
        return cls(id=message.id, receipt_handle=message.receipt_handle)


class QueueClientInterface(ABC):
    """
    Abstract interface for queue clients.

    Implementations wrap backend failures in QueueError so the worker loop
    only has one exception type to handle.
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Prepare the client for use.

        Raises:
            QueueError: If the client cannot be created
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release client resources."""
        pass

    @abstractmethod
    async def receive(
        self,
        queue_url: str,
        max_messages: int,
        wait_time_seconds: int,
    ) -> List[QueueMessage]:
        """
        Receive messages, waiting up to wait_time_seconds for some to arrive.

        Args:
            queue_url: Queue to poll
            max_messages: Maximum number of messages to return
            wait_time_seconds: Long polling wait time

        Returns:
            Received messages (may be empty)

        Raises:
            QueueError: If the receive call fails
        """
        pass

    @abstractmethod
    async def delete_batch(self, queue_url: str, entries: List[DeleteEntry]) -> List[str]:
        """
        Delete several messages in a single call.

        Args:
            queue_url: Queue the messages came from
            entries: Messages to delete

        Returns:
            Ids of entries the backend reported as not deleted

        Raises:
            QueueError: If the delete call fails
        """
        pass

    async def refresh_credentials(self) -> None:
        """
        Rebuild backend credentials.

        Optional method - backends without expiring credentials do nothing.
        """
        return None
