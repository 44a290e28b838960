"""Message queue abstraction layer."""

from sqsrelay.queue.factory import create_queue
from sqsrelay.queue.interface import DeleteEntry, QueueClientInterface, QueueMessage

__all__ = ["DeleteEntry", "QueueClientInterface", "QueueMessage", "create_queue"]
