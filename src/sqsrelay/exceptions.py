"""Custom exceptions for sqsrelay."""

from typing import Optional


class SQSRelayError(Exception):
    """Base exception for sqsrelay."""

    pass


class QueueError(SQSRelayError):
    """Exception raised for queue operation errors."""

    pass


class DeliveryError(SQSRelayError):
    """Exception raised when a message could not be delivered to the endpoint."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(SQSRelayError):
    """Exception raised for configuration errors."""

    pass
