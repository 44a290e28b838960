"""HTTP delivery components."""

from sqsrelay.delivery.http_client import AiohttpDeliveryClient
from sqsrelay.delivery.interface import DeliveryClientInterface, DeliveryResponse
from sqsrelay.delivery.signer import MAC_HEADER, canonical_string, sign

__all__ = [
    "AiohttpDeliveryClient",
    "DeliveryClientInterface",
    "DeliveryResponse",
    "MAC_HEADER",
    "canonical_string",
    "sign",
]
