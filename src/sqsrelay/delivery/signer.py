"""HMAC-SHA256 request signing.

The endpoint verifies a delivery by recomputing the tag over
``"POST " + url.rstrip("/") + "\\n" + body`` with the shared secret and
comparing it to the ``MAC`` header.
"""

import hashlib
import hmac
from typing import Union

MAC_HEADER = "MAC"


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def canonical_string(url: str, body: Union[str, bytes]) -> bytes:
    """Build the string that is signed for a POST of body to url.

    Example:
        >>> canonical_string("https://example.com/hook/", "payload")
        b'POST https://example.com/hook\\npayload'
    """
    prefix = f"POST {url.rstrip('/')}\n".encode("utf-8")
    return prefix + _to_bytes(body)


def sign(url: str, body: Union[str, bytes], secret_key: Union[str, bytes]) -> str:
    """Compute the hex-encoded HMAC-SHA256 tag for a delivery.

    Args:
        url: Target endpoint URL
        body: Raw request body
        secret_key: Shared secret

    Returns:
        64 character lower-case hex digest
    """
    return hmac.new(
        key=_to_bytes(secret_key),
        msg=canonical_string(url, body),
        digestmod=hashlib.sha256,
    ).hexdigest()


def verify(url: str, body: Union[str, bytes], secret_key: Union[str, bytes], tag: str) -> bool:
    """Check a received tag in constant time."""
    return hmac.compare_digest(sign(url, body, secret_key), tag)
