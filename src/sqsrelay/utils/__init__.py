"""Utility functions and helpers."""

from sqsrelay.utils.logging import bind_context, setup_logging
from sqsrelay.utils.metrics import metrics

__all__ = ["bind_context", "metrics", "setup_logging"]
