"""
sqsrelay - SQS to HTTP delivery daemon

Pulls messages from an SQS queue and forwards each one as a signed HTTP POST.
"""

__version__ = "0.1.0"
__author__ = "sqsrelay Team"
__all__ = ["config", "delivery", "queue", "utils", "worker"]
