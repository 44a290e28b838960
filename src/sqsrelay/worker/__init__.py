"""Worker pool components."""

from sqsrelay.worker.models import WorkerConfig
from sqsrelay.worker.processor import MessageProcessor, is_success_status
from sqsrelay.worker.supervisor import Supervisor
from sqsrelay.worker.worker import Worker

__all__ = ["MessageProcessor", "Supervisor", "Worker", "WorkerConfig", "is_success_status"]
