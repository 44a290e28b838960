"""Prometheus metrics for monitoring."""

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, start_http_server

# Create registry
registry = CollectorRegistry()

# Queue metrics
messages_received_total = Counter(
    "sqsrelay_messages_received_total",
    "Total messages received from the queue",
    registry=registry,
)

messages_deleted_total = Counter(
    "sqsrelay_messages_deleted_total",
    "Total messages deleted from the queue",
    registry=registry,
)

queue_errors_total = Counter(
    "sqsrelay_queue_errors_total",
    "Queue call failures",
    ["operation"],
    registry=registry,
)

# Delivery metrics
deliveries_total = Counter(
    "sqsrelay_deliveries_total",
    "Delivery attempts",
    ["status"],
    registry=registry,
)

delivery_duration_seconds = Histogram(
    "sqsrelay_delivery_duration_seconds",
    "Delivery request duration",
    registry=registry,
)

# Worker metrics
worker_active = Gauge(
    "sqsrelay_worker_active",
    "Active workers",
    ["worker_id"],
    registry=registry,
)


class Metrics:
    """Metrics wrapper for easy access."""

    def __init__(self):
        self.messages_received_total = messages_received_total
        self.messages_deleted_total = messages_deleted_total
        self.queue_errors_total = queue_errors_total
        self.deliveries_total = deliveries_total
        self.delivery_duration_seconds = delivery_duration_seconds
        self.worker_active = worker_active
        self.registry = registry

    def serve(self, port: int) -> None:
        """Expose the registry over HTTP on a background thread."""
        start_http_server(port, registry=self.registry)


metrics = Metrics()
