"""Application settings and configuration."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqsrelay.exceptions import ConfigurationError
from sqsrelay.worker.models import WorkerConfig


class QueueSettings(BaseModel):
    """SQS queue configuration."""

    region: str = Field(default="", description="AWS region of the queue")
    url: str = Field(default="", description="SQS queue URL")
    max_messages: int = Field(
        default=10, description="Max messages per receive call", ge=1, le=10
    )
    wait_time_seconds: int = Field(
        default=10, description="Long polling wait time in seconds", ge=0, le=20
    )
    endpoint_url: str = Field(
        default="", description="Custom AWS endpoint URL (e.g. LocalStack)"
    )
    credential_refresh_seconds: int = Field(
        default=60, description="Interval for rebuilding AWS credentials (0 disables)", ge=0
    )


class HTTPSettings(BaseModel):
    """Delivery endpoint configuration."""

    url: str = Field(default="", description="Target endpoint URL")
    content_type: str = Field(default="", description="Content-Type header to send")
    secret_key: str = Field(
        default="", description="HMAC key for the MAC header (empty disables)", repr=False
    )
    max_connections: int = Field(default=50, description="HTTP connection pool size", ge=1)
    timeout_seconds: float = Field(default=30.0, description="Request timeout", gt=0)


class WorkerSettings(BaseModel):
    """Worker pool configuration."""

    count: int = Field(default=50, description="Number of concurrent workers", ge=1)
    error_backoff_base: float = Field(
        default=0.0, description="Base delay after a receive error (0 disables)", ge=0
    )
    error_backoff_max: float = Field(
        default=30.0, description="Maximum delay after repeated receive errors", ge=0
    )


class MonitoringSettings(BaseModel):
    """Monitoring and observability configuration."""

    metrics_enabled: bool = Field(default=False, description="Serve Prometheus metrics")
    metrics_port: int = Field(default=9090, description="Metrics server port", ge=0, le=65535)
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SQSD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    queue: QueueSettings = Field(default_factory=QueueSettings)
    http: HTTPSettings = Field(default_factory=HTTPSettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    def validate_required(self) -> None:
        """
        Check that every setting without a usable default is present.

        Raises:
            ConfigurationError: Naming all missing settings
        """
        required = {
            "SQSD_QUEUE__REGION": self.queue.region,
            "SQSD_QUEUE__URL": self.queue.url,
            "SQSD_HTTP__URL": self.http.url,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

    def to_worker_config(self) -> WorkerConfig:
        """Build the immutable configuration shared by all workers."""
        return WorkerConfig(
            queue_url=self.queue.url,
            max_messages=self.queue.max_messages,
            wait_time_seconds=self.queue.wait_time_seconds,
            secret_key=self.http.secret_key.encode("utf-8"),
            http_url=self.http.url,
            content_type=self.http.content_type,
            error_backoff_base=self.worker.error_backoff_base,
            error_backoff_max=self.worker.error_backoff_max,
        )
