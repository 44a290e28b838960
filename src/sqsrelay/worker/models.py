"""Data models shared by the worker pool."""

from pydantic import BaseModel, ConfigDict, Field


class WorkerConfig(BaseModel):
    """Immutable configuration read by every worker."""

    model_config = ConfigDict(frozen=True)

    queue_url: str = Field(..., description="SQS queue URL", min_length=1)
    max_messages: int = Field(default=10, description="Max messages per receive call", ge=1)
    wait_time_seconds: int = Field(default=10, description="Long polling wait time", ge=0)
    secret_key: bytes = Field(default=b"", description="HMAC key; empty disables signing", repr=False)
    http_url: str = Field(..., description="Target endpoint URL", min_length=1)
    content_type: str = Field(default="", description="Content-Type header; empty omits it")
    error_backoff_base: float = Field(default=0.0, description="Receive error backoff base", ge=0)
    error_backoff_max: float = Field(default=30.0, description="Receive error backoff cap", ge=0)

    @property
    def signing_enabled(self) -> bool:
        """Whether requests carry a MAC header."""
        return len(self.secret_key) > 0
