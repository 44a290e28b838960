"""Process entry point for the delivery daemon."""

import asyncio
import signal
import sys

import structlog
from pydantic import ValidationError

from sqsrelay.config.settings import Settings
from sqsrelay.delivery.http_client import AiohttpDeliveryClient
from sqsrelay.exceptions import ConfigurationError, QueueError
from sqsrelay.queue.factory import create_queue
from sqsrelay.queue.interface import QueueClientInterface
from sqsrelay.utils.logging import bind_context, setup_logging
from sqsrelay.utils.metrics import metrics
from sqsrelay.worker.supervisor import Supervisor

logger = structlog.get_logger(__name__)


async def refresh_credentials_periodically(
    queue: QueueClientInterface,
    supervisor: Supervisor,
    interval: float,
) -> None:
    """Rebuild queue credentials every interval seconds until shutdown."""
    while not supervisor.is_shutting_down:
        await asyncio.sleep(interval)
        try:
            await queue.refresh_credentials()
        except QueueError as e:
            logger.error("Failed to refresh queue credentials", error=str(e))


def install_signal_handlers(supervisor: Supervisor) -> None:
    """Route SIGTERM and SIGINT to a graceful shutdown."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, supervisor.shutdown)


async def run(settings: Settings) -> None:
    """
    Run the daemon until a shutdown signal arrives.

    Args:
        settings: Validated application settings
    """
    queue = await create_queue(settings)
    delivery_client = AiohttpDeliveryClient(
        max_connections=settings.http.max_connections,
        timeout_seconds=settings.http.timeout_seconds,
    )

    supervisor = Supervisor(settings.to_worker_config(), queue, delivery_client)
    install_signal_handlers(supervisor)

    refresher = None
    if settings.queue.credential_refresh_seconds > 0:
        refresher = asyncio.create_task(
            refresh_credentials_periodically(
                queue, supervisor, settings.queue.credential_refresh_seconds
            )
        )

    try:
        supervisor.start(settings.worker.count)
        await supervisor.wait()
    finally:
        if refresher:
            refresher.cancel()
            try:
                await refresher
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Credential refresher failed")
        await delivery_client.close()
        await queue.disconnect()
        logger.info("Shutdown complete")


def load_settings() -> Settings:
    """Read settings from the environment.

    Raises:
        ConfigurationError: If a value fails validation
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def main() -> None:
    """Main entry point."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.error("Invalid configuration", error=str(e))
        sys.exit(1)

    setup_logging(settings.monitoring.log_level, settings.monitoring.log_format)

    try:
        settings.validate_required()
    except ConfigurationError as e:
        logger.error("Invalid configuration", error=str(e))
        sys.exit(1)

    bind_context(
        queue_region=settings.queue.region,
        queue_url=settings.queue.url,
        http_url=settings.http.url,
        http_max_connections=settings.http.max_connections,
        worker_count=settings.worker.count,
    )

    if settings.monitoring.metrics_enabled:
        metrics.serve(settings.monitoring.metrics_port)
        logger.info("Metrics server started", port=settings.monitoring.metrics_port)

    try:
        asyncio.run(run(settings))
    except QueueError as e:
        logger.error("Failed to start", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
