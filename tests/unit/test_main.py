"""Unit tests for the process entry point."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import pytest

from sqsrelay.config.settings import HTTPSettings, QueueSettings, Settings, WorkerSettings
from sqsrelay.exceptions import ConfigurationError, QueueError
from sqsrelay.main import load_settings, main, refresh_credentials_periodically, run


@pytest.fixture
def settings():
    return Settings(
        queue=QueueSettings(region="us-east-1", url="https://queue", credential_refresh_seconds=0),
        http=HTTPSettings(url="http://app/hook", max_connections=20, timeout_seconds=5),
        worker=WorkerSettings(count=3),
    )


def test_load_settings_rejects_invalid_values(monkeypatch, tmp_path):
    """Test that malformed env values become ConfigurationError."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SQSD_QUEUE__MAX_MESSAGES", "50")

    with pytest.raises(ConfigurationError, match="Invalid settings"):
        load_settings()


def test_main_exits_on_missing_settings(monkeypatch, tmp_path):
    """Test that missing required settings stop the process with status 1."""
    monkeypatch.chdir(tmp_path)
    for name in ("SQSD_QUEUE__REGION", "SQSD_QUEUE__URL", "SQSD_HTTP__URL"):
        monkeypatch.delenv(name, raising=False)

    with patch("sqsrelay.main.setup_logging"), patch("sqsrelay.main.asyncio.run") as mock_run:
        with pytest.raises(SystemExit) as exc_info:
            main()

    assert exc_info.value.code == 1
    mock_run.assert_not_called()


@pytest.mark.asyncio
async def test_run_starts_pool_and_releases_clients(settings):
    """Test the startup and teardown sequence."""
    queue = AsyncMock()
    delivery_client = AsyncMock()
    supervisor = MagicMock()
    supervisor.wait = AsyncMock()

    with (
        patch("sqsrelay.main.create_queue", AsyncMock(return_value=queue)),
        patch("sqsrelay.main.AiohttpDeliveryClient", return_value=delivery_client) as client_cls,
        patch("sqsrelay.main.Supervisor", return_value=supervisor) as supervisor_cls,
        patch("sqsrelay.main.install_signal_handlers") as install,
    ):
        await run(settings)

    client_cls.assert_called_once_with(max_connections=20, timeout_seconds=5)
    config = supervisor_cls.call_args[0][0]
    assert config.queue_url == "https://queue"
    install.assert_called_once_with(supervisor)
    supervisor.start.assert_called_once_with(3)
    supervisor.wait.assert_awaited_once()
    delivery_client.close.assert_awaited_once()
    queue.disconnect.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_propagates_queue_creation_failure(settings):
    """Test that a queue client that cannot be built aborts startup."""
    with patch("sqsrelay.main.create_queue", AsyncMock(side_effect=QueueError("no region"))):
        with pytest.raises(QueueError):
            await run(settings)


@pytest.mark.asyncio
async def test_refresh_credentials_until_shutdown():
    """Test periodic credential refresh stops once shutdown starts."""
    queue = AsyncMock()
    supervisor = MagicMock()
    type(supervisor).is_shutting_down = PropertyMock(side_effect=[False, False, True])

    await asyncio.wait_for(refresh_credentials_periodically(queue, supervisor, 0), timeout=1)

    assert queue.refresh_credentials.await_count == 2


@pytest.mark.asyncio
async def test_refresh_credentials_survives_errors():
    """Test that a failed refresh is logged and retried next interval."""
    queue = AsyncMock()
    queue.refresh_credentials.side_effect = [QueueError("sts down"), None]
    supervisor = MagicMock()
    type(supervisor).is_shutting_down = PropertyMock(side_effect=[False, False, True])

    await asyncio.wait_for(refresh_credentials_periodically(queue, supervisor, 0), timeout=1)

    assert queue.refresh_credentials.await_count == 2


@pytest.mark.asyncio
async def test_run_awaits_cancelled_refresher(settings):
    """Test that teardown leaves no credential refresher task behind."""
    settings.queue.credential_refresh_seconds = 60
    queue = AsyncMock()
    supervisor = MagicMock()
    supervisor.wait = AsyncMock()
    supervisor.is_shutting_down = False

    with (
        patch("sqsrelay.main.create_queue", AsyncMock(return_value=queue)),
        patch("sqsrelay.main.AiohttpDeliveryClient", return_value=AsyncMock()),
        patch("sqsrelay.main.Supervisor", return_value=supervisor),
        patch("sqsrelay.main.install_signal_handlers"),
    ):
        await run(settings)

    assert asyncio.all_tasks() == {asyncio.current_task()}
    queue.refresh_credentials.assert_not_awaited()
