"""Fixtures for unit tests."""

from typing import Any, Callable, Generator

import httpx
import pytest
import structlog

from backlog_slack_relay.configuration.config import RunContext
from backlog_slack_relay.configuration.env import Settings
from backlog_slack_relay.storage.properties import InMemoryPropertyStore


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_notification() -> Callable[..., dict[str, Any]]:
    """Return a factory for raw issue-comment notifications as returned by the Backlog API."""

    def factory(notification_id: int, already_read: bool = False, **extra: Any) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": notification_id,
            "alreadyRead": already_read,
            "reason": 2,
            "project": {"id": 1, "projectKey": "PRJ", "name": "Project"},
            "issue": {"id": notification_id, "issueKey": f"PRJ-{notification_id}", "summary": f"Issue {notification_id}"},
            "comment": {"id": notification_id, "content": f"Comment {notification_id}"},
            "sender": {"id": 7, "name": "alice"},
            "created": "2024-05-01T09:30:00Z",
        }
        data.update(extra)
        return data

    return factory


@pytest.fixture
def make_context() -> Callable[..., RunContext]:
    """Return a factory for run contexts backed by an in-memory store and a mock HTTP transport."""

    def factory(handler: Callable[[httpx.Request], httpx.Response], properties: dict[str, str] | None = None) -> RunContext:
        return RunContext(
            properties=InMemoryPropertyStore(properties),
            settings=Settings(_env_file=None),  # type: ignore[call-arg]
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

    return factory
