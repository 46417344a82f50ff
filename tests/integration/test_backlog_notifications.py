"""Integration tests against a live Backlog space."""

from backlog_slack_relay.backlog.adapter import BacklogHTTPAdapter
from backlog_slack_relay.backlog.models import parse_notifications
from backlog_slack_relay.sync.fetcher import fetch_new_notifications


def test_list_notifications_returns_descending_ids(backlog_adapter: BacklogHTTPAdapter) -> None:
    """The notifications endpoint lists newest first."""
    payload = backlog_adapter.list_notifications(count=20)
    assert isinstance(payload, list)
    ids = [notification.id for notification in parse_notifications(payload)]
    assert ids == sorted(ids, reverse=True)


def test_fetch_from_newest_finds_nothing(backlog_adapter: BacklogHTTPAdapter) -> None:
    """Fetching above the newest notification ID yields no new notifications."""
    payload = backlog_adapter.list_notifications(count=1)
    if not payload:
        return
    newest_id = parse_notifications(payload)[0].id
    result = fetch_new_notifications(backlog_adapter, newest_id, page_limit=1)
    assert result.new_notifications == []
    assert result.max_id == newest_id
