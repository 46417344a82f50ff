"""Unit tests for the Slack webhook client."""

import json

import httpx
import pytest

from backlog_slack_relay.slack.exceptions import DeliveryError
from backlog_slack_relay.slack.webhook import SlackWebhookClient

WEBHOOK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"


def test_post_sends_json_payload() -> None:
    """The payload is posted as JSON to the webhook URL."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text="ok")

    client = SlackWebhookClient(httpx.Client(transport=httpx.MockTransport(handler)), WEBHOOK_URL)
    client.post({"text": "hello", "blocks": []})
    assert requests[0].method == "POST"
    assert str(requests[0].url) == WEBHOOK_URL
    assert json.loads(requests[0].content) == {"text": "hello", "blocks": []}


def test_post_text() -> None:
    """Plain text messages carry only a text field."""
    bodies: list[object] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, text="ok")

    SlackWebhookClient(httpx.Client(transport=httpx.MockTransport(handler)), WEBHOOK_URL).post_text("ping")
    assert bodies == [{"text": "ping"}]


@pytest.mark.parametrize("status_code,body", [(400, "invalid_payload"), (403, "action_prohibited"), (404, "no_service"), (500, "")])
def test_non_success_status_raises(status_code: int, body: str) -> None:
    """Any non-2xx status raises DeliveryError with status and body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=body)

    with pytest.raises(DeliveryError) as exc_info:
        SlackWebhookClient(httpx.Client(transport=httpx.MockTransport(handler)), WEBHOOK_URL).post({"text": "x"})
    assert exc_info.value.status_code == status_code
    assert exc_info.value.body == body


def test_transport_error_raises_with_status_zero() -> None:
    """Connection failures surface as DeliveryError with status 0."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(DeliveryError) as exc_info:
        SlackWebhookClient(httpx.Client(transport=httpx.MockTransport(handler)), WEBHOOK_URL).post({"text": "x"})
    assert exc_info.value.status_code == 0
