"""Orchestrates relaying Backlog notifications for every configured tenant."""

import time

import structlog

from backlog_slack_relay.backlog.adapter import BacklogHTTPAdapter
from backlog_slack_relay.backlog.exceptions import RemoteApiError
from backlog_slack_relay.configuration.config import RunContext
from backlog_slack_relay.configuration.models import TenantConfig
from backlog_slack_relay.configuration.resolver import load_tenant_configs
from backlog_slack_relay.slack.exceptions import DeliveryError
from backlog_slack_relay.slack.webhook import SlackWebhookClient
from backlog_slack_relay.sync.dispatcher import dispatch_notifications
from backlog_slack_relay.sync.fetcher import fetch_new_notifications
from backlog_slack_relay.sync.results import RunResult, TenantRunResult
from backlog_slack_relay.utils.constants import LEGACY_WEBHOOK_URL_PROPERTY, TEST_MESSAGE_TEXT

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def relay_tenant(context: RunContext, tenant: TenantConfig) -> TenantRunResult:
    """Fetch, deliver and commit the watermark for a single tenant.

    The watermark is committed once the fetch succeeded, even when a delivery
    fails part way through the batch. Undelivered notifications from that batch
    are then below the new watermark and are not retried.

    Raises:
        RemoteApiError: If the notifications could not be fetched.
        DeliveryError: If a Slack delivery failed.
    """
    log = logger.bind(tenant=tenant.label, storage_key=tenant.storage_key)
    previous_watermark = context.watermarks.read(tenant.storage_key)
    log.info("Relaying notifications", watermark=previous_watermark)

    fetch_result = fetch_new_notifications(BacklogHTTPAdapter.for_tenant(context.http_client, tenant), previous_watermark)
    log.info(
        "Fetched notifications",
        new_count=len(fetch_result.new_notifications),
        max_id=fetch_result.max_id,
        pages=fetch_result.pages_fetched,
    )

    result = TenantRunResult(
        label=tenant.label,
        storage_key=tenant.storage_key,
        previous_watermark=previous_watermark,
        watermark=previous_watermark,
    )
    try:
        result.delivered = dispatch_notifications(
            fetch_result.new_notifications,
            SlackWebhookClient(context.http_client, tenant.webhook_url),
            tenant.base_url,
        )
    finally:
        result.watermark = context.watermarks.advance(tenant.storage_key, fetch_result.max_id)
    return result


def run_relay_workflow(context: RunContext, isolate_failures: bool = False) -> RunResult:
    """Relay new notifications for every configured tenant, one after another.

    Args:
        context: Resources for this run.
        isolate_failures: When True, a tenant's RemoteApiError or DeliveryError is
            recorded on its result and the remaining tenants still run. When False
            the first such error ends the run.

    Raises:
        ConfigError: If the tenant configuration is invalid. Raised before any API call.
        RemoteApiError: If a fetch fails and failures are not isolated.
        DeliveryError: If a delivery fails and failures are not isolated.
    """
    tenants = load_tenant_configs(context.properties, default_domain=context.settings.BACKLOG_DOMAIN)
    run_result = RunResult()
    start_time = time.time()
    for tenant in tenants:
        previous_watermark = context.watermarks.read(tenant.storage_key)
        try:
            run_result.tenants.append(relay_tenant(context, tenant))
        except (RemoteApiError, DeliveryError) as exc:
            if not isolate_failures:
                raise
            logger.error("Relaying failed for tenant", tenant=tenant.label, storage_key=tenant.storage_key, error=str(exc))
            run_result.tenants.append(
                TenantRunResult(
                    label=tenant.label,
                    storage_key=tenant.storage_key,
                    previous_watermark=previous_watermark,
                    watermark=context.watermarks.read(tenant.storage_key),
                    delivered=exc.delivered if isinstance(exc, DeliveryError) else 0,
                    error=exc,
                )
            )
    logger.info(
        "Relayed notifications",
        tenant_count=len(run_result.tenants),
        failed_count=len(run_result.failed),
        delivered=run_result.delivered,
        duration=round(time.time() - start_time, 2),
    )
    return run_result


def resolve_test_webhook_url(context: RunContext) -> str:
    """Pick the webhook for the test message: the legacy property, else the first tenant's."""
    legacy_url = (context.properties.get(LEGACY_WEBHOOK_URL_PROPERTY) or "").strip()
    if legacy_url:
        return legacy_url
    return load_tenant_configs(context.properties, default_domain=context.settings.BACKLOG_DOMAIN)[0].webhook_url


def send_test_message(context: RunContext, text: str = TEST_MESSAGE_TEXT) -> None:
    """Post a fixed text message to check the Slack webhook, bypassing Backlog entirely.

    Raises:
        ConfigError: If no webhook is configured.
        DeliveryError: If the post fails.
    """
    SlackWebhookClient(context.http_client, resolve_test_webhook_url(context)).post_text(text)
    logger.info("Sent test message")
