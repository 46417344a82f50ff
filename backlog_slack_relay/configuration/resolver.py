"""Resolve tenant configuration from the property store."""

import json
from dataclasses import replace
from typing import Any

import structlog

from backlog_slack_relay.configuration.exceptions import ConfigError, TenantConfigFieldError
from backlog_slack_relay.configuration.models import TenantConfig
from backlog_slack_relay.storage.abc import PropertyStoreBase
from backlog_slack_relay.utils.constants import (
    CONFIGS_PROPERTY,
    DEFAULT_BACKLOG_DOMAIN,
    LEGACY_API_KEY_PROPERTY,
    LEGACY_SPACE_ID_PROPERTY,
    LEGACY_WEBHOOK_URL_PROPERTY,
    WATERMARK_KEY_PREFIX,
)
from backlog_slack_relay.utils.helpers import first_non_empty, slugify_storage_key

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

# Accepted names for each required field, in order of preference.
SPACE_FIELDS = ("space", "spaceId")
API_KEY_FIELDS = ("apiKey", "apikey")
WEBHOOK_FIELDS = ("webhook", "webhookUrl", "slackWebhookUrl")
LABEL_FIELDS = ("id", "identifier", "label", "name", "space")


def _scalar_text(value: Any) -> str | None:
    """Render a scalar JSON value as text, ignoring booleans, objects and arrays."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return value if isinstance(value, str) else None


def _required_field(element: dict[str, Any], names: tuple[str, ...], position: int) -> str:
    value = first_non_empty(*(element.get(name) for name in names))
    if not value:
        raise TenantConfigFieldError(names[0], position)
    return value.strip()


def resolve_storage_key(explicit_key: str | None, label: str, prefix: str = WATERMARK_KEY_PREFIX) -> str:
    """Derive the property key that stores a tenant's watermark.

    An explicit key that already carries the prefix is used verbatim. Any other
    explicit key, or the label when there is none, is slugified into
    ``<prefix>__<slug>``.
    """
    if explicit_key and explicit_key.startswith(prefix):
        return explicit_key
    slug = slugify_storage_key(explicit_key or label)
    return f"{prefix}__{slug}"


def ensure_unique_storage_keys(configs: list[TenantConfig], prefix: str = WATERMARK_KEY_PREFIX) -> list[TenantConfig]:
    """Return configs whose storage keys are distinct, suffixing collisions with _2, _3, ..."""
    claimed: set[str] = set()
    unique: list[TenantConfig] = []
    for index, config in enumerate(configs, start=1):
        key = config.storage_key or f"{prefix}__workspace_{index}"
        if key in claimed:
            suffix = 2
            while f"{key}_{suffix}" in claimed:
                suffix += 1
            logger.warning(
                "Storage key collision resolved",
                label=config.label,
                storage_key=key,
                resolved_storage_key=f"{key}_{suffix}",
            )
            key = f"{key}_{suffix}"
        claimed.add(key)
        if key != config.storage_key:
            config = replace(config, storage_key=key)
        unique.append(config)
    return unique


def parse_tenant_configs(raw: str, default_domain: str = DEFAULT_BACKLOG_DOMAIN) -> list[TenantConfig]:
    """Parse and validate a JSON array of tenant configuration objects.

    Args:
        raw: JSON text of the tenant configuration array.
        default_domain: Backlog domain for elements that do not name one.

    Raises:
        ConfigError: If the text is not a non-empty JSON array, or any element is
            invalid. Validation stops at the first invalid element.

    Returns:
        list[TenantConfig]: Validated configs with unique storage keys.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{CONFIGS_PROPERTY} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ConfigError(f"{CONFIGS_PROPERTY} must be a JSON array, got {type(data).__name__}")
    if not data:
        raise ConfigError(f"{CONFIGS_PROPERTY} must contain at least one tenant configuration")

    configs: list[TenantConfig] = []
    for position, element in enumerate(data, start=1):
        if not isinstance(element, dict):
            raise ConfigError(f"Tenant configuration #{position} must be an object, got {type(element).__name__}")
        space_id = _required_field(element, SPACE_FIELDS, position)
        api_key = _required_field(element, API_KEY_FIELDS, position)
        webhook_url = _required_field(element, WEBHOOK_FIELDS, position)
        label = first_non_empty(*(_scalar_text(element.get(name)) for name in LABEL_FIELDS)).strip() or f"workspace-{position}"
        explicit_key = first_non_empty(_scalar_text(element.get("storageKey"))).strip() or None
        configs.append(
            TenantConfig(
                space_id=space_id,
                api_key=api_key,
                webhook_url=webhook_url,
                label=label,
                storage_key=resolve_storage_key(explicit_key, label),
                domain=first_non_empty(element.get("domain")).strip() or default_domain,
            )
        )
    return ensure_unique_storage_keys(configs)


def load_legacy_tenant_config(properties: PropertyStoreBase, default_domain: str = DEFAULT_BACKLOG_DOMAIN) -> TenantConfig:
    """Build the single tenant described by the flat legacy properties."""
    values = {
        name: (properties.get(name) or "").strip()
        for name in (LEGACY_SPACE_ID_PROPERTY, LEGACY_API_KEY_PROPERTY, LEGACY_WEBHOOK_URL_PROPERTY)
    }
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigError(
            f"No {CONFIGS_PROPERTY} property found and legacy configuration is incomplete - missing properties include " + ", ".join(missing)
        )
    return TenantConfig(
        space_id=values[LEGACY_SPACE_ID_PROPERTY],
        api_key=values[LEGACY_API_KEY_PROPERTY],
        webhook_url=values[LEGACY_WEBHOOK_URL_PROPERTY],
        label=values[LEGACY_SPACE_ID_PROPERTY],
        storage_key=WATERMARK_KEY_PREFIX,
        domain=default_domain,
    )


def load_tenant_configs(properties: PropertyStoreBase, default_domain: str = DEFAULT_BACKLOG_DOMAIN) -> list[TenantConfig]:
    """Load tenant configuration, preferring the JSON array over the legacy properties."""
    raw = properties.get(CONFIGS_PROPERTY)
    if raw is not None and raw.strip():
        configs = parse_tenant_configs(raw, default_domain=default_domain)
        logger.info("Loaded tenant configurations", source=CONFIGS_PROPERTY, count=len(configs))
        return configs
    config = load_legacy_tenant_config(properties, default_domain=default_domain)
    logger.info("Loaded legacy tenant configuration", label=config.label)
    return [config]
