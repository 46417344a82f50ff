"""Shared constants used across the application."""

# Property Store Keys
# -------------------

CONFIGS_PROPERTY = "BACKLOG_CONFIGS"
"""Property holding the JSON array of tenant configurations."""

LEGACY_SPACE_ID_PROPERTY = "BACKLOG_SPACE_ID"
"""Legacy single-tenant property holding the Backlog space ID."""

LEGACY_API_KEY_PROPERTY = "BACKLOG_API_KEY"
"""Legacy single-tenant property holding the Backlog API key."""

LEGACY_WEBHOOK_URL_PROPERTY = "SLACK_WEBHOOK_URL"
"""Legacy single-tenant property holding the Slack incoming webhook URL."""

WATERMARK_KEY_PREFIX = "BACKLOG_LAST_NOTIFICATION_ID"
"""Prefix of every property that stores a tenant watermark."""

# Backlog API Constants
# ---------------------

DEFAULT_BACKLOG_DOMAIN = "backlog.jp"
"""Default host suffix; a space lives at https://<space>.<domain>."""

NOTIFICATIONS_PAGE_SIZE = 100
"""Maximum number of notifications the API returns per page."""

PAGE_LIMIT = 10
"""Maximum number of notification pages requested per tenant per run."""

# Message Formatting Constants
# ----------------------------

SNIPPET_MAX_LENGTH = 300
"""Maximum snippet length before truncation."""

SNIPPET_TRUNCATION_SUFFIX = "…"
"""Marker appended to truncated snippets."""

DEFAULT_PROJECT_NAME = "Backlog"
"""Header used when a notification carries no project."""

DEFAULT_ACTOR_NAME = "不明なユーザー"
"""Actor shown when a notification carries no sender."""

DEFAULT_WIKI_NAME = "(無題)"
"""Wiki page name used when a wiki notification carries no name."""

FALLBACK_TITLE = "Backlog通知"
"""Title used when no payload variant yields one."""

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
"""Format of the timestamp shown in the message context line."""

TEST_MESSAGE_TEXT = "Backlog通知のテスト送信です。"
"""Fixed text posted by the test command."""
