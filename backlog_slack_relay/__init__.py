"""Relays new Backlog notifications to Slack incoming webhooks."""
