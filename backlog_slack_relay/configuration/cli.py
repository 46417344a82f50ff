"""Defines the Command Line Interface (CLI) using Typer."""

import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from backlog_slack_relay.backlog.exceptions import RemoteApiError
from backlog_slack_relay.configuration.config import RunContext
from backlog_slack_relay.configuration.env import Settings
from backlog_slack_relay.configuration.exceptions import ConfigError
from backlog_slack_relay.configuration.resolver import load_tenant_configs
from backlog_slack_relay.slack.exceptions import DeliveryError
from backlog_slack_relay.storage.properties import YAMLFilePropertyStore
from backlog_slack_relay.sync.driver import run_relay_workflow, send_test_message
from backlog_slack_relay.utils.logging_setup import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Relay new Backlog notifications to Slack.")


def main_callback(
    ctx: typer.Context,
    properties_file: Annotated[
        Path | None, Option(envvar="PROPERTIES_FILE", help="YAML file holding tenant configuration and watermarks.")
    ] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Load settings for the current invocation."""
    settings = Settings()
    if properties_file is not None:
        settings.PROPERTIES_FILE = properties_file
    configure_logging(debug=debug or settings.DEBUG)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


typer_app.callback()(main_callback)


@typer_app.command(name="run")
def run_cli(
    ctx: typer.Context,
    isolate_tenant_failures: Annotated[
        bool,
        Option(
            envvar="ISOLATE_TENANT_FAILURES",
            help="Keep relaying the remaining tenants when one tenant fails.",
        ),
    ] = False,
) -> None:
    """Relay new notifications for every configured tenant."""
    settings: Settings = ctx.obj["settings"]
    isolate = isolate_tenant_failures or settings.ISOLATE_TENANT_FAILURES
    try:
        with RunContext.from_settings(settings) as context:
            result = run_relay_workflow(context, isolate_failures=isolate)
    except (ConfigError, RemoteApiError, DeliveryError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    for tenant in result.tenants:
        status = "ok" if tenant.succeeded else f"failed: {tenant.error}"
        typer.echo(f"{tenant.label}: delivered {tenant.delivered}, watermark {tenant.watermark} ({status})")
    if result.failed:
        sys.exit(1)


@typer_app.command(name="test")
def send_test_message_cli(ctx: typer.Context) -> None:
    """Send a fixed test message to the configured Slack webhook."""
    settings: Settings = ctx.obj["settings"]
    try:
        with RunContext.from_settings(settings) as context:
            send_test_message(context)
    except (ConfigError, DeliveryError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    typer.echo("Test message sent.")


@typer_app.command(name="tenants")
def tenants_cli(ctx: typer.Context) -> None:
    """List the resolved tenants with their storage keys and watermarks."""
    settings: Settings = ctx.obj["settings"]
    with RunContext.from_settings(settings) as context:
        try:
            tenants = load_tenant_configs(context.properties, default_domain=settings.BACKLOG_DOMAIN)
        except ConfigError as exc:
            typer.echo(f"Error: {exc}", err=True)
            sys.exit(1)
        for tenant in tenants:
            watermark = context.watermarks.read(tenant.storage_key)
            typer.echo(f"{tenant.label}\t{tenant.base_url}\t{tenant.storage_key}\t{watermark}")


# --- Typer group for property store commands ---
properties_app = typer.Typer(help="Manage the property store.")


def _open_store(ctx: typer.Context) -> YAMLFilePropertyStore:
    settings: Settings = ctx.obj["settings"]
    return YAMLFilePropertyStore(settings.PROPERTIES_FILE)


@properties_app.command(name="set")
def properties_set_cli(
    ctx: typer.Context,
    key: Annotated[str, Argument(help="Property name.")],
    value: Annotated[str, Argument(help="Property value.")],
) -> None:
    """Store a property value."""
    _open_store(ctx).set(key, value)
    typer.echo(f"Set {key}")


@properties_app.command(name="get")
def properties_get_cli(
    ctx: typer.Context,
    key: Annotated[str, Argument(help="Property name.")],
) -> None:
    """Print a property value."""
    value = _open_store(ctx).get(key)
    if value is None:
        typer.echo(f"Property not set: {key}", err=True)
        raise typer.Exit(1)
    typer.echo(value)


@properties_app.command(name="unset")
def properties_unset_cli(
    ctx: typer.Context,
    key: Annotated[str, Argument(help="Property name.")],
) -> None:
    """Remove a property."""
    _open_store(ctx).delete(key)
    typer.echo(f"Unset {key}")


typer_app.add_typer(properties_app, name="properties")


if __name__ == "__main__":
    typer_app()
