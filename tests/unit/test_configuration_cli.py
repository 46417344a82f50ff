"""Unit tests for the command line interface."""

import json
import logging
from pathlib import Path
from typing import Any, Generator

import pytest
from typer.testing import CliRunner

from backlog_slack_relay.backlog.exceptions import RemoteApiError
from backlog_slack_relay.configuration import cli
from backlog_slack_relay.sync.results import RunResult, TenantRunResult

runner = CliRunner()


@pytest.fixture
def properties_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Run each test from an empty directory with its own property file.

    The CLI reconfigures the root logger, so its handlers are restored afterwards.
    """
    monkeypatch.chdir(tmp_path)
    for name in ("PROPERTIES_FILE", "DEBUG", "ISOLATE_TENANT_FAILURES", "BACKLOG_DOMAIN"):
        monkeypatch.delenv(name, raising=False)
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield tmp_path / "properties.yaml"
    root_logger.handlers = handlers
    root_logger.setLevel(level)


def invoke(properties_file: Path, *args: str) -> Any:
    """Invoke the CLI against the given property file."""
    return runner.invoke(cli.typer_app, ["--properties-file", str(properties_file), *args])


def test_properties_set_get_unset(properties_file: Path) -> None:
    """Properties can be stored, read back and removed."""
    result = invoke(properties_file, "properties", "set", "SLACK_WEBHOOK_URL", "https://hooks.example/x")
    assert result.exit_code == 0
    assert "Set SLACK_WEBHOOK_URL" in result.output
    assert properties_file.exists()

    result = invoke(properties_file, "properties", "get", "SLACK_WEBHOOK_URL")
    assert result.exit_code == 0
    assert result.output.strip() == "https://hooks.example/x"

    result = invoke(properties_file, "properties", "unset", "SLACK_WEBHOOK_URL")
    assert result.exit_code == 0

    result = invoke(properties_file, "properties", "get", "SLACK_WEBHOOK_URL")
    assert result.exit_code == 1
    assert "Property not set: SLACK_WEBHOOK_URL" in result.output


def test_tenants_lists_resolved_configuration(properties_file: Path) -> None:
    """Tenants are listed with their base URL, storage key and watermark."""
    configs = [
        {"space": "one", "apiKey": "k1", "webhook": "https://hooks.example/one"},
        {"space": "two", "apiKey": "k2", "webhook": "https://hooks.example/two", "domain": "backlog.com"},
    ]
    invoke(properties_file, "properties", "set", "BACKLOG_CONFIGS", json.dumps(configs))
    invoke(properties_file, "properties", "set", "BACKLOG_LAST_NOTIFICATION_ID__two", "42")

    result = invoke(properties_file, "tenants")

    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines[-2:] == [
        "one\thttps://one.backlog.jp\tBACKLOG_LAST_NOTIFICATION_ID__one\t0",
        "two\thttps://two.backlog.com\tBACKLOG_LAST_NOTIFICATION_ID__two\t42",
    ]


def test_tenants_without_configuration(properties_file: Path) -> None:
    """A missing configuration is reported with a non-zero exit code."""
    result = invoke(properties_file, "tenants")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_run_without_configuration(properties_file: Path) -> None:
    """A run with no configuration fails before any API call."""
    result = invoke(properties_file, "run")
    assert result.exit_code == 1
    assert "BACKLOG_CONFIGS" in result.output


def test_test_command_without_configuration(properties_file: Path) -> None:
    """The test command needs a webhook."""
    result = invoke(properties_file, "test")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_run_prints_tenant_summary(properties_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Each tenant's outcome is printed and a failed tenant sets the exit code."""
    captured: dict[str, Any] = {}

    def fake_run_relay_workflow(context: Any, isolate_failures: bool = False) -> RunResult:
        captured["isolate_failures"] = isolate_failures
        return RunResult(
            tenants=[
                TenantRunResult(label="one", storage_key="k1", previous_watermark=1, watermark=5, delivered=3),
                TenantRunResult(label="two", storage_key="k2", previous_watermark=0, watermark=0, error=RemoteApiError(401, "denied")),
            ]
        )

    monkeypatch.setattr(cli, "run_relay_workflow", fake_run_relay_workflow)

    result = invoke(properties_file, "run", "--isolate-tenant-failures")

    assert captured["isolate_failures"] is True
    assert result.exit_code == 1
    assert "one: delivered 3, watermark 5 (ok)" in result.output
    assert "two: delivered 0, watermark 0 (failed: Backlog API request failed with status 401" in result.output


def test_run_all_tenants_succeed(properties_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A run where every tenant succeeds exits cleanly."""

    def fake_run_relay_workflow(context: Any, isolate_failures: bool = False) -> RunResult:
        return RunResult(tenants=[TenantRunResult(label="one", storage_key="k1", previous_watermark=5, watermark=5)])

    monkeypatch.setattr(cli, "run_relay_workflow", fake_run_relay_workflow)

    result = invoke(properties_file, "run")

    assert result.exit_code == 0
    assert "one: delivered 0, watermark 5 (ok)" in result.output
