"""Pytest configuration for integration tests."""

import os
from pathlib import Path
from typing import Generator

import httpx
import pytest
from dotenv import load_dotenv

from backlog_slack_relay.backlog.adapter import BacklogHTTPAdapter
from backlog_slack_relay.utils.constants import DEFAULT_BACKLOG_DOMAIN

REQUIRED_VARS = ["BACKLOG_SPACE_ID", "BACKLOG_API_KEY"]


@pytest.fixture(autouse=True, scope="session")
def load_env() -> None:
    """Load environment variables from .env.integration, then .env, before running integration tests.

    Integration tests talk to a real Backlog space. They are skipped unless the
    space ID and API key are available.
    """
    project_root = Path(__file__).parent.parent.parent

    integration_env = project_root / ".env.integration"
    if integration_env.exists():
        load_dotenv(dotenv_path=integration_env)

    default_env = project_root / ".env"
    if default_env.exists():
        load_dotenv(dotenv_path=default_env)

    missing_vars = [var for var in REQUIRED_VARS if not os.getenv(var)]
    if missing_vars:
        pytest.skip(f"Missing required environment variables: {', '.join(missing_vars)}")


@pytest.fixture
def backlog_adapter() -> Generator[BacklogHTTPAdapter, None, None]:
    """Create an adapter for the Backlog space named in the environment."""
    domain = os.getenv("BACKLOG_DOMAIN") or DEFAULT_BACKLOG_DOMAIN
    with httpx.Client(timeout=30.0) as client:
        yield BacklogHTTPAdapter(client, f"https://{os.environ['BACKLOG_SPACE_ID']}.{domain}", os.environ["BACKLOG_API_KEY"])
