"""Pydantic models for Backlog notification payloads.

Backlog attaches optional nested objects to a notification depending on what
triggered it. ``Notification.kind`` resolves those into a single tag so that
formatting code can branch on one value.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Labels for the numeric reason codes documented by the Backlog API.
REASON_NAMES: dict[int, str] = {
    1: "課題の担当者に設定",
    2: "課題にコメント",
    3: "課題の追加",
    4: "課題の更新",
    5: "ファイルの追加",
    6: "プロジェクトユーザーの追加",
    9: "その他",
    10: "プルリクエストの担当者に設定",
    11: "プルリクエストにコメント",
    12: "プルリクエストの追加",
    13: "プルリクエストの更新",
}


class NotificationKind(str, Enum):
    """Enum for what triggered a notification."""

    ISSUE_COMMENT = "issue-comment"
    ISSUE = "issue"
    PULL_REQUEST = "pull-request"
    WIKI = "wiki"
    GENERIC = "generic"


class BacklogModel(BaseModel):
    """Base model that tolerates fields this application does not use."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ProjectModel(BacklogModel):
    """Pydantic model for a Backlog project."""

    id: int | None = None
    project_key: str | None = Field(default=None, alias="projectKey")
    name: str | None = None


class IssueModel(BacklogModel):
    """Pydantic model for a Backlog issue."""

    id: int | None = None
    issue_key: str | None = Field(default=None, alias="issueKey")
    summary: str | None = None
    description: str | None = None


class CommentModel(BacklogModel):
    """Pydantic model for a Backlog comment."""

    id: int | None = None
    content: str | None = None


class RepositoryModel(BacklogModel):
    """Pydantic model for a Backlog Git repository."""

    id: int | None = None
    name: str | None = None


class PullRequestModel(BacklogModel):
    """Pydantic model for a Backlog pull request."""

    id: int | None = None
    number: int | None = None
    summary: str | None = None
    description: str | None = None
    repository_id: int | None = Field(default=None, alias="repositoryId")
    repository: RepositoryModel | None = None

    @property
    def repository_name(self) -> str:
        """Name of the repository, falling back to its ID."""
        if self.repository is not None and self.repository.name:
            return self.repository.name
        if self.repository_id is not None:
            return str(self.repository_id)
        return ""


class WikiModel(BacklogModel):
    """Pydantic model for a Backlog wiki page."""

    id: int | None = None
    name: str | None = None
    content: str | None = None


class UserModel(BacklogModel):
    """Pydantic model for a Backlog user."""

    id: int | None = None
    name: str | None = None


class ReasonModel(BacklogModel):
    """Pydantic model for a named notification reason."""

    id: int | None = None
    name: str | None = None


class Notification(BacklogModel):
    """Pydantic model for a Backlog notification."""

    id: int
    already_read: bool = Field(default=False, alias="alreadyRead")
    reason: int | ReasonModel | None = None
    project: ProjectModel | None = None
    issue: IssueModel | None = None
    comment: CommentModel | None = None
    pull_request: PullRequestModel | None = Field(default=None, alias="pullRequest")
    wiki: WikiModel | None = None
    sender: UserModel | None = None
    created: datetime | None = None

    @property
    def kind(self) -> NotificationKind:
        """Tag for the payload variant, first match wins."""
        if self.comment is not None and self.issue is not None:
            return NotificationKind.ISSUE_COMMENT
        if self.issue is not None:
            return NotificationKind.ISSUE
        if self.pull_request is not None:
            return NotificationKind.PULL_REQUEST
        if self.wiki is not None:
            return NotificationKind.WIKI
        return NotificationKind.GENERIC

    @property
    def reason_name(self) -> str:
        """Human readable reason, or an empty string when unknown."""
        if isinstance(self.reason, ReasonModel):
            return self.reason.name or ""
        if isinstance(self.reason, int):
            return REASON_NAMES.get(self.reason, "")
        return ""


def parse_notifications(items: list[Any]) -> list[Notification]:
    """Validate a list of raw notification objects."""
    return [Notification.model_validate(item) for item in items]


def raw_notification_id(item: Any) -> int | None:
    """Read the ID of a raw notification without validating the rest of it."""
    if not isinstance(item, dict):
        return None
    value = item.get("id")
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None
