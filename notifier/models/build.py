"""
Data model for Codeship builds.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

CODESHIP_BUILD_URL = "https://codeship.com/projects/{project_id}/builds/{build_id}"


class BuildStatus(str, Enum):
    """Lifecycle status reported by Codeship."""

    TESTING = "testing"
    SUCCESS = "success"
    ERROR = "error"
    STOPPED = "stopped"
    WAITING = "waiting"
    INFRASTRUCTURE_FAILURE = "infrastructure_failure"
    IGNORED = "ignored"
    BLOCKED = "blocked"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Any) -> "BuildStatus":
        """Map a raw status string to a BuildStatus, UNKNOWN if unrecognized."""
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class BuildRecord:
    """A single build, decoded from a webhook payload or an API response."""

    commit_id: str
    branch: str
    project_name: str
    status: BuildStatus
    message: str = ""
    committer: str | None = None
    build_url: str = ""
    commit_url: str | None = None
    build_id: str | None = None

    @property
    def first_line(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]

    @classmethod
    def from_webhook(cls, data: dict[str, Any]) -> "BuildRecord":
        """Decode the ``build`` object of a Codeship webhook."""
        return cls(
            commit_id=str(data.get("commit_id") or ""),
            branch=str(data.get("branch") or ""),
            project_name=str(data.get("project_name") or ""),
            status=BuildStatus.parse(data.get("status")),
            message=str(data.get("message") or ""),
            committer=_optional_str(data.get("committer") or data.get("github_username")),
            build_url=str(data.get("build_url") or ""),
            commit_url=_optional_str(data.get("commit_url")),
            build_id=_optional_str(data.get("build_id")),
        )

    @classmethod
    def from_api(cls, data: dict[str, Any], project_id: str) -> "BuildRecord":
        """Decode one entry of the Codeship v1 ``builds`` list."""
        build_id = _optional_str(data.get("id"))
        return cls(
            commit_id=str(data.get("commit_id") or ""),
            branch=str(data.get("branch") or ""),
            project_name=str(data.get("project_name") or data.get("project_id") or project_id),
            status=BuildStatus.parse(data.get("status")),
            message=str(data.get("message") or ""),
            committer=_optional_str(data.get("github_username")),
            build_url=CODESHIP_BUILD_URL.format(project_id=project_id, build_id=build_id or ""),
            build_id=build_id,
        )


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)
