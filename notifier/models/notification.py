"""
Data model for outbound Slack notifications.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MessageStyle(str, Enum):
    """
    Phrase/layout table used by the formatter.

    ``current`` escapes free text and uses lowercase "failed";
    ``legacy`` reproduces the older unescaped layout with "FAILED".
    """

    CURRENT = "current"
    LEGACY = "legacy"


@dataclass(frozen=True)
class AttachmentField:
    """One labeled field of a Slack attachment."""

    title: str
    value: str
    short: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "value": self.value, "short": self.short}


@dataclass(frozen=True)
class NotificationPayload:
    """Formatted notification for a single build."""

    fallback: str
    pretext: str
    link: str
    color: str | None
    message: str
    fields: tuple[AttachmentField, ...] = field(default_factory=tuple)

    def to_attachment(self) -> dict[str, Any]:
        """Render as a Slack attachment dict."""
        return {
            "fallback": self.fallback,
            "pretext": self.pretext,
            "title_link": self.link,
            "color": self.color,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass(frozen=True)
class SlackTarget:
    """Webhook endpoint and display name used for one dispatch."""

    webhook_url: str
    username: str | None = None

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "SlackTarget":
        return cls(
            webhook_url=str(settings.get("webhook_url") or ""),
            username=settings.get("username"),
        )
