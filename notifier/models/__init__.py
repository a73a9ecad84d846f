# Models - build records and notification payloads
from .build import BuildRecord, BuildStatus
from .notification import AttachmentField, MessageStyle, NotificationPayload, SlackTarget
from .session import PollSession

__all__ = [
    "AttachmentField",
    "BuildRecord",
    "BuildStatus",
    "MessageStyle",
    "NotificationPayload",
    "PollSession",
    "SlackTarget",
]
