"""
Build notification formatting.

Turns a BuildRecord into a Slack attachment (webhook path) or a one-line
message (polling path). Both share the status phrase and colour tables.
"""

import html

from notifier.models.build import BuildRecord, BuildStatus
from notifier.models.notification import AttachmentField, MessageStyle, NotificationPayload

STATUS_TEXT: dict[BuildStatus, str] = {
    BuildStatus.TESTING: "is pending",
    BuildStatus.SUCCESS: "succeeded",
    BuildStatus.ERROR: "failed",
    BuildStatus.STOPPED: "was stopped",
    BuildStatus.WAITING: "is waiting to start",
    BuildStatus.INFRASTRUCTURE_FAILURE: "failed due to a Codeship error",
    BuildStatus.IGNORED: "was ignored because the account is over the monthly build limit",
    BuildStatus.BLOCKED: "was blocked because of excessive resource consumption",
}

LEGACY_STATUS_TEXT: dict[BuildStatus, str] = {
    **STATUS_TEXT,
    BuildStatus.ERROR: "FAILED",
    BuildStatus.INFRASTRUCTURE_FAILURE: "FAILED due to a Codeship error",
}

UNKNOWN_STATUS_TEXT = "did something weird..."

COLOR_GOOD = "good"
COLOR_DANGER = "danger"

STATUS_COLOR: dict[BuildStatus, str | None] = {
    BuildStatus.TESTING: None,
    BuildStatus.SUCCESS: COLOR_GOOD,
    BuildStatus.ERROR: COLOR_DANGER,
    BuildStatus.STOPPED: None,
    BuildStatus.WAITING: None,
    BuildStatus.INFRASTRUCTURE_FAILURE: COLOR_DANGER,
    BuildStatus.IGNORED: None,
    BuildStatus.BLOCKED: COLOR_DANGER,
}


def status_text(status: BuildStatus, style: MessageStyle = MessageStyle.CURRENT) -> str:
    """Human readable phrase for a build status."""
    table = LEGACY_STATUS_TEXT if style == MessageStyle.LEGACY else STATUS_TEXT
    return table.get(status, UNKNOWN_STATUS_TEXT)


def status_color(status: BuildStatus) -> str | None:
    """Attachment colour for a build status."""
    return STATUS_COLOR.get(status, COLOR_DANGER)


def escape(text: str | None) -> str:
    """Escape &, < and > for Slack markup."""
    return html.escape(text or "", quote=False)


def _verbatim(text: str | None) -> str:
    return text or ""


def _cleaner(style: MessageStyle):
    return _verbatim if style == MessageStyle.LEGACY else escape


def format_build(build: BuildRecord, style: MessageStyle = MessageStyle.CURRENT) -> NotificationPayload:
    """
    Format a build as a Slack attachment payload.

    Args:
        build: Decoded build record
        style: Phrase/layout table to use

    Returns:
        NotificationPayload with Commit, Branch and Committer fields
    """
    clean = _cleaner(style)
    if style == MessageStyle.LEGACY:
        project = build.project_name
    else:
        project = " / ".join(part.strip() for part in build.project_name.split("/"))

    phrase = status_text(build.status, style)
    message = clean(build.first_line)
    project = clean(project)
    branch = clean(build.branch)
    committer = clean(build.committer)
    build_url = clean(build.build_url)

    if build.commit_url:
        commit_value = f"<{clean(build.commit_url)}|{message}>"
    else:
        commit_value = message

    return NotificationPayload(
        fallback=f"Build {phrase} - {message} on {project} / {branch} by {committer} - {build_url}",
        pretext=f"<{build_url}|Build {phrase}>",
        link=build.build_url,
        color=status_color(build.status),
        message=message,
        fields=(
            AttachmentField("Commit", commit_value, short=False),
            AttachmentField("Branch", f"{project} / {branch}", short=True),
            AttachmentField("Committer", committer, short=True),
        ),
    )


def format_poll_message(build: BuildRecord, style: MessageStyle = MessageStyle.CURRENT) -> str:
    """One-line message used by the build checker."""
    clean = _cleaner(style)
    message = f"<{clean(build.build_url)}|{clean(build.branch)} build>"
    if build.committer:
        message += f" by {clean(build.committer)}"
    return f"{message} {status_text(build.status, style)}"


def format_timeout_message(wait_timeout: int | float) -> str:
    """Message sent when a build checker gives up waiting."""
    if float(wait_timeout).is_integer():
        wait_timeout = int(wait_timeout)
    return f"Wait timeout of {wait_timeout} seconds exceeded"
