"""
Slack channel routing for build notifications.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from notifier.core.config import ALL_BRANCHES
from notifier.models.build import BuildRecord

DEFAULT_CHANNEL_KEY = "channel"


def effective_settings(
    global_settings: Mapping[str, Any],
    branch_overrides: Mapping[str, Mapping[str, Any] | None],
    branch_filter: Iterable[str],
    branch: str,
) -> dict[str, Any]:
    """Global slack settings with the branch override merged on top."""
    merged = dict(global_settings)
    if ALL_BRANCHES in branch_filter:
        return merged
    merged.update(branch_overrides.get(branch) or {})
    return merged


def channels_for_status(settings: Mapping[str, Any], status: str) -> list[str]:
    """
    Pick destination channels for a build status.

    ``channel-<status>`` wins over ``channel`` whenever the key is present,
    even if its value is empty.
    """
    status_key = f"{DEFAULT_CHANNEL_KEY}-{status}"
    if status_key in settings:
        value = settings[status_key]
    else:
        value = settings.get(DEFAULT_CHANNEL_KEY)

    return normalize_channels(value)


def normalize_channels(value: str | Iterable[str | None] | None) -> list[str]:
    """Turn a configured channel value into a list of non-empty channels."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [str(channel) for channel in value if channel]


def resolve_channels(
    global_settings: Mapping[str, Any],
    branch_overrides: Mapping[str, Mapping[str, Any] | None],
    branch_filter: Iterable[str],
    build: BuildRecord,
) -> tuple[dict[str, Any], list[str]]:
    """
    Resolve the slack settings and channels a build notification goes to.

    Args:
        global_settings: Global slack settings mapping
        branch_overrides: Per-branch settings overrides
        branch_filter: Configured branch list, may contain "all"
        build: The build being reported

    Returns:
        Tuple of (effective settings, destination channels)
    """
    settings = effective_settings(global_settings, branch_overrides, list(branch_filter), build.branch)
    return settings, channels_for_status(settings, build.status.value)
