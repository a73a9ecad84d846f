"""
Codeship webhook handler for build status events.
"""

import json
from typing import Any

from aiohttp import web

from notifier.core.config import Settings
from notifier.core.exceptions import ConfigError, SlackAPIError
from notifier.core.logging import get_logger
from notifier.models.build import BuildRecord
from notifier.models.notification import SlackTarget
from notifier.poller.checker import BuildChecker, start_checker
from notifier.services.channels import resolve_channels
from notifier.services.formatter import format_build
from notifier.services.slack import SlackClient
from notifier.state.sessions import SessionsStore

logger = get_logger(__name__)

SETTINGS_KEY = web.AppKey("settings", Settings)
SLACK_KEY = web.AppKey("slack", SlackClient)
SESSIONS_KEY = web.AppKey("sessions", SessionsStore)


def parse_body(body: bytes) -> dict[str, Any]:
    """Decode a JSON request body, empty dict if it is not a JSON object."""
    try:
        payload = json.loads(body or b"{}")
    except (ValueError, UnicodeDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


async def process_payload(payload: dict[str, Any], settings: Settings, slack: SlackClient) -> int:
    """
    Route a webhook payload to Slack.

    Returns:
        HTTP status code: 422 without a build, 204 for filtered branches,
        200 once dispatch has been attempted
    """
    data = payload.get("build")
    if not isinstance(data, dict):
        return 422

    build = BuildRecord.from_webhook(data)
    if not settings.handles_branch(build.branch):
        logger.info(f"Ignoring build on unhandled branch {build.branch!r}")
        return 204

    branch_settings, channels = resolve_channels(
        settings.slack.channel_settings(),
        settings.branch_overrides,
        settings.branch_filter,
        build,
    )
    if not channels:
        logger.warning(f"No slack channel configured for {build.branch} ({build.status.value})")
        return 200

    notification = format_build(build, settings.slack.style)
    target = SlackTarget.from_settings(branch_settings)
    for channel in channels:
        try:
            await slack.post(notification, channel, target)
        except SlackAPIError as e:
            logger.error(f"Slack notification failed: {e}")

    return 200


async def handle_build(request: web.Request) -> web.Response:
    """Handle Codeship build status webhooks."""
    payload = parse_body(await request.read())
    status = await process_payload(payload, request.app[SETTINGS_KEY], request.app[SLACK_KEY])

    if status == 422:
        return web.Response(status=422, text="Missing build")
    if status == 204:
        return web.Response(status=204)
    return web.Response(status=200, text="Processed")


async def handle_check(request: web.Request) -> web.Response:
    """Start a background build checker for the commit in the URL."""
    commit_id = request.match_info["commit_id"]
    settings = request.app[SETTINGS_KEY]
    checker = BuildChecker(settings, slack=request.app[SLACK_KEY])

    try:
        task = start_checker(settings, commit_id, checker=checker, store=request.app[SESSIONS_KEY])
    except ConfigError as e:
        logger.error(f"Cannot check {commit_id}: {e}")
        return web.Response(status=503, text="Codeship is not configured")
    if task is None:
        return web.Response(status=200, text="Already checking")

    logger.info(f"Started build checker for {commit_id}")
    return web.Response(status=202, text="Checking")


async def handle_health(request: web.Request) -> web.Response:
    """Report liveness and the number of running checkers."""
    sessions = request.app[SESSIONS_KEY]
    return web.json_response({"status": "ok", "sessions": len(sessions)})
