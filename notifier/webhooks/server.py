"""
Webhook server setup.
"""

from aiohttp import web

from notifier.core.config import Settings
from notifier.core.logging import get_logger
from notifier.services.slack import SlackClient
from notifier.state.sessions import SessionsStore, running_sessions
from notifier.webhooks.codeship import (
    SESSIONS_KEY,
    SETTINGS_KEY,
    SLACK_KEY,
    handle_build,
    handle_check,
    handle_health,
)

logger = get_logger(__name__)


def create_web_app(
    settings: Settings,
    slack: SlackClient | None = None,
    sessions: SessionsStore = running_sessions,
) -> web.Application:
    """Build the aiohttp application with all routes registered."""
    app = web.Application()
    app[SETTINGS_KEY] = settings
    app[SLACK_KEY] = slack or SlackClient()
    app[SESSIONS_KEY] = sessions

    app.router.add_post("/handle", handle_build)
    app.router.add_post("/check/{commit_id}", handle_check)
    app.router.add_get("/health", handle_health)
    return app


async def start_webhook_server(settings: Settings, app: web.Application | None = None) -> web.AppRunner:
    """
    Start the webhook server.

    Args:
        settings: Application settings, provides host and port
        app: Prebuilt application, created from settings if omitted

    Returns:
        The runner, to be cleaned up on shutdown
    """
    app = app or create_web_app(settings)

    runner = web.AppRunner(app)
    await runner.setup()

    site = web.TCPSite(runner, settings.host, settings.port)
    await site.start()

    logger.info(f"Webhook server started on {settings.host}:{settings.port}")
    return runner
