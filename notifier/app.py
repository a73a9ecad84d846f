"""
Application factory and main entry point.
"""

import asyncio

from notifier.core.config import settings
from notifier.core.logging import setup_logging, get_logger
from notifier.state.sessions import running_sessions
from notifier.webhooks.server import start_webhook_server

# Initialize logging
setup_logging(settings.log_level.upper(), settings.log_dir, settings.environment)
logger = get_logger(__name__)


async def main() -> None:
    """Main application entry point."""
    logger.info(f"Starting notifier ({settings.environment})...")

    if not settings.slack.webhook_url:
        logger.warning("slack.webhook_url not set, notifications will fail")

    runner = await start_webhook_server(settings)

    # Keep running until cancelled
    stop_signal = asyncio.Event()
    try:
        await stop_signal.wait()
    except asyncio.CancelledError:
        pass
    finally:
        # Graceful shutdown
        await running_sessions.cancel_all()
        await runner.cleanup()
