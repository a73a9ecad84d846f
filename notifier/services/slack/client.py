"""
Slack incoming-webhook client.
"""

from typing import Any

import httpx

from notifier.core.exceptions import SlackAPIError
from notifier.core.logging import get_logger
from notifier.models.notification import NotificationPayload, SlackTarget

logger = get_logger(__name__)


class SlackClient:
    """Posts messages and attachments to a Slack incoming webhook."""

    def __init__(self, timeout: float = 10.0):
        self._timeout = timeout

    @staticmethod
    def build_body(
        message: str | NotificationPayload | list[dict[str, Any]],
        channel: str | None,
        target: SlackTarget,
    ) -> dict[str, Any]:
        """Build the JSON body for a webhook post."""
        body: dict[str, Any] = {}
        if channel:
            body["channel"] = channel
        if target.username:
            body["username"] = target.username

        if isinstance(message, NotificationPayload):
            body["attachments"] = [message.to_attachment()]
        elif isinstance(message, str):
            body["text"] = message
        else:
            body["attachments"] = list(message)
        return body

    async def post(
        self,
        message: str | NotificationPayload | list[dict[str, Any]],
        channel: str | None,
        target: SlackTarget,
    ) -> None:
        """
        Post a message to a Slack channel.

        Args:
            message: Plain text, a formatted payload or raw attachments
            channel: Destination channel, webhook default if None
            target: Webhook url and username to post with

        Raises:
            SlackAPIError: If the webhook is not configured or the call fails
        """
        if not target.webhook_url:
            raise SlackAPIError("Slack webhook_url is not configured")

        body = self.build_body(message, channel, target)

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            try:
                response = await client.post(target.webhook_url, json=body)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise SlackAPIError(f"Failed to post to {channel}: {e}")

        logger.debug(f"Posted notification to {channel}")
