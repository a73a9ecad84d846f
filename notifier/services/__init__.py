# Services module - formatting, routing and external API integrations
from .codeship import CodeshipClient
from .slack import SlackClient

__all__ = ["CodeshipClient", "SlackClient"]
