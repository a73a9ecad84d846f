# Slack services - incoming webhook dispatch
from .client import SlackClient

__all__ = ["SlackClient"]
