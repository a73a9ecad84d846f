# Webhooks - inbound HTTP endpoints
from .server import create_web_app, start_webhook_server

__all__ = ["create_web_app", "start_webhook_server"]
