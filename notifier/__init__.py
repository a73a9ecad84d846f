"""Codeship build notifications relayed to Slack."""

__version__ = "0.1.0"
