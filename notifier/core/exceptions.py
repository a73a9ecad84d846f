"""
Custom application exceptions.
"""


class NotifierError(Exception):
    """Base exception for notifier errors."""
    pass


class ConfigError(NotifierError):
    """Configuration is missing or invalid."""
    pass


class APIError(NotifierError):
    """External API call failed."""
    pass


class SlackAPIError(APIError):
    """Slack webhook call failed."""
    pass


class CodeshipAPIError(APIError):
    """Codeship API call failed."""
    pass
