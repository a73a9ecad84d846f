"""
Data model for build checker sessions.
"""

from dataclasses import dataclass


@dataclass
class PollSession:
    """Mutable state of one build checker, owned by its task."""

    commit_id: str
    started_at: float
    attempts: int = 0
    testing_notified: bool = False
    waiting_notified: bool = False
