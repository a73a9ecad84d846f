# Poller - background build status checks
from .checker import BuildChecker, PollOutcome, start_checker

__all__ = ["BuildChecker", "PollOutcome", "start_checker"]
