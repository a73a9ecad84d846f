"""
Background checker that follows one commit's Codeship build until it
finishes, then reports to Slack.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from enum import Enum

from notifier.core.config import Settings
from notifier.core.exceptions import CodeshipAPIError, ConfigError, SlackAPIError
from notifier.core.logging import get_logger
from notifier.models.build import BuildRecord, BuildStatus
from notifier.models.notification import SlackTarget
from notifier.models.session import PollSession
from notifier.services.channels import normalize_channels
from notifier.services.codeship import CodeshipClient
from notifier.services.formatter import format_poll_message, format_timeout_message
from notifier.services.slack import SlackClient
from notifier.state.sessions import SessionsStore, running_sessions

logger = get_logger(__name__)


class PollOutcome(str, Enum):
    """How a checker session ended."""

    SUCCESS = "success"
    ERROR = "error"
    FINISHED = "finished"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    FETCH_FAILED = "fetch_failed"


class BuildChecker:
    """Polls Codeship for a commit's build and notifies Slack of its progress."""

    def __init__(
        self,
        settings: Settings,
        codeship: CodeshipClient | None = None,
        slack: SlackClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._settings = settings
        self._codeship = codeship or CodeshipClient()
        self._slack = slack or SlackClient()
        self._sleep = sleep
        self._clock = clock

    async def run(self, commit_id: str) -> PollOutcome:
        """
        Follow the build of ``commit_id`` until it ends.

        Sends at most one "testing" and one "waiting" notification, then a
        single final one on success/error or on timeout. Gives up silently
        if the build never shows up.
        """
        codeship = self._settings.codeship
        session = PollSession(commit_id=commit_id, started_at=self._clock())
        logger.info(f"Checking build for commit {commit_id}")

        while True:
            try:
                build = await self._codeship.find_build(codeship.project_id, codeship.api_key, commit_id)
            except CodeshipAPIError as e:
                logger.error(f"Stopped checking {commit_id}: {e}")
                return PollOutcome.FETCH_FAILED

            if build is None:
                session.attempts += 1
                if session.attempts > codeship.attempted_build_finds:
                    logger.info(f"No build found for {commit_id} after {session.attempts} attempts")
                    return PollOutcome.NOT_FOUND
                await self._sleep(codeship.not_found_interval)
                continue

            if build.status == BuildStatus.TESTING:
                if not session.testing_notified:
                    session.testing_notified = True
                    await self._notify(build)
                await self._sleep(codeship.poll_interval)
            elif build.status == BuildStatus.WAITING:
                if not session.waiting_notified:
                    session.waiting_notified = True
                    await self._notify(build)
                await self._sleep(codeship.poll_interval)
            elif build.status.value in codeship.terminal_statuses:
                await self._notify(build)
                logger.info(f"Build for {commit_id} finished with status {build.status.value}")
                return _outcome_for(build.status)
            else:
                logger.debug(f"Build for {commit_id} is {build.status.value}, still waiting")
                await self._sleep(codeship.poll_interval)

            if self._clock() - session.started_at > codeship.wait_timeout:
                logger.warning(f"Timed out waiting for build of {commit_id}")
                await self._post(format_timeout_message(codeship.wait_timeout))
                return PollOutcome.TIMEOUT

    async def _notify(self, build: BuildRecord) -> None:
        await self._post(format_poll_message(build, self._settings.slack.style))

    async def _post(self, message: str) -> None:
        slack = self._settings.slack
        target = SlackTarget.from_settings(slack.channel_settings())
        # No configured channel posts to the webhook default
        for channel in normalize_channels(slack.channel) or [None]:
            try:
                await self._slack.post(message, channel, target)
            except SlackAPIError as e:
                logger.error(f"Slack notification failed: {e}")


def _outcome_for(status: BuildStatus) -> PollOutcome:
    if status == BuildStatus.SUCCESS:
        return PollOutcome.SUCCESS
    if status == BuildStatus.ERROR:
        return PollOutcome.ERROR
    return PollOutcome.FINISHED


def start_checker(
    settings: Settings,
    commit_id: str,
    checker: BuildChecker | None = None,
    store: SessionsStore = running_sessions,
) -> asyncio.Task | None:
    """
    Start a background checker for a commit.

    Returns:
        The new task, or None if the commit is already being checked

    Raises:
        ConfigError: If Codeship credentials are missing
    """
    if not settings.codeship.project_id or not settings.codeship.api_key:
        raise ConfigError("codeship.project_id and codeship.api_key are required")

    if commit_id in store:
        return None

    checker = checker or BuildChecker(settings)
    task = asyncio.create_task(checker.run(commit_id))
    store.add(commit_id, task)

    def _finished(done: asyncio.Task) -> None:
        if store.get(commit_id) is done:
            store.pop(commit_id)
        if not done.cancelled() and done.exception() is not None:
            logger.error(f"Checker for {commit_id} crashed: {done.exception()!r}")

    task.add_done_callback(_finished)
    return task
