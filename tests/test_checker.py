"""
Tests for the background build checker.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock


@pytest.fixture
def make_checker(settings, mock_codeship, mock_slack, fake_clock):
    """Factory for a BuildChecker wired to mocks and the fake clock."""
    from notifier.poller.checker import BuildChecker

    def _make(builds: list) -> BuildChecker:
        mock_codeship.find_build = AsyncMock(side_effect=builds)
        return BuildChecker(
            settings,
            codeship=mock_codeship,
            slack=mock_slack,
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )

    return _make


def record(api_build, status: str):
    from notifier.models.build import BuildRecord

    return BuildRecord.from_api(api_build("abc", status), "42")


def posted_messages(mock_slack) -> list[str]:
    return [call.args[0] for call in mock_slack.post.call_args_list]


class TestBuildChecker:
    """Tests for BuildChecker.run state machine."""

    @pytest.mark.asyncio
    async def test_testing_then_success(self, make_checker, mock_slack, api_build, fake_clock):
        """Test one testing notification then the final one."""
        from notifier.poller.checker import PollOutcome

        checker = make_checker([
            record(api_build, "testing"),
            record(api_build, "testing"),
            record(api_build, "success"),
        ])

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.SUCCESS
        messages = posted_messages(mock_slack)
        assert messages == [
            "<https://codeship.com/projects/42/builds/7|main build> by alice is pending",
            "<https://codeship.com/projects/42/builds/7|main build> by alice succeeded",
        ]
        assert fake_clock.sleeps == [10, 10]

    @pytest.mark.asyncio
    async def test_waiting_and_testing_notified_independently(self, make_checker, mock_slack, api_build):
        from notifier.poller.checker import PollOutcome

        checker = make_checker([
            record(api_build, "waiting"),
            record(api_build, "waiting"),
            record(api_build, "testing"),
            record(api_build, "testing"),
            record(api_build, "error"),
        ])

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.ERROR
        messages = posted_messages(mock_slack)
        assert len(messages) == 3
        assert messages[0].endswith("is waiting to start")
        assert messages[1].endswith("is pending")
        assert messages[2].endswith("failed")

    @pytest.mark.asyncio
    async def test_not_found_gives_up_silently(self, make_checker, mock_codeship, mock_slack, fake_clock):
        """Test that a build that never appears sends nothing."""
        from notifier.poller.checker import PollOutcome

        checker = make_checker([None] * 10)

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.NOT_FOUND
        assert mock_codeship.find_build.await_count == 6
        assert fake_clock.sleeps == [3] * 5
        mock_slack.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_found_after_retries(self, make_checker, mock_slack, api_build):
        from notifier.poller.checker import PollOutcome

        checker = make_checker([None, None, record(api_build, "success")])

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.SUCCESS
        assert mock_slack.post.call_count == 1

    @pytest.mark.asyncio
    async def test_timeout(self, settings, make_checker, mock_codeship, mock_slack, api_build):
        """Test that a build stuck in testing times out once."""
        from notifier.poller.checker import PollOutcome

        settings.codeship.wait_timeout = 25
        checker = make_checker([record(api_build, "testing")] * 10)

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.TIMEOUT
        assert mock_codeship.find_build.await_count == 3
        messages = posted_messages(mock_slack)
        assert len(messages) == 2
        assert messages[0].endswith("is pending")
        assert messages[1] == "Wait timeout of 25 seconds exceeded"

    @pytest.mark.asyncio
    async def test_other_statuses_keep_polling(self, make_checker, mock_slack, api_build):
        """Test that statuses outside the terminal set are not reported."""
        from notifier.poller.checker import PollOutcome

        checker = make_checker([
            record(api_build, "stopped"),
            record(api_build, "blocked"),
            record(api_build, "success"),
        ])

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.SUCCESS
        assert mock_slack.post.call_count == 1

    @pytest.mark.asyncio
    async def test_configured_terminal_status(self, settings, make_checker, mock_slack, api_build):
        from notifier.poller.checker import PollOutcome

        settings.codeship.terminal_statuses = ["success", "error", "stopped"]
        checker = make_checker([record(api_build, "stopped")])

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.FINISHED
        assert posted_messages(mock_slack)[0].endswith("was stopped")

    @pytest.mark.asyncio
    async def test_fetch_failure_stops(self, make_checker, mock_slack):
        """Test that an API failure ends the session without notifying."""
        from notifier.core.exceptions import CodeshipAPIError
        from notifier.poller.checker import PollOutcome

        checker = make_checker([CodeshipAPIError("down")])

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.FETCH_FAILED
        mock_slack.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_slack_failure_does_not_break_loop(self, make_checker, mock_slack, api_build):
        from notifier.core.exceptions import SlackAPIError
        from notifier.poller.checker import PollOutcome

        mock_slack.post.side_effect = [SlackAPIError("boom"), None]
        checker = make_checker([
            record(api_build, "testing"),
            record(api_build, "testing"),
            record(api_build, "success"),
        ])

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.SUCCESS
        assert mock_slack.post.call_count == 2

    @pytest.mark.asyncio
    async def test_posts_to_default_channels(self, settings, make_checker, mock_slack, api_build):
        from notifier.models.notification import SlackTarget

        settings.slack.channel = ["#one", "#two"]
        checker = make_checker([record(api_build, "success")])

        await checker.run("abc")

        channels = [call.args[1] for call in mock_slack.post.call_args_list]
        assert channels == ["#one", "#two"]
        assert mock_slack.post.call_args.args[2] == SlackTarget("https://hooks.slack.test/T/B/X", "Codeship")


    @pytest.mark.asyncio
    async def test_unset_channel_posts_to_webhook_default(self, settings, make_checker, mock_slack, api_build):
        """Test that a missing slack.channel still notifies, with no channel."""
        from notifier.poller.checker import PollOutcome

        settings.slack.channel = None
        checker = make_checker([record(api_build, "success")])

        outcome = await checker.run("abc")

        assert outcome == PollOutcome.SUCCESS
        assert mock_slack.post.call_count == 1
        assert mock_slack.post.call_args.args[1] is None


class TestStartChecker:
    """Tests for start_checker."""

    @pytest.mark.asyncio
    async def test_registers_and_cleans_up(self, settings):
        from notifier.poller.checker import PollOutcome, start_checker
        from notifier.state.sessions import SessionsStore

        store = SessionsStore()
        checker = AsyncMock()
        checker.run = AsyncMock(return_value=PollOutcome.SUCCESS)

        task = start_checker(settings, "abc", checker=checker, store=store)

        assert "abc" in store
        assert start_checker(settings, "abc", checker=checker, store=store) is None

        assert await task == PollOutcome.SUCCESS
        await asyncio.sleep(0)
        assert "abc" not in store
        checker.run.assert_awaited_once_with("abc")

    def test_requires_codeship_credentials(self):
        from notifier.core.config import Settings
        from notifier.core.exceptions import ConfigError
        from notifier.poller.checker import start_checker
        from notifier.state.sessions import SessionsStore

        store = SessionsStore()

        with pytest.raises(ConfigError):
            start_checker(Settings(), "abc", store=store)

        assert "abc" not in store
