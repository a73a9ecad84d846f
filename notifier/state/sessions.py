"""
Registry of running build checker tasks.
"""

import asyncio


class SessionsStore:
    """Running build checker tasks, keyed by commit id."""

    def __init__(self):
        self._tasks: dict[str, asyncio.Task] = {}

    def add(self, commit_id: str, task: asyncio.Task) -> None:
        """Register a running checker task."""
        self._tasks[commit_id] = task

    def pop(self, commit_id: str) -> asyncio.Task | None:
        """Remove and return a checker task by commit id."""
        return self._tasks.pop(commit_id, None)

    def get(self, commit_id: str) -> asyncio.Task | None:
        """Get a checker task by commit id without removing."""
        return self._tasks.get(commit_id)

    async def cancel_all(self) -> None:
        """Cancel every running checker and wait for them to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def __contains__(self, commit_id: str) -> bool:
        return commit_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)


# Singleton instance
running_sessions = SessionsStore()
