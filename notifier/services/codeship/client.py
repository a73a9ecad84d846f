"""
Codeship v1 API client for build status lookups.
"""

from typing import Any

import httpx

from notifier.core.exceptions import CodeshipAPIError
from notifier.core.logging import get_logger
from notifier.models.build import BuildRecord

logger = get_logger(__name__)


class CodeshipClient:
    """Client for the Codeship project builds endpoint."""

    BASE_URL = "https://codeship.com/api/v1"

    def __init__(self, timeout: float = 10.0):
        self._timeout = timeout

    async def fetch_builds(self, project_id: str, api_key: str) -> list[dict[str, Any]]:
        """
        Get the recent builds of a project.

        Args:
            project_id: Codeship project id
            api_key: Codeship API key

        Returns:
            Raw build entries as returned by the API

        Raises:
            CodeshipAPIError: If the API call fails or the response is malformed
        """
        url = f"{self.BASE_URL}/projects/{project_id}.json"

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            try:
                response = await client.get(url, params={"api_key": api_key})
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise CodeshipAPIError(f"Failed to fetch builds: {e}")

        try:
            builds = response.json()["builds"]
        except (ValueError, KeyError, TypeError) as e:
            raise CodeshipAPIError(f"Malformed builds response: {e}")

        if not isinstance(builds, list):
            raise CodeshipAPIError("Malformed builds response: 'builds' is not a list")
        return builds

    async def find_build(self, project_id: str, api_key: str, commit_id: str) -> BuildRecord | None:
        """Find the build of a commit, None if Codeship has not seen it yet."""
        for entry in await self.fetch_builds(project_id, api_key):
            if isinstance(entry, dict) and entry.get("commit_id") == commit_id:
                return BuildRecord.from_api(entry, project_id)
        return None
