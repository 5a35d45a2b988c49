"""Pytest configuration and shared fixtures."""

from typing import Any, Dict, List, Optional

import pytest

from config_settings import Settings
from galaxy_service import GalaxyService


class FakeGalaxyClient:
    """Stands in for GalaxyClient: replays scripted responses in order and
    records every call so tests can assert on call counts and payloads.

    A scripted response that is an exception instance is raised instead of
    returned.
    """

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []

    async def call(self, endpoint: str, method: str = "GET", body: Any = None,
                   headers: Optional[Dict[str, str]] = None) -> Any:
        self.calls.append({"endpoint": endpoint, "method": method, "body": body, "headers": headers})
        if not self.responses:
            raise AssertionError(f"unexpected Galaxy call: {method} {endpoint}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def version(self) -> Any:
        return await self.call("/version")

    async def aclose(self) -> None:
        pass

    @property
    def endpoints(self) -> List[str]:
        return [c["endpoint"] for c in self.calls]


@pytest.fixture
def settings():
    return Settings(
        GALAXY_URL="https://galaxy.test",
        GALAXY_API_KEY="test-key-123456",
        MAX_UPLOAD_BYTES=1024,
        HISTORY_NAME="AMRFinder Analysis",
    )


@pytest.fixture
def make_service(settings):
    """Build a GalaxyService over a FakeGalaxyClient scripted with ``responses``."""

    def _make(responses=None, tool_ids=None):
        client = FakeGalaxyClient(responses)
        return GalaxyService(client, settings, tool_ids=tool_ids), client

    return _make
