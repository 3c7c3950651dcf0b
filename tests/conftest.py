"""Pytest configuration and test helpers."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any

import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


from app.models import SearchResults, Video, VideoDetails  # noqa: E402


def build_video(video_id: str, **overrides: Any) -> Video:
    """Return a video with sensible defaults for ranking tests."""

    data: dict[str, Any] = {
        "id": video_id,
        "title": f"Video {video_id}",
        "channelId": f"channel-{video_id}",
        "channelName": f"Channel {video_id}",
        "views": "1,000 回視聴",
        "uploadedAt": "3日前",
    }
    data.update(overrides)
    return Video.model_validate(data)


class FakeCatalog:
    """In-memory Catalog Service double recording every call it receives."""

    def __init__(self) -> None:
        self.search_results: dict[str, SearchResults] = {}
        self.recommended: list[Video] = []
        self.details: dict[str, VideoDetails] = {}
        self.channel_videos: dict[str, list[Video]] = {}
        self.failures: dict[tuple[str, str], BaseException] = {}
        self.delays: dict[tuple[str, str], float] = {}
        self.calls: list[tuple[str, str]] = []

    def calls_to(self, method: str) -> list[str]:
        return [key for name, key in self.calls if name == method]

    async def _enter(self, method: str, key: str) -> None:
        self.calls.append((method, key))
        delay = self.delays.get((method, key))
        if delay:
            await asyncio.sleep(delay)
        failure = self.failures.get((method, key))
        if failure is not None:
            raise failure

    async def search(self, query: str, page: int = 1) -> SearchResults:
        await self._enter("search", query)
        return self.search_results.get(query, SearchResults())

    async def get_recommended(self) -> list[Video]:
        await self._enter("recommended", "")
        return list(self.recommended)

    async def get_video_details(self, video_id: str) -> VideoDetails:
        await self._enter("details", video_id)
        details = self.details.get(video_id)
        if details is None:
            return VideoDetails(id=video_id)
        return details

    async def get_channel_videos(
        self, channel_id: str, page: str | int | None = None
    ) -> list[Video]:
        await self._enter("channel", channel_id)
        return list(self.channel_videos.get(channel_id, []))


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()
