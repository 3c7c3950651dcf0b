"""Client for the external Catalog Service that supplies video metadata."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from ..models import SearchResults, Video, VideoDetails, parse_videos

logger = logging.getLogger(__name__)


class CatalogServiceError(RuntimeError):
    """Raised when a Catalog Service call fails or returns an unusable body."""


class CatalogService(Protocol):
    """Operations the ranking engine consumes from the Catalog Service."""

    async def search(self, query: str, page: int = 1) -> SearchResults: ...

    async def get_recommended(self) -> list[Video]: ...

    async def get_video_details(self, video_id: str) -> VideoDetails: ...

    async def get_channel_videos(
        self, channel_id: str, page: str | int | None = None
    ) -> list[Video]: ...


class CatalogClient:
    """Thin wrapper around the Catalog Service HTTP API."""

    _SEARCH_PATH = "/api/search"
    _RECOMMENDED_PATH = "/api/fvideo"
    _VIDEO_PATH = "/api/video"
    _CHANNEL_VIDEOS_PATH = "/api/channel-videos"

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._client = http_client

    async def search(self, query: str, page: int = 1) -> SearchResults:
        """Return one page of search results for ``query``."""

        payload = await self._get_json(
            self._SEARCH_PATH, params={"q": query, "page": page}
        )
        return SearchResults(
            videos=parse_videos(self._as_list(payload.get("videos"))),
            shorts=parse_videos(self._as_list(payload.get("shorts"))),
        )

    async def get_recommended(self) -> list[Video]:
        """Return the global recommended (trending) feed."""

        payload = await self._get_json(self._RECOMMENDED_PATH)
        return parse_videos(self._as_list(payload.get("videos")))

    async def get_video_details(self, video_id: str) -> VideoDetails:
        """Return details for ``video_id`` including its related videos."""

        payload = await self._get_json(self._VIDEO_PATH, params={"id": video_id})
        payload.setdefault("id", video_id)
        try:
            return VideoDetails.model_validate(payload)
        except ValidationError as exc:
            raise CatalogServiceError(
                f"Malformed video details for {video_id}"
            ) from exc

    async def get_channel_videos(
        self, channel_id: str, page: str | int | None = None
    ) -> list[Video]:
        """Return the recent uploads of ``channel_id``."""

        params: dict[str, Any] = {"id": channel_id}
        if page is not None:
            params["page"] = page
        payload = await self._get_json(self._CHANNEL_VIDEOS_PATH, params=params)
        return parse_videos(self._as_list(payload.get("videos")))

    async def _get_json(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise CatalogServiceError(
                f"Catalog request {path} failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise CatalogServiceError(
                f"Catalog request {path} failed: {exc.__class__.__name__}"
            ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise CatalogServiceError(
                f"Catalog request {path} returned a non-JSON body"
            ) from exc
        if not isinstance(data, dict):
            raise CatalogServiceError(
                f"Unexpected catalog response structure for {path}"
            )
        return data

    @staticmethod
    def _as_list(value: Any) -> list[Any]:
        if isinstance(value, list):
            return value
        return []
