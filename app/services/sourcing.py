"""Concurrent candidate sourcing across independent Catalog Service calls."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from ..models import AffinityProfile, CandidatePool, Channel, Video
from ..utils import clean_title_for_search, parse_duration_seconds, sample_up_to
from .catalog import CatalogService

logger = logging.getLogger(__name__)

RELATED_RECENT_WINDOW = 10
RELATED_SAMPLE_SIZE = 3
RELATED_PER_VIDEO = 15
INTEREST_KEYWORD_COUNT = 3
INTEREST_RESULTS_PER_QUERY = 10
SUBSCRIPTION_SAMPLE_SIZE = 5
UPLOADS_PER_CHANNEL = 5
MIN_SOURCE_CALLS = 3

SHORTS_SEED_COUNT = 4
COLD_START_SHORTS_SEEDS: tuple[str, ...] = ("Funny #shorts", "Gaming #shorts")


@dataclass(slots=True)
class SourceCall:
    """A single pending Catalog Service call and the pool it feeds."""

    label: str
    target: str
    fetch: Callable[[], Awaitable[list[Video]]]


class CandidateSourcer:
    """Fan out to the Catalog Service and fan back in, tolerating failures."""

    def __init__(
        self,
        catalog: CatalogService,
        *,
        timeout: float | None = 8.0,
        rng: random.Random | None = None,
        shorts_max_seconds: int = 60,
    ) -> None:
        self._catalog = catalog
        self._timeout = timeout
        self._rng = rng or random.Random()
        self._shorts_max_seconds = shorts_max_seconds

    async def source(
        self,
        profile: AffinityProfile,
        watch_history: Sequence[Video],
        subscribed_channels: Sequence[Channel],
        *,
        page: int = 1,
    ) -> list[CandidatePool]:
        """Return one labeled pool per sourcing strategy."""

        calls = self.plan(profile, watch_history, subscribed_channels, page=page)
        return await self.settle(calls)

    def plan(
        self,
        profile: AffinityProfile,
        watch_history: Sequence[Video],
        subscribed_channels: Sequence[Channel],
        *,
        page: int = 1,
    ) -> list[SourceCall]:
        """Build the list of independent calls issued by :meth:`source`."""

        calls: list[SourceCall] = []

        recent = list(watch_history[:RELATED_RECENT_WINDOW])
        for video in sample_up_to(recent, RELATED_SAMPLE_SIZE, self._rng):
            calls.append(
                SourceCall("related", video.id, self._related_fetcher(video.id))
            )

        for keyword in profile.top_keywords(INTEREST_KEYWORD_COUNT):
            calls.append(
                SourceCall("interest", keyword, self._search_fetcher(keyword, page))
            )

        for channel in sample_up_to(
            list(subscribed_channels), SUBSCRIPTION_SAMPLE_SIZE, self._rng
        ):
            calls.append(
                SourceCall(
                    "subscriptions", channel.id, self._uploads_fetcher(channel.id)
                )
            )

        if len(calls) < MIN_SOURCE_CALLS:
            calls.append(SourceCall("fallback", "trending", self._catalog.get_recommended))

        return calls

    async def popular(self, *, shorts_only: bool = False) -> list[Video]:
        """Return the global popular pool, optionally restricted to shorts."""

        pools = await self.settle(
            [SourceCall("popular", "recommended", self._catalog.get_recommended)]
        )
        videos = pools[0].videos
        if shorts_only:
            return [video for video in videos if self.is_short(video)]
        return videos

    async def source_shorts(
        self,
        shorts_history: Sequence[Video],
        watch_history: Sequence[Video],
        *,
        page: int = 1,
    ) -> CandidatePool:
        """Return personalized short-form candidates seeded from history titles."""

        seed_history = shorts_history or watch_history
        if seed_history:
            seeds = [
                f"{clean_title_for_search(video.title)} #shorts"
                for video in sample_up_to(list(seed_history), SHORTS_SEED_COUNT, self._rng)
            ]
        else:
            seeds = list(COLD_START_SHORTS_SEEDS)

        calls = [
            SourceCall("personalized", seed, self._shorts_search_fetcher(seed, page))
            for seed in seeds
        ]
        pools = await self.settle(calls)
        if not pools:
            return CandidatePool("personalized")
        return pools[0]

    async def settle(self, calls: Sequence[SourceCall]) -> list[CandidatePool]:
        """Run every call concurrently and wait for all of them to settle.

        A call that raises or times out contributes nothing to its pool; the
        remaining calls are unaffected. Pools are returned in first-seen label
        order and keep per-call result order.
        """

        if not calls:
            return []
        tasks = [asyncio.create_task(self._run(call)) for call in calls]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        pools: dict[str, CandidatePool] = {}
        failures = 0
        for call, result in zip(calls, results):
            pool = pools.setdefault(call.label, CandidatePool(call.label))
            if isinstance(result, BaseException):
                failures += 1
                logger.warning(
                    "Catalog source %s (%s) failed: %s",
                    call.label,
                    call.target,
                    str(result) or result.__class__.__name__,
                )
                continue
            pool.videos.extend(result)

        logger.info(
            "Settled %d catalog calls (%d failed): %s",
            len(calls),
            failures,
            ", ".join(f"{pool.label}={len(pool.videos)}" for pool in pools.values()),
        )
        return list(pools.values())

    def is_short(self, video: Video) -> bool:
        """Return whether ``video`` qualifies for the short-form feed."""

        seconds = parse_duration_seconds(video.iso_duration, video.duration)
        if 0 < seconds <= self._shorts_max_seconds:
            return True
        return "#shorts" in video.title.lower()

    async def _run(self, call: SourceCall) -> list[Video]:
        if self._timeout is None:
            return await call.fetch()
        return await asyncio.wait_for(call.fetch(), timeout=self._timeout)

    def _related_fetcher(self, video_id: str) -> Callable[[], Awaitable[list[Video]]]:
        async def fetch() -> list[Video]:
            details = await self._catalog.get_video_details(video_id)
            return list(details.related_videos[:RELATED_PER_VIDEO])

        return fetch

    def _search_fetcher(
        self, query: str, page: int
    ) -> Callable[[], Awaitable[list[Video]]]:
        async def fetch() -> list[Video]:
            results = await self._catalog.search(query, page)
            return list(results.videos[:INTEREST_RESULTS_PER_QUERY])

        return fetch

    def _uploads_fetcher(self, channel_id: str) -> Callable[[], Awaitable[list[Video]]]:
        async def fetch() -> list[Video]:
            uploads = await self._catalog.get_channel_videos(channel_id)
            return list(uploads[:UPLOADS_PER_CHANNEL])

        return fetch

    def _shorts_search_fetcher(
        self, query: str, page: int
    ) -> Callable[[], Awaitable[list[Video]]]:
        async def fetch() -> list[Video]:
            results = await self._catalog.search(query, page)
            return [
                video
                for video in (*results.videos, *results.shorts)
                if self.is_short(video)
            ]

        return fetch
