"""High level orchestration of the main and short-form feeds."""

from __future__ import annotations

import asyncio
import logging
import random

from ..config import RankingMode, Settings, normalize_ranking_mode
from ..models import CandidatePool, UserStateSnapshot, Video
from ..utils import shuffled
from .catalog import CatalogService
from .filtering import CandidateFilter
from .mixing import diversify, mix
from .profile import build_user_profile
from .scoring import rank_candidates
from .sourcing import CandidateSourcer

logger = logging.getLogger(__name__)


class FeedEngine:
    """Build ranked feeds for one user-state snapshot per call.

    Nothing is cached between calls: every feed is recomputed from the
    supplied snapshot. The only randomness comes from ``rng``.
    """

    def __init__(
        self,
        catalog: CatalogService,
        settings: Settings,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings
        self._rng = rng or random.Random()
        self._sourcer = CandidateSourcer(
            catalog,
            timeout=settings.source_timeout_seconds,
            rng=self._rng,
            shorts_max_seconds=settings.shorts_max_seconds,
        )

    @property
    def sourcer(self) -> CandidateSourcer:
        return self._sourcer

    def resolve_mode(self, mode: str | None) -> RankingMode:
        """Return ``mode`` normalised, or the configured mode when unset."""

        if not mode:
            return self._settings.ranking_mode
        return normalize_ranking_mode(mode)  # type: ignore[return-value]

    async def main_feed(
        self, snapshot: UserStateSnapshot, *, mode: str | None = None
    ) -> list[Video]:
        """Return the main feed using the configured or requested ranking mode."""

        resolved = self.resolve_mode(mode)
        if resolved == "profile-rank":
            feed = await self._profile_ranked_feed(snapshot)
        else:
            feed = await self._ratio_mixed_feed(snapshot)
        logger.info("Built main feed (%s) with %d videos", resolved, len(feed))
        return feed

    async def shorts_feed(self, snapshot: UserStateSnapshot) -> list[Video]:
        """Return the short-form feed blending popular and personalized shorts."""

        settings = self._settings
        popular_raw, personalized = await asyncio.gather(
            self._sourcer.popular(shorts_only=True),
            self._sourcer.source_shorts(
                snapshot.shorts_history, snapshot.watch_history, page=snapshot.page
            ),
        )

        history_ids = {video.id for video in snapshot.shorts_history}
        exclusions = snapshot.exclusions()
        candidate_filter = CandidateFilter(
            exclusions,
            snapshot.negative_keywords,
            seen_ids=history_ids,
            threshold=settings.negative_score_threshold,
        )
        cap = settings.diversity_cap
        pools = {
            "popular": diversify(candidate_filter.filter(popular_raw), cap),
            "personalized": diversify(candidate_filter.filter(personalized.videos), cap),
        }
        # Pools are capped separately; the mixed feed is capped again across pools.
        feed = diversify(
            mix(pools, settings.shorts_target_count, settings.shorts_feed_ratios, self._rng),
            cap,
        )

        if not feed:
            # Degenerate path: relax only the negative-keyword penalty.
            relaxed = CandidateFilter(
                exclusions, seen_ids=history_ids, apply_penalty=False
            )
            fallback_count = min(settings.shorts_fallback_count, settings.shorts_target_count)
            feed = diversify(
                shuffled(relaxed.filter(popular_raw), self._rng), cap
            )[:fallback_count]
            logger.info("Short-form feed empty after mixing, using %d popular shorts", len(feed))
        else:
            logger.info(
                "Built short-form feed with %d videos (popular=%d, personalized=%d)",
                len(feed),
                len(pools["popular"]),
                len(pools["personalized"]),
            )
        return feed

    async def _ratio_mixed_feed(self, snapshot: UserStateSnapshot) -> list[Video]:
        settings = self._settings
        profile = build_user_profile(
            snapshot.watch_history, snapshot.search_history, snapshot.subscribed_channels
        )
        trending, sourced = await asyncio.gather(
            self._sourcer.popular(),
            self._sourcer.source(
                profile,
                snapshot.watch_history,
                snapshot.subscribed_channels,
                page=snapshot.page,
            ),
        )

        candidate_filter = CandidateFilter(
            snapshot.exclusions(),
            snapshot.negative_keywords,
            threshold=settings.negative_score_threshold,
        )
        cap = settings.diversity_cap
        pools = {
            "trending": diversify(candidate_filter.filter(trending), cap),
            "personalized": diversify(candidate_filter.filter(_merge(sourced)), cap),
        }
        logger.debug(
            "Ratio mix pools: trending=%d personalized=%d",
            len(pools["trending"]),
            len(pools["personalized"]),
        )
        mixed = mix(pools, settings.feed_target_count, settings.main_feed_ratios, self._rng)
        return diversify(mixed, cap)

    async def _profile_ranked_feed(self, snapshot: UserStateSnapshot) -> list[Video]:
        settings = self._settings
        profile = build_user_profile(
            snapshot.watch_history, snapshot.search_history, snapshot.subscribed_channels
        )
        sourced = await self._sourcer.source(
            profile,
            snapshot.watch_history,
            snapshot.subscribed_channels,
            page=snapshot.page,
        )

        candidate_filter = CandidateFilter(
            snapshot.exclusions(),
            snapshot.negative_keywords,
            seen_ids=(video.id for video in snapshot.watch_history),
            threshold=settings.negative_score_threshold,
        )
        survivors = candidate_filter.filter(_merge(sourced))
        ranked = diversify(rank_candidates(survivors, profile), settings.diversity_cap)
        return [candidate.video for candidate in ranked[: settings.feed_target_count]]


def _merge(pools: list[CandidatePool]) -> list[Video]:
    merged: list[Video] = []
    for pool in pools:
        merged.extend(pool.videos)
    return merged
