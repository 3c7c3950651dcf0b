"""Exclusion filtering and cross-pool de-duplication of candidates."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from ..models import ExclusionSet, Video
from .keywords import extract_keywords

logger = logging.getLogger(__name__)

DEFAULT_NEGATIVE_THRESHOLD = 2.0


class CandidateFilter:
    """Drop hidden, blocked, penalised and already-seen candidates.

    One instance owns the seen-id set for a whole ranking pass. Apply it to
    each pool in turn so a video admitted from an earlier pool can never be
    reintroduced by a later one.
    """

    def __init__(
        self,
        exclusions: ExclusionSet,
        negative_keywords: Mapping[str, float] | None = None,
        seen_ids: Iterable[str] | None = None,
        *,
        threshold: float = DEFAULT_NEGATIVE_THRESHOLD,
        apply_penalty: bool = True,
    ) -> None:
        self._exclusions = exclusions
        self._negative_keywords = negative_keywords or {}
        self._ng_keywords = tuple(
            keyword.lower() for keyword in exclusions.ng_keywords if keyword.strip()
        )
        self._threshold = threshold
        self._apply_penalty = apply_penalty
        self.seen_ids: set[str] = set(seen_ids or ())

    def filter(self, candidates: Iterable[Video]) -> list[Video]:
        """Return the surviving candidates in their original order."""

        survivors: list[Video] = []
        rejected = 0
        for video in candidates:
            if self.rejects(video):
                rejected += 1
                continue
            self.seen_ids.add(video.id)
            survivors.append(video)
        logger.debug("Filter kept %d candidates, rejected %d", len(survivors), rejected)
        return survivors

    def rejects(self, video: Video) -> bool:
        if video.id in self.seen_ids or video.id in self._exclusions.hidden_video_ids:
            return True
        full_text = video.full_text().lower()
        if any(keyword in full_text for keyword in self._ng_keywords):
            return True
        if video.channel_id in self._exclusions.ng_channel_ids:
            return True
        if self._apply_penalty and self.negative_score(video) > self._threshold:
            return True
        return False

    def negative_score(self, video: Video) -> float:
        """Return the summed penalty of the title and channel-name keywords.

        A keyword that appears in both the title and the channel name is
        counted once for each.
        """

        if not self._negative_keywords:
            return 0.0
        keywords = [
            *extract_keywords(video.title),
            *extract_keywords(video.channel_name),
        ]
        return sum(self._negative_keywords.get(keyword, 0.0) for keyword in keywords)
