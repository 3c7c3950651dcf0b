"""Relevance, popularity and freshness scoring of filtered candidates."""

from __future__ import annotations

import math
from typing import Iterable

from ..models import AffinityProfile, ScoredCandidate, Video
from ..utils import parse_days_ago, parse_view_count
from .keywords import extract_keywords

RELEVANCE_WEIGHT = 1.5
POPULARITY_WEIGHT = 0.3
FRESHNESS_WEIGHT = 1.0

FRESHNESS_WINDOW_DAYS = 60
FRESHNESS_SCALE = 5.0


def relevance_score(video: Video, profile: AffinityProfile) -> float:
    text = f"{video.title} {video.channel_name} {video.description_snippet or ''}"
    return sum(profile.weight(keyword) for keyword in extract_keywords(text))


def popularity_score(video: Video) -> float:
    return math.log10(parse_view_count(video.views) + 1)


def freshness_score(video: Video) -> float:
    days_ago = parse_days_ago(video.uploaded_at)
    return max(0.0, 1.0 - days_ago / FRESHNESS_WINDOW_DAYS) * FRESHNESS_SCALE


def score_video(video: Video, profile: AffinityProfile) -> ScoredCandidate:
    """Return ``video`` paired with its composite score and sub-scores."""

    relevance = relevance_score(video, profile)
    popularity = popularity_score(video)
    freshness = freshness_score(video)
    total = (
        RELEVANCE_WEIGHT * relevance
        + POPULARITY_WEIGHT * popularity
        + FRESHNESS_WEIGHT * freshness
    )
    return ScoredCandidate(
        video=video,
        score=total,
        relevance=relevance,
        popularity=popularity,
        freshness=freshness,
    )


def score(video: Video, profile: AffinityProfile) -> float:
    return score_video(video, profile).score


def rank_candidates(
    videos: Iterable[Video], profile: AffinityProfile
) -> list[ScoredCandidate]:
    """Score every video and sort by descending score, keeping pool order on ties."""

    scored = [score_video(video, profile) for video in videos]
    scored.sort(key=lambda candidate: candidate.score, reverse=True)
    return scored
