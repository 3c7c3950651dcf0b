"""Channel diversity capping and ratio mixing of candidate pools."""

from __future__ import annotations

import math
import random
from collections import Counter
from typing import Mapping, Sequence, TypeVar

from ..models import ScoredCandidate, Video
from ..utils import shuffled

DEFAULT_DIVERSITY_CAP = 3

CandidateT = TypeVar("CandidateT", Video, ScoredCandidate)


def diversify(candidates: Sequence[CandidateT], cap: int = DEFAULT_DIVERSITY_CAP) -> list[CandidateT]:
    """Keep at most ``cap`` candidates per channel in a single greedy pass.

    Candidates over the cap are dropped rather than deferred, so the result
    is never backfilled from lower-ranked items of the same channel.
    """

    channel_counts: Counter[str] = Counter()
    kept: list[CandidateT] = []
    for candidate in candidates:
        channel_id = candidate.channel_id
        if channel_counts[channel_id] >= cap:
            continue
        channel_counts[channel_id] += 1
        kept.append(candidate)
    return kept


def split_quotas(target_count: int, ratios: Mapping[str, float]) -> dict[str, int]:
    """Split ``target_count`` across pools by ratio.

    Every pool but the last receives ``floor(target * ratio)``; the last pool
    takes whatever remains so quotas always sum to ``target_count``.
    """

    if target_count <= 0 or not ratios:
        return {label: 0 for label in ratios}
    labels = list(ratios)
    quotas: dict[str, int] = {}
    assigned = 0
    for label in labels[:-1]:
        quota = min(max(math.floor(target_count * ratios[label]), 0), target_count - assigned)
        quotas[label] = quota
        assigned += quota
    quotas[labels[-1]] = target_count - assigned
    return quotas


def mix(
    pools: Mapping[str, Sequence[Video]],
    target_count: int,
    ratios: Mapping[str, float],
    rng: random.Random,
) -> list[Video]:
    """Blend labeled pools into one feed of at most ``target_count`` videos.

    Each pool is shuffled independently and cut to its quota; the
    concatenation is shuffled once more. A pool smaller than its quota leaves
    the feed short, the shortfall is not handed to other pools.
    """

    quotas = split_quotas(target_count, ratios)
    selected: list[Video] = []
    for label, quota in quotas.items():
        pool = pools.get(label, ())
        selected.extend(shuffled(pool, rng)[:quota])
    return shuffled(selected, rng)
