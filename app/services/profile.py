"""Build the per-pass affinity profile from the user's history."""

from __future__ import annotations

import math
from typing import Sequence

from ..models import AffinityProfile, Channel, Video
from .keywords import extract_keywords

SEARCH_BASE_WEIGHT = 3.0
SEARCH_DECAY = 5.0
WATCH_BASE_WEIGHT = 2.0
WATCH_DECAY = 10.0
CHANNEL_NAME_FACTOR = 0.8
DESCRIPTION_FACTOR = 0.5
SUBSCRIPTION_WEIGHT = 1.5


def _add_keywords(profile: AffinityProfile, text: str | None, weight: float) -> None:
    for keyword in extract_keywords(text):
        profile.add(keyword, weight)


def build_user_profile(
    watch_history: Sequence[Video],
    search_history: Sequence[str],
    subscribed_channels: Sequence[Channel],
) -> AffinityProfile:
    """Fold history and subscriptions into a recency-decayed keyword profile.

    Both histories are ordered most-recent-first. Search terms decay with
    ``3.0 * exp(-i/5)`` and watched videos with ``2.0 * exp(-i/10)``; channel
    names and description snippets of watched videos count at 0.8x and 0.5x.
    Subscribed channel names contribute a flat 1.5. Contributions are summed
    and never normalised.
    """

    profile = AffinityProfile()

    for index, term in enumerate(search_history):
        _add_keywords(profile, term, SEARCH_BASE_WEIGHT * math.exp(-index / SEARCH_DECAY))

    for index, video in enumerate(watch_history):
        weight = WATCH_BASE_WEIGHT * math.exp(-index / WATCH_DECAY)
        _add_keywords(profile, video.title, weight)
        _add_keywords(profile, video.channel_name, weight * CHANNEL_NAME_FACTOR)
        _add_keywords(profile, video.description_snippet, weight * DESCRIPTION_FACTOR)

    for channel in subscribed_channels:
        _add_keywords(profile, channel.name, SUBSCRIPTION_WEIGHT)

    return profile
