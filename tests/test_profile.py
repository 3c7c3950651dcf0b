"""Affinity profile construction tests."""

from __future__ import annotations

import math

import pytest

from app.models import AffinityProfile, Channel
from app.services.profile import build_user_profile
from conftest import build_video


def test_search_terms_decay_with_position() -> None:
    profile = build_user_profile([], ["music live", "cooking"], [])

    assert profile.weight("music") == pytest.approx(3.0)
    assert profile.weight("live") == pytest.approx(3.0)
    assert profile.weight("cooking") == pytest.approx(3.0 * math.exp(-1 / 5))


def test_watch_history_weights_title_channel_and_description() -> None:
    video = build_video(
        "v1",
        title="Guitar lesson",
        channelName="Guitar Hub",
        descriptionSnippet="guitar basics",
    )

    profile = build_user_profile([video], [], [])

    assert profile.weight("lesson") == pytest.approx(2.0)
    assert profile.weight("hub") == pytest.approx(1.6)
    assert profile.weight("basics") == pytest.approx(1.0)
    assert profile.weight("guitar") == pytest.approx(2.0 + 1.6 + 1.0)


def test_older_watch_history_counts_less() -> None:
    history = [
        build_video("recent", title="Drums", channelName=""),
        *[build_video(f"filler{i}", title="filler", channelName="") for i in range(4)],
        build_video("older", title="Piano", channelName=""),
    ]

    profile = build_user_profile(history, [], [])

    assert profile.weight("drums") == pytest.approx(2.0)
    assert profile.weight("piano") == pytest.approx(2.0 * math.exp(-5 / 10))


def test_signals_accumulate_additively() -> None:
    profile = build_user_profile(
        [build_video("v1", title="Jazz night", channelName="")],
        ["jazz"],
        [Channel(id="c1", name="Jazz Club")],
    )

    assert profile.weight("jazz") == pytest.approx(3.0 + 2.0 + 1.5)
    assert profile.weight("club") == pytest.approx(1.5)


def test_empty_sources_build_empty_profile() -> None:
    profile = build_user_profile([], [], [])

    assert len(profile) == 0
    assert profile.top_keywords(3) == []


def test_top_keywords_orders_by_weight() -> None:
    profile = AffinityProfile({"alpha": 1.0, "beta": 4.0, "gamma": 2.5, "delta": 0.5})

    assert profile.top_keywords(3) == ["beta", "gamma", "alpha"]
    assert profile.top_keywords(0) == []
