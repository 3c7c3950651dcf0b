"""Candidate filter tests."""

from __future__ import annotations

from app.models import ExclusionSet
from app.services.filtering import CandidateFilter
from conftest import build_video


def test_filter_rejects_hidden_and_blocked_channels() -> None:
    exclusions = ExclusionSet(
        hidden_video_ids=frozenset({"hidden"}),
        ng_channel_ids=frozenset({"blocked-channel"}),
    )
    candidates = [
        build_video("hidden"),
        build_video("blocked", channelId="blocked-channel"),
        build_video("ok"),
    ]

    survivors = CandidateFilter(exclusions).filter(candidates)

    assert [video.id for video in survivors] == ["ok"]


def test_filter_matches_ng_keywords_case_insensitively_in_title_and_channel() -> None:
    exclusions = ExclusionSet(ng_keywords=("Spoiler", "gacha"))
    candidates = [
        build_video("a", title="Huge SPOILERS inside"),
        build_video("b", channelName="GachaDaily"),
        build_video("c", title="Clean video"),
    ]

    survivors = CandidateFilter(exclusions).filter(candidates)

    assert [video.id for video in survivors] == ["c"]


def test_blank_ng_keywords_are_ignored() -> None:
    survivors = CandidateFilter(ExclusionSet(ng_keywords=("", "  "))).filter(
        [build_video("a")]
    )

    assert [video.id for video in survivors] == ["a"]


def test_negative_keyword_penalty_threshold() -> None:
    negative = {"prank": 1.5, "clickbait": 0.5, "spam": 1.5}
    candidates = [
        build_video("over", title="Prank clickbait compilation plus", channelName="Spam"),
        build_video("equal", title="prank clickbait", channelName=""),
        build_video("clean", title="Gardening tips", channelName=""),
    ]

    survivors = CandidateFilter(ExclusionSet(), negative).filter(candidates)

    assert [video.id for video in survivors] == ["equal", "clean"]


def test_keyword_in_title_and_channel_counts_twice() -> None:
    candidate_filter = CandidateFilter(ExclusionSet(), {"spam": 1.5})
    video = build_video("double", title="spam hour", channelName="Spam TV")

    assert candidate_filter.negative_score(video) == 3.0
    assert candidate_filter.filter([video]) == []


def test_seen_set_deduplicates_within_and_across_pools() -> None:
    candidate_filter = CandidateFilter(ExclusionSet(), seen_ids={"watched"})

    first = candidate_filter.filter(
        [build_video("a"), build_video("a"), build_video("watched")]
    )
    second = candidate_filter.filter([build_video("a"), build_video("b")])

    assert [video.id for video in first] == ["a"]
    assert [video.id for video in second] == ["b"]
    assert candidate_filter.seen_ids == {"watched", "a", "b"}


def test_rejected_candidates_do_not_enter_seen_set() -> None:
    candidate_filter = CandidateFilter(
        ExclusionSet(ng_channel_ids=frozenset({"blocked"}))
    )

    candidate_filter.filter([build_video("x", channelId="blocked")])

    assert "x" not in candidate_filter.seen_ids


def test_penalty_can_be_relaxed() -> None:
    video = build_video("p", title="prank", channelName="")
    candidate_filter = CandidateFilter(ExclusionSet(), {"prank": 5.0}, apply_penalty=False)

    assert candidate_filter.filter([video]) == [video]


def test_filter_never_mutates_input() -> None:
    candidates = [build_video("a"), build_video("a")]
    snapshot = list(candidates)

    CandidateFilter(ExclusionSet()).filter(candidates)

    assert candidates == snapshot
