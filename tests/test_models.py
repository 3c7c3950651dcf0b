"""Value type parsing tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.models import UserStateSnapshot, Video, VideoDetails, parse_videos


def test_video_accepts_camel_case_payloads() -> None:
    video = Video.model_validate(
        {
            "id": " abc ",
            "title": "Title",
            "channelId": "UC1",
            "channelName": "Channel",
            "uploadedAt": "3日前",
            "isoDuration": "PT1M",
            "descriptionSnippet": "snippet",
        }
    )

    assert video.id == "abc"
    assert video.channel_id == "UC1"
    assert video.uploaded_at == "3日前"
    assert video.full_text() == "Title Channel"


def test_video_coerces_missing_text_fields() -> None:
    video = Video.model_validate({"id": 42, "title": None, "views": None})

    assert video.id == "42"
    assert video.title == ""
    assert video.views == ""


def test_video_is_immutable() -> None:
    video = Video(id="v1", title="Original")

    with pytest.raises(ValidationError):
        video.title = "Changed"  # type: ignore[misc]


def test_blank_id_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Video.model_validate({"id": "  "})


def test_parse_videos_skips_malformed_entries() -> None:
    videos = parse_videos([{"id": "a"}, {"title": "no id"}, None, "x", {"id": "b"}])

    assert [video.id for video in videos] == ["a", "b"]


def test_video_details_drops_non_list_related() -> None:
    details = VideoDetails.model_validate({"id": "v", "relatedVideos": "oops"})

    assert details.related_videos == []


def test_snapshot_normalizes_store_records() -> None:
    snapshot = UserStateSnapshot.model_validate(
        {
            "ngChannels": [{"id": "UC1", "name": "Blocked"}, "UC2", {"name": "no id"}],
            "hiddenVideos": [{"id": "v1"}, " v2 "],
            "ngKeywords": ["Spoiler"],
            "negativeKeywords": [["prank", 1.5], ["bad-entry"]],
        }
    )

    exclusions = snapshot.exclusions()

    assert exclusions.ng_channel_ids == frozenset({"UC1", "UC2"})
    assert exclusions.hidden_video_ids == frozenset({"v1", "v2"})
    assert exclusions.ng_keywords == ("Spoiler",)
    assert snapshot.negative_keywords == {"prank": 1.5}
    assert snapshot.page == 1
