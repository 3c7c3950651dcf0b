"""Pydantic models and value types shared by the ranking engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

logger = logging.getLogger(__name__)


class Video(BaseModel):
    """A single catalog video as returned by the Catalog Service."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(validation_alias=AliasChoices("id", "videoId"), min_length=1)
    title: str = ""
    channel_id: str = Field(
        default="", validation_alias=AliasChoices("channel_id", "channelId")
    )
    channel_name: str = Field(
        default="", validation_alias=AliasChoices("channel_name", "channelName")
    )
    channel_avatar_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("channel_avatar_url", "channelAvatarUrl"),
    )
    thumbnail_url: str | None = Field(
        default=None, validation_alias=AliasChoices("thumbnail_url", "thumbnailUrl")
    )
    views: str = ""
    uploaded_at: str = Field(
        default="", validation_alias=AliasChoices("uploaded_at", "uploadedAt")
    )
    duration: str | None = None
    iso_duration: str | None = Field(
        default=None, validation_alias=AliasChoices("iso_duration", "isoDuration")
    )
    description_snippet: str | None = Field(
        default=None,
        validation_alias=AliasChoices("description_snippet", "descriptionSnippet"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def _strip_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("title", "channel_id", "channel_name", "views", "uploaded_at", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    def full_text(self) -> str:
        """Return the title and channel name used for NG keyword matching."""

        return f"{self.title} {self.channel_name}"


class Channel(BaseModel):
    """A channel reference, as stored in the subscription list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    avatar_url: str | None = Field(
        default=None, validation_alias=AliasChoices("avatar_url", "avatarUrl")
    )
    subscriber_count: str | None = Field(
        default=None,
        validation_alias=AliasChoices("subscriber_count", "subscriberCount"),
    )


class VideoDetails(Video):
    """Detailed view of a video, including its related-video list."""

    related_videos: list[Video] = Field(
        default_factory=list,
        validation_alias=AliasChoices("related_videos", "relatedVideos"),
    )

    @field_validator("related_videos", mode="before")
    @classmethod
    def _drop_malformed_related(cls, value: Any) -> list[Video]:
        if not isinstance(value, list):
            return []
        return parse_videos(value)


def parse_videos(entries: Iterable[Any]) -> list[Video]:
    """Validate raw catalog entries, skipping the ones that are malformed."""

    videos: list[Video] = []
    for entry in entries:
        if isinstance(entry, Video):
            videos.append(entry)
            continue
        if not isinstance(entry, dict):
            continue
        try:
            videos.append(Video.model_validate(entry))
        except ValidationError as exc:
            logger.debug("Skipping malformed catalog entry: %s", exc.errors())
    return videos


@dataclass(slots=True)
class SearchResults:
    """Videos and shorts returned for one search page."""

    videos: list[Video] = field(default_factory=list)
    shorts: list[Video] = field(default_factory=list)


@dataclass(slots=True)
class AffinityProfile:
    """Keyword to weight mapping describing inferred user interest."""

    keywords: dict[str, float] = field(default_factory=dict)

    def add(self, keyword: str, weight: float) -> None:
        self.keywords[keyword] = self.keywords.get(keyword, 0.0) + weight

    def weight(self, keyword: str) -> float:
        return self.keywords.get(keyword, 0.0)

    def top_keywords(self, count: int) -> list[str]:
        """Return the ``count`` heaviest keywords; ties keep insertion order."""

        if count <= 0:
            return []
        ranked = sorted(self.keywords.items(), key=lambda item: item[1], reverse=True)
        return [keyword for keyword, _ in ranked[:count]]

    def __len__(self) -> int:
        return len(self.keywords)


@dataclass(frozen=True, slots=True)
class ExclusionSet:
    """User-declared exclusions: NG keywords, NG channels and hidden videos."""

    ng_keywords: tuple[str, ...] = ()
    ng_channel_ids: frozenset[str] = frozenset()
    hidden_video_ids: frozenset[str] = frozenset()


@dataclass(slots=True)
class ScoredCandidate:
    """A video paired with its composite score for one ranking pass."""

    video: Video
    score: float
    relevance: float = 0.0
    popularity: float = 0.0
    freshness: float = 0.0

    @property
    def channel_id(self) -> str:
        return self.video.channel_id


@dataclass(slots=True)
class CandidatePool:
    """A labeled batch of candidates from one sourcing strategy."""

    label: str
    videos: list[Video] = field(default_factory=list)


def _extract_ids(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        value = [value]
    ids: list[str] = []
    for entry in value:
        if isinstance(entry, str):
            candidate = entry
        elif isinstance(entry, Mapping):
            candidate = str(entry.get("id") or "")
        else:
            candidate = str(getattr(entry, "id", "") or "")
        candidate = candidate.strip()
        if candidate:
            ids.append(candidate)
    return ids


class UserStateSnapshot(BaseModel):
    """Read-only snapshot of the User State Store for a single ranking pass."""

    model_config = ConfigDict(populate_by_name=True)

    watch_history: list[Video] = Field(
        default_factory=list,
        validation_alias=AliasChoices("watch_history", "watchHistory"),
    )
    search_history: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("search_history", "searchHistory"),
    )
    subscribed_channels: list[Channel] = Field(
        default_factory=list,
        validation_alias=AliasChoices("subscribed_channels", "subscribedChannels"),
    )
    shorts_history: list[Video] = Field(
        default_factory=list,
        validation_alias=AliasChoices("shorts_history", "shortsHistory"),
    )
    ng_keywords: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ng_keywords", "ngKeywords"),
    )
    ng_channels: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ng_channels", "ngChannels"),
    )
    hidden_videos: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("hidden_videos", "hiddenVideos"),
    )
    negative_keywords: dict[str, float] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("negative_keywords", "negativeKeywords"),
    )
    page: int = Field(default=1, ge=1)

    @field_validator("ng_channels", "hidden_videos", mode="before")
    @classmethod
    def _normalize_id_list(cls, value: Any) -> list[str]:
        """Accept plain ids or ``{"id": ...}`` records from the store."""

        return _extract_ids(value)

    @field_validator("negative_keywords", mode="before")
    @classmethod
    def _normalize_negative_keywords(cls, value: Any) -> Any:
        # The store may serialise the map as a list of [keyword, score] pairs.
        if isinstance(value, list):
            pairs: dict[str, float] = {}
            for entry in value:
                if isinstance(entry, (list, tuple)) and len(entry) == 2:
                    pairs[str(entry[0])] = entry[1]
            return pairs
        return value

    def exclusions(self) -> ExclusionSet:
        """Return the exclusion set derived from this snapshot."""

        return ExclusionSet(
            ng_keywords=tuple(self.ng_keywords),
            ng_channel_ids=frozenset(self.ng_channels),
            hidden_video_ids=frozenset(self.hidden_videos),
        )


class FeedResponse(BaseModel):
    """Ordered feed returned to the presentation layer."""

    videos: list[Video] = Field(default_factory=list)
    count: int = 0
    page: int = 1
    mode: Literal["ratio-mix", "profile-rank", "shorts"]

    @classmethod
    def build(
        cls,
        videos: list[Video],
        *,
        page: int,
        mode: Literal["ratio-mix", "profile-rank", "shorts"],
    ) -> "FeedResponse":
        return cls(videos=videos, count=len(videos), page=page, mode=mode)
