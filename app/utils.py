"""Utility helpers for parsing catalog strings and shuffling pools."""

from __future__ import annotations

import random
import re
from typing import Sequence, TypeVar

T = TypeVar("T")

UNPARSEABLE_DAYS_AGO = 999
# Longer digit runs are cut before int() to stay under the str-to-int limit.
MAX_NUMBER_DIGITS = 18

NON_DIGIT_RE = re.compile(r"\D+")
FIRST_NUMBER_RE = re.compile(r"(\d+)")
ISO_DURATION_RE = re.compile(
    r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$",
    re.IGNORECASE,
)
CLOCK_DURATION_RE = re.compile(r"^\d+(?::\d{1,2}){0,2}$")
BRACKETED_RE = re.compile(r"【.*?】|\[.*?\]|\(.*?\)")

ENGLISH_RECENCY_RE = re.compile(
    r"(\d+)\s*(second|minute|hour|day|week|month|year)s?\s+ago"
)

# Checked in order; sub-day units collapse to zero days.
_JAPANESE_RECENCY_UNITS: tuple[tuple[tuple[str, ...], int], ...] = (
    (("秒前", "分前", "時間前"), 0),
    (("日前",), 1),
    (("週間前",), 7),
    (("か月前", "ヶ月前", "ケ月前", "カ月前"), 30),
    (("年前",), 365),
)

_ENGLISH_UNIT_DAYS = {
    "second": 0,
    "minute": 0,
    "hour": 0,
    "day": 1,
    "week": 7,
    "month": 30,
    "year": 365,
}


def _bounded_int(digits: str | None) -> int:
    if not digits:
        return 0
    return int(digits[:MAX_NUMBER_DIGITS])


def parse_view_count(views: str | None) -> int:
    """Return the integer view count of a human formatted string.

    Every non-digit character is dropped, so "1,234,567 回視聴" parses to
    1234567. Strings without digits parse to ``0``.
    """

    if not views:
        return 0
    digits = NON_DIGIT_RE.sub("", views)
    if not digits:
        return 0
    return _bounded_int(digits)


def parse_days_ago(uploaded_at: str | None) -> int:
    """Return how many days ago a "3日前"/"2 weeks ago" style label points to."""

    if not uploaded_at:
        return UNPARSEABLE_DAYS_AGO
    text = uploaded_at.strip().lower()

    english = ENGLISH_RECENCY_RE.search(text)
    if english:
        amount = _bounded_int(english.group(1))
        return amount * _ENGLISH_UNIT_DAYS[english.group(2)]

    match = FIRST_NUMBER_RE.search(text)
    amount = _bounded_int(match.group(1)) if match else 0
    for markers, multiplier in _JAPANESE_RECENCY_UNITS:
        if any(marker in text for marker in markers):
            return amount * multiplier
    return UNPARSEABLE_DAYS_AGO


def parse_duration_seconds(iso_duration: str | None, duration: str | None = None) -> int:
    """Return a duration in seconds from ISO-8601 or ``h:mm:ss`` text."""

    if iso_duration:
        match = ISO_DURATION_RE.match(iso_duration.strip())
        if match and any(match.groups()):
            days, hours, minutes, seconds = match.groups()
            total = (
                _bounded_int(days) * 86_400
                + _bounded_int(hours) * 3_600
                + _bounded_int(minutes) * 60
                + float((seconds or "0")[:MAX_NUMBER_DIGITS])
            )
            return int(total)
    if duration:
        text = duration.strip()
        if CLOCK_DURATION_RE.match(text):
            total = 0
            for part in text.split(":"):
                total = total * 60 + _bounded_int(part)
            return total
    return 0


def clean_title_for_search(title: str) -> str:
    """Strip bracketed segments and keep the first four words of a title."""

    stripped = BRACKETED_RE.sub("", title or "").strip()
    return " ".join(stripped.split(" ")[:4])


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a uniformly shuffled copy of ``items`` using ``rng``."""

    copy = list(items)
    rng.shuffle(copy)
    return copy


def sample_up_to(items: Sequence[T], count: int, rng: random.Random) -> list[T]:
    """Return up to ``count`` distinct items sampled uniformly at random."""

    if count <= 0 or not items:
        return []
    return rng.sample(list(items), min(count, len(items)))
