"""Keyword extraction shared by profile building, filtering and scoring."""

from __future__ import annotations

import re
import unicodedata

JAPANESE_STOP_WORDS = frozenset(
    {
        "の", "に", "は", "を", "が", "で", "です", "ます", "こと", "もの", "これ",
        "それ", "あれ", "いる", "する", "ある", "ない", "から", "まで", "と", "も",
        "や", "など", "さん", "ちゃん",
    }
)
ENGLISH_STOP_WORDS = frozenset(
    {
        "a", "an", "the", "is", "are", "was", "were", "in", "on", "at", "to",
        "for", "of", "it", "you", "he", "she", "they", "we", "i", "and", "or",
        "but", "by", "with",
    }
)
STOP_WORDS = JAPANESE_STOP_WORDS | ENGLISH_STOP_WORDS

# Unicode categories replaced by a separator: symbols, punctuation,
# separators and control/format characters.
_SEPARATOR_CATEGORIES = ("S", "P", "Z", "C")
_BRACKETS_RE = re.compile(r"[\[\]()【】『』「」・、。!?#]")
_NUMERIC_RE = re.compile(r"^\d+$")


def _replace_separators(text: str) -> str:
    return "".join(
        " " if unicodedata.category(char)[0] in _SEPARATOR_CATEGORIES else char
        for char in text
    )


def extract_keywords(text: str | None) -> set[str]:
    """Return the deduplicated content tokens of ``text``.

    Tokens are lower-cased and split on symbol, punctuation and whitespace
    characters. Single-character tokens, bilingual stop words and purely
    numeric tokens are discarded. ``None`` or empty input yields an empty set.
    """

    if not text:
        return set()
    cleaned = _BRACKETS_RE.sub(" ", _replace_separators(text.lower()))
    return {
        token
        for token in cleaned.split()
        if len(token) > 1
        and token not in STOP_WORDS
        and not _NUMERIC_RE.match(token)
    }
