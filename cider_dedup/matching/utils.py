"""Text normalization shared by every comparison path."""
from __future__ import annotations
import re
import unicodedata
from typing import Any

_RE_WS = re.compile(r"\s+")
# Anything that is not a letter or digit; underscore counts as punctuation.
_RE_PUNCT = re.compile(r"[\W_]+")
# Apostrophes and hyphens between two word characters join the word ("o'hara", "semi-sweet").
_RE_JOINER = re.compile(r"(?<=[^\W_])['’‘ʼ\-‐‑](?=[^\W_])")


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: Any) -> str:
    """Canonical form of a name or brand for comparison.

    Case-folds, strips diacritics, removes internal apostrophes and hyphens,
    turns any other punctuation or symbol into a word break and collapses
    whitespace. ``None`` yields ``""``; non-string values are stringified.
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    if not text:
        return ""
    t = strip_diacritics(text.casefold())
    t = _RE_JOINER.sub("", t)
    t = _RE_PUNCT.sub(" ", t)
    t = _RE_WS.sub(" ", t).strip()
    return t


def tokenize(normalized: str) -> frozenset:
    """Whitespace token set of an already normalized string."""
    return frozenset(normalized.split())
