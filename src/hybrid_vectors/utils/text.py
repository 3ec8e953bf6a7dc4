"""
Utility functions for query tokenization and keyword relevance.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence


_WHITESPACE_RGX = re.compile(r"\s+")


def extract_keywords(query: str, min_length: int = 3) -> List[str]:
    """
    Lower-case *query*, split on whitespace and keep tokens of at least
    *min_length* characters.

    Punctuation is kept, so ``"!!"`` yields nothing while ``"pod!!"`` survives.
    """
    tokens = _WHITESPACE_RGX.split(query.lower().strip())
    return [token for token in tokens if len(token) >= min_length]


def has_whole_word(text: str, keyword: str) -> bool:
    """Return ``True`` when *keyword* occurs in *text* bounded by word edges."""
    return re.search(rf"(?<!\w){re.escape(keyword)}(?!\w)", text) is not None


def trigger_overlap(keyword: str, triggers: Iterable[str]) -> bool:
    """Substring overlap in either direction against any trigger term."""
    for trigger in triggers:
        trigger = str(trigger).lower()
        if trigger and (keyword in trigger or trigger in keyword):
            return True
    return False


def keyword_relevance(
    search_text: str,
    triggers: Sequence[str],
    keywords: Sequence[str],
    exact_match_bonus: float = 0.3,
) -> float:
    """
    Score one candidate against the query keywords.

    A keyword counts once when it is a substring of *search_text* or overlaps a
    trigger. The base score is ``matched / len(keywords)``; a whole-word hit in
    *search_text* adds *exact_match_bonus*. The result is capped at 1.0.
    """
    if not keywords:
        return 0.0
    text = (search_text or "").lower()
    matched = 0
    whole_word = False
    for keyword in keywords:
        in_text = keyword in text
        if in_text or trigger_overlap(keyword, triggers or ()):
            matched += 1
        if in_text and not whole_word:
            whole_word = has_whole_word(text, keyword)
    if matched == 0:
        return 0.0
    score = matched / len(keywords)
    if whole_word:
        score += exact_match_bonus
    return min(1.0, score)
