"""
PerkBoard Backend - Approximate String Matching
=================================================

What:  Scores a single query word against the text fields of arbitrary items
       and returns the items that clear a normalized-distance threshold.
How:   RapidFuzz similarity (0-100) on lowercased, punctuation-stripped text.
       A word is matched against the best-aligned window of a longer field
       (partial_ratio), so "hard" finds "Dead Hard". Against a field shorter
       than the word, the whole strings are compared (ratio) to keep
       "deadhardsprint" from matching a perk called "Dead".

Threshold:
    Distances are on a 0 (identical) to 1 (nothing in common) scale.
    An item matches when 1 - similarity / 100 <= threshold, so the default
    0.17 accepts roughly one typo in a six-letter word.
"""

from typing import Any, List, Sequence

from rapidfuzz import fuzz, utils

DEFAULT_THRESHOLD = 0.17


def similarity(word: str, text: str) -> float:
    """Similarity in [0, 100] between a query word and one text field."""
    word = utils.default_process(word)
    text = utils.default_process(text or "")
    if not word or not text:
        return 0.0
    if len(text) < len(word):
        return fuzz.ratio(word, text)
    return fuzz.partial_ratio(word, text)


def rank_matches(
    word: str,
    items: Sequence[Any],
    keys: Sequence[str],
    threshold: float = DEFAULT_THRESHOLD,
) -> List[Any]:
    """
    Items whose best-scoring key is within `threshold`, best first.

    Args:
        word:      One query word.
        items:     Objects exposing the attributes named in `keys`.
        keys:      Attribute names to score; the highest score wins.
        threshold: Maximum normalized distance (0 = exact only).

    Returns:
        Matching items ordered by descending score; ties keep input order.
    """
    # rounded so 0.17 gives exactly 83, not 83.00000000000001
    cutoff = round((1.0 - threshold) * 100, 6)
    scored = []
    for index, item in enumerate(items):
        best = max(similarity(word, getattr(item, key, "") or "") for key in keys)
        if best >= cutoff:
            scored.append((best, index, item))
    scored.sort(key=lambda entry: (-entry[0], entry[1]))
    return [item for _, _, item in scored]
