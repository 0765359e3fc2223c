"""
Fuzzy keyword matching tolerant to typos and leetspeak.

Usage:
    matches = fuzzy_search(["slot", "gacor"], "sl0tt g4cor")
    best = matches[0] if matches else None
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Sequence

from rapidfuzz.distance import OSA

# Smaller map than the normalizer's: symbols like '$' or '|' stay literal
FUZZY_SUBSTITUTION_MAP: Dict[str, str] = {
    '1': 'i', '2': 'z', '3': 'e', '4': 'a', '5': 's',
    '6': 'g', '7': 't', '8': 'b', '9': 'g', '0': 'o',
    '!': 'i', '&': 'e', '@': 'a', '#': 'h',
}

_WHITESPACE = re.compile(r'\s+')


@dataclass(frozen=True)
class FuzzyMatch:
    """A query word close enough to a candidate term."""
    matched_word: str
    matched_with: str
    score: float


def _normalize(text: str) -> str:
    return ''.join(FUZZY_SUBSTITUTION_MAP.get(c, c) for c in text.lower())


def damerau_levenshtein(a: str, b: str, max_distance: int = 2) -> int:
    """
    Optimal string alignment distance (adjacent transpositions count as 1).

    Any distance above ``max_distance`` is reported as ``max_distance + 1``,
    except against an empty string, which costs the other string's length.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if abs(len(a) - len(b)) > max_distance:
        return max_distance + 1

    return OSA.distance(a, b, score_cutoff=max_distance)


def _score(word: str, item: str, distance: int) -> float:
    if distance == 0:
        return 1.0
    base = 1 - distance / max(len(word), len(item))
    contains_bonus = 0.1 if word in item else 0.0
    prefix_bonus = 0.2 if item.startswith(word) else 0.0
    return min(1.0, base + contains_bonus + prefix_bonus)


def fuzzy_search(
    candidates: Sequence[str],
    query: str,
    max_distance: int = 2,
    min_score: float = 0.5,
) -> List[FuzzyMatch]:
    """
    Find candidate terms close to any whitespace-separated word of a query.

    Args:
        candidates: Terms to compare against
        query: Text to scan
        max_distance: Largest edit distance accepted
        min_score: Smallest similarity score accepted

    Returns:
        Matches sorted by descending score (ties keep scan order)

    Raises:
        TypeError: If candidates is not a list/tuple or query is not a string
    """
    if not isinstance(candidates, (list, tuple)):
        raise TypeError('Parameter "candidates" must be a list')
    if not isinstance(query, str):
        raise TypeError('Parameter "query" must be a string')
    if not query.strip():
        return []

    normalized_items = [(item, _normalize(item)) for item in candidates]
    results: List[FuzzyMatch] = []

    for word in _WHITESPACE.split(_normalize(query)):
        for item, normalized in normalized_items:
            distance = damerau_levenshtein(word, normalized, max_distance)
            score = _score(word, normalized, distance)

            if distance <= max_distance and score >= min_score:
                results.append(FuzzyMatch(word, item, round(score, 3)))

    results.sort(key=lambda match: match.score, reverse=True)
    return results
