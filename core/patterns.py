"""
Multi-pass pattern engine.

The merged comment text goes through three cleaning passes. Each pass is
tried with 0-6 trailing characters per word kept verbatim (so "garuda123"
is seen both as digits and as leetspeak), and for each variant four
pattern families run from most to least specific:

    standard -> custom -> loose -> tiny

A match only counts once the running checkpoint is already above 0.5.
When the loose family finds nothing, bare site ids ("hoki77") are tried
instead at sensitivity 1-3. When nothing matches, a fuzzy-corrected
variant of the text is retried and remembered in a short history that
later approaches also check; if no word even resembles a support
keyword, the checkpoint takes a small penalty. The first counted match
ends the search.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from core.fuzzy import fuzzy_search
from core.normalizer import (
    MAX_IGNORE_LAST_DIGITS,
    clean_weird_patterns,
    combine_short_words,
    convert_comment_fixed,
)

logger = logging.getLogger(__name__)

_AI = re.IGNORECASE | re.ASCII


# =============================================================================
# PATTERN BUILDERS
# =============================================================================

# Generic "name + digits" site ids or well-known gambling stems
STANDARD_PATTERN = re.compile(
    r'\b([A-Z]?[a-zA-Z_+-]{2,}\d{2,10}\b(?!\.))|'
    r'(slot|casino|gambling|bet|poker|jackpot|joker|zeus|toto|judi)(?:[a-zA-Z_+-]{0,4}[a-zA-Z])?',
    _AI,
)

# Short word followed by a 2-5 digit number ("garuda88")
SITE_IDENTIFIER_PATTERN = re.compile(r'\b[a-zA-Z]{3,}\d{2,5}\b', _AI)

# Site ids tried when the loose family finds nothing ("jp7", "hoki77")
SHORT_SITE_ID_PATTERN = re.compile(r'\b[a-zA-Z]{2,3}\d{1,5}\b', _AI)
LONG_SITE_ID_PATTERN = re.compile(r'\b[a-zA-Z]{3,}\d{2,}\b', _AI)

_WHITESPACE = re.compile(r'\s+')
_WORD_TOKEN = re.compile(r'\b\w+\b', re.ASCII)


def _escape_terms(terms: Iterable[str]) -> str:
    return '|'.join(re.escape(term) for term in terms)


def create_pattern_regex(terms: Iterable[str], loose: bool = False) -> Optional[re.Pattern]:
    """
    Build a regex matching any term with a short affix and trailing digits.

    Args:
        terms: Terms to include
        loose: Allow digits in the affixes and drop the leading word boundary

    Returns:
        Compiled case-insensitive pattern, or None for an empty term list
    """
    terms = list(terms)
    if not terms:
        return None

    escaped = _escape_terms(terms)
    if loose:
        pattern = (
            rf'(?:[a-zA-Z0-9][a-zA-Z0-9_+-]{{0,4}})?(?:{escaped})'
            rf'(?:[a-zA-Z0-9_+-]{{0,4}}[a-zA-Z0-9])?\d*'
        )
    else:
        pattern = (
            rf'\b(?:[a-zA-Z][a-zA-Z_+-]{{0,4}})?(?:{escaped})'
            rf'(?:[a-zA-Z_+-]{{0,4}}[a-zA-Z])?\d*'
        )
    return re.compile(pattern, _AI)


def tiny_pattern_regex(terms: Iterable[str]) -> Optional[re.Pattern]:
    """
    Build the least specific pattern family.

    The term alternation is deliberately left ungrouped: the optional
    prefix binds to the first term and the optional suffix/digits to the
    last one, every other term matches bare.
    """
    terms = list(terms)
    if not terms:
        return None

    escaped = _escape_terms(terms)
    return re.compile(rf'([a-zA-Z]{{2,10}})?{escaped}([a-zA-Z]{{2,10}})?(?:[0-9]{{2,5}})?', _AI)


@dataclass(frozen=True)
class PatternFamilies:
    """Compiled patterns for one keyword list."""
    standard: re.Pattern
    custom: Optional[re.Pattern]
    loose: Optional[re.Pattern]
    tiny: Optional[re.Pattern]


@lru_cache(maxsize=64)
def build_pattern_families(terms: Tuple[str, ...]) -> PatternFamilies:
    """Compile (once per keyword tuple) the four pattern families."""
    logger.debug(f"Compiling pattern families for {len(terms)} keywords")
    return PatternFamilies(
        standard=STANDARD_PATTERN,
        custom=create_pattern_regex(terms),
        loose=create_pattern_regex(terms, loose=True),
        tiny=tiny_pattern_regex(terms),
    )


# =============================================================================
# SEARCH CONFIGURATION
# =============================================================================

# (name, converter, weight)
DETECTION_PASSES: Tuple[Tuple[str, Callable[[str], str], float], ...] = (
    ("direct", lambda text: text, 1.0),
    ("standard cleaning", clean_weird_patterns, 0.9),
    ("advanced cleaning", lambda text: combine_short_words(clean_weird_patterns(text)), 0.8),
)

# (family, value, failure penalty base) before pass weighting
PATTERN_APPROACHES: Tuple[Tuple[str, float, float], ...] = (
    ("standard", 0.5, 0.014),
    ("custom", 0.4, 0.013),
    ("loose", 0.3, 0.011),
    ("tiny", 0.25, 0.005),
)

MATCH_GATE = 0.5
TINY_HIT_BONUS = 0.03
HISTORY_HIT_BONUS = 0.1
SITE_IDENTIFIER_BONUS = 0.1
FUZZY_RETRY_BONUS = 0.08
FUZZY_HISTORY_SIZE = 2
SUPPORT_BONUS_GATE = 0.45
SITE_ID_FALLBACK_MIN_CAP = 3
SITE_ID_FALLBACK_FACTOR = 1.2


@dataclass(frozen=True)
class PatternContext:
    """
    Everything the search needs besides the text and checkpoint.

    ``written_text`` is the comment as written (after the fuzzy keyword
    fix). The site-identifier nudge looks at it, and loose-family
    fallback ids only count when they occur in it as a whole word.
    """
    keywords: Tuple[str, ...]
    support_keywords: Tuple[str, ...]
    domains: FrozenSet[str] = frozenset()
    allowlist: FrozenSet[str] = frozenset()
    sensitivity_cap: int = 3
    written_text: str = ""
    debug: bool = False


@dataclass
class PatternSearchOutcome:
    """Result of a pattern search."""
    checkpoint: float
    detected: bool = False
    all_matches: List[str] = field(default_factory=list)
    matched_terms: List[str] = field(default_factory=list)
    supporting_keywords: List[str] = field(default_factory=list)

    @property
    def keyword_match_count(self) -> int:
        return len(self.supporting_keywords)

    def record(self, matches: List[str]) -> None:
        """Remember matches (raw) and their lowercase terms (unique)."""
        self.all_matches.extend(matches)
        for match in matches:
            term = match.lower()
            if term not in self.matched_terms:
                self.matched_terms.append(term)


# =============================================================================
# SEARCH
# =============================================================================

def _compact(text: str) -> str:
    return _WHITESPACE.sub('', text)


def _find_all(pattern: re.Pattern, text: str) -> List[str]:
    return [match.group(0) for match in pattern.finditer(text)]


def _allowed(matches: List[str], allowlist: FrozenSet[str]) -> List[str]:
    return [match for match in matches if match.lower() not in allowlist]


def supporting_keyword_bonus(count: int) -> float:
    """Bonus for corroborating support keywords, capped at 1.5."""
    return min(1.5, 0.03 * (count / 2) + 0.7)


class _PatternSearch:
    """State of one search: running checkpoint, outcome and fuzzy history."""

    def __init__(self, checkpoint: float, context: PatternContext):
        self.context = context
        self.families = build_pattern_families(context.keywords)
        self.outcome = PatternSearchOutcome(checkpoint=checkpoint)
        self.history: List[str] = []
        self.has_site_identifier = (
            SITE_IDENTIFIER_PATTERN.search(context.written_text.strip()) is not None
        )
        self.input_words = frozenset(word.lower() for word in _WORD_TOKEN.findall(context.written_text))
        self.log = logger.info if context.debug else logger.debug

    def run(self, merged: str) -> PatternSearchOutcome:
        for pass_name, converter, weight in DETECTION_PASSES:
            processed = converter(merged)
            self.log(f"Pattern pass '{pass_name}': {processed!r}")

            for ignore in range(MAX_IGNORE_LAST_DIGITS + 1):
                text_fixed = convert_comment_fixed(processed, ignore)
                converted = combine_short_words(clean_weird_patterns(text_fixed))
                self.log(f"Converted text (ignore={ignore}): {converted!r}")

                if self._try_approaches(processed, text_fixed, converted, weight, ignore):
                    self._collect_supporting_keywords(converted)
                    self.outcome.detected = True
                    return self.outcome

        return self.outcome

    def _try_approaches(
        self, processed: str, text_fixed: str, converted: str, weight: float, ignore: int
    ) -> bool:
        compact = _compact(converted)
        loose_attempted = False

        for name, base_value, base_min in PATTERN_APPROACHES:
            pattern = getattr(self.families, name)
            if pattern is None:
                continue

            value = base_value * weight
            minimum = base_min * weight
            matches = _find_all(pattern, compact)

            if not matches and (name == "loose" or loose_attempted):
                matches = self._site_id_fallback(text_fixed, value)
            elif (
                name != "tiny"
                and self.has_site_identifier
                and self.context.sensitivity_cap >= 4
            ):
                self.outcome.checkpoint += SITE_IDENTIFIER_BONUS
                self.log("Site identifier pattern detected at high sensitivity")

            for previous in self.history:
                if pattern.search(_compact(previous)):
                    self.outcome.checkpoint += HISTORY_HIT_BONUS
                    self.log(f"Fuzzy history hit for {name} pattern: {previous!r}")

            if name == "loose":
                loose_attempted = True
            elif name == "tiny":
                matches = _find_all(pattern, processed)
                if _allowed(matches, self.context.allowlist):
                    self.outcome.checkpoint += TINY_HIT_BONUS

            if matches:
                gated = self._accept(_allowed(matches, self.context.allowlist), value)
            else:
                gated = self._fuzzy_retry(pattern, text_fixed, converted, minimum)

            if gated:
                self.log(f"{name.upper()} match detected (ignore_last_digits={ignore})")
                return True

        return False

    def _site_id_fallback(self, text_fixed: str, value: float) -> List[str]:
        """Bare site ids ("hoki77") written in the comment, at sensitivity 1-3."""
        if self.context.sensitivity_cap < SITE_ID_FALLBACK_MIN_CAP:
            return []

        matches = self._written_ids(SHORT_SITE_ID_PATTERN, combine_short_words(text_fixed))
        if not matches:
            matches = self._written_ids(LONG_SITE_ID_PATTERN, text_fixed)
            if matches:
                self.outcome.checkpoint += value * SITE_ID_FALLBACK_FACTOR
                self.log(f"Site id fallback matched: {matches}")
        return matches

    def _written_ids(self, pattern: re.Pattern, text: str) -> List[str]:
        # Ids built by number merging ("angka 12" -> "angka12") don't count
        return [match for match in _find_all(pattern, text) if match.lower() in self.input_words]

    def _accept(self, matches: List[str], increment: float) -> bool:
        if not matches:
            return False

        self.outcome.record(matches)
        if self.outcome.checkpoint > MATCH_GATE:
            self.outcome.checkpoint += increment
            return True
        return False

    def _fuzzy_retry(self, pattern: re.Pattern, text_fixed: str, converted: str, minimum: float) -> bool:
        candidates = fuzzy_search(list(self.context.support_keywords), text_fixed)

        if candidates:
            best = candidates[0]
            if best.score > 0.7:
                session = text_fixed.replace(best.matched_word, best.matched_with, 1)
                self.log(f"Fuzzy replacement: '{best.matched_word}' -> '{best.matched_with}'")

                retried = _allowed(_find_all(pattern, _compact(session)), self.context.allowlist)
                if self._accept(retried, FUZZY_RETRY_BONUS):
                    return True
                self.history.append(session)
        else:
            fallback = fuzzy_search(list(self.context.keywords), converted)
            if fallback and fallback[0].score > 0.6:
                best = fallback[0]
                self.history.append(text_fixed.replace(best.matched_word, best.matched_with, 1))
            # Nothing in the text resembles a support keyword
            self.outcome.checkpoint -= minimum - 0.002

        self.history = self.history[-FUZZY_HISTORY_SIZE:]
        return False

    def _collect_supporting_keywords(self, converted: str) -> None:
        converted_lower = converted.lower()
        found = [
            keyword for keyword in self.context.support_keywords
            if keyword.lower() not in self.context.domains
            and keyword.lower() in converted_lower
        ]
        if not found:
            return

        if self.outcome.checkpoint > SUPPORT_BONUS_GATE:
            bonus = supporting_keyword_bonus(len(found))
            self.outcome.checkpoint += bonus - 0.2
            self.log(f"Added {bonus:.3f} from {len(found)} supporting keywords")
        else:
            self.outcome.checkpoint -= 0.01

        self.outcome.supporting_keywords = found


def search_patterns(checkpoint: float, merged: str, context: PatternContext) -> PatternSearchOutcome:
    """
    Run the multi-pass pattern search.

    Args:
        checkpoint: Checkpoint accumulated by earlier stages
        merged: Normalized, reconstructed and number-merged text
        context: Keyword lists, blocklist, allowlist and sensitivity

    Returns:
        PatternSearchOutcome with the updated checkpoint and match details
    """
    return _PatternSearch(checkpoint, context).run(merged)
