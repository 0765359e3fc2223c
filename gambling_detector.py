"""
Gambling Promotion Detector for social media comments.

Version: 1.1.2

Scores free-form text for online gambling ("judol") promotion. Promoters
disguise site names with leetspeak, dotted or spaced letters and symbol
noise, so detection combines:

    - Independent signals: symbol noise, repetition, URLs, emoji/code
      tokens, evasion tricks, contextual phrasing, contact details
    - Normalization deltas: diacritics and split words raise the score,
      merged numbers ("angka 12 + 22") lower it
    - Language vocabulary and a domain blocklist
    - A multi-pass pattern engine with fuzzy-assisted retries
    - Content length profile

Every stage adds to (or subtracts from) a running checkpoint. The final
checkpoint is clamped by the sensitivity level and mapped onto a
confidence tier.

Usage:
    result = detect("sl0t88 maxwin dijamin menang!")

    if result.is_gambling:
        print(f"{result.confidence}: {result.details}")

    detector = create_detector({"sensitivity_level": 2, "allowlist": ["poker"]})
    results = detector.detect_batch(comments)
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple, Union

from core.constants import (
    APP_VERSION,
    BLOCKED_DOMAIN_WEIGHT,
    CODE_SEQUENCE_WEIGHT,
    CONTACT_INFO_WEIGHT,
    DEFAULT_KEYWORDS,
    DEFAULT_LANGUAGE,
    DEFAULT_SENSITIVITY,
    DEFAULT_SUPPORT_KEYWORDS,
    DETAILS_GARBAGE,
    DETAILS_HIGH,
    DETAILS_LOW,
    DETAILS_MEDIUM,
    DETAILS_NONE,
    DETAILS_TOO_SHORT,
    GARBAGE_THRESHOLD,
    GARBAGE_WEIGHT,
    LANGUAGE_PACKS,
    LONG_AVG_WORD_LENGTH,
    LONG_WORD_WEIGHT,
    MAX_SENSITIVITY,
    MERGED_NUMBERS_WEIGHT,
    MIN_SENSITIVITY,
    NON_STANDARD_CHARS_WEIGHT,
    REPETITION_WEIGHT,
    SENSITIVITY_CAPS,
    SPAM_LENGTH_WEIGHT,
    SUPPORT_KEYWORD_MARKERS,
    SUPPORTED_LANGUAGES,
    URL_PATTERN_WEIGHT,
    WORD_SEPARATION_WEIGHT,
    Confidence,
)
from core.fuzzy import fuzzy_search
from core.normalizer import (
    clean_text,
    merge_text_with_trailing_numbers,
    normalize_input,
    reconstruct_separated_words,
    unpad_periods,
)
from core.patterns import PatternContext, search_patterns
from core.settings import DetectorSettings, PatternSource, load_patterns
from core.signals import (
    ContactInfo,
    analyze_evasion_techniques,
    detect_contextual_gambling_indicators,
    detect_language_specific_patterns,
    extract_contact_infos,
    has_abnormal_repetition,
    has_suspicious_code_sequences,
    has_suspicious_url_patterns,
    is_mostly_ascii_garbage,
)
from core.validators import SensitivityValidator, extract_keyword_arrays, parse_number

logger = logging.getLogger(__name__)

__version__ = APP_VERSION

_WORDS = re.compile(r'\b\w+\b', re.ASCII)


# =============================================================================
# OPTIONS
# =============================================================================

_TERM_LIST_FIELDS = ("support_keywords", "domains", "allowlist")


@dataclass(frozen=True)
class DetectionOptions:
    """
    Configuration for one detection call.

    Attributes:
        keywords: Site/stem terms; a string, a list of strings and/or
            term->weight mappings, or a mapping
        support_keywords: Corroborating terms (empty = built-in list)
        domains: Blocklisted domains/terms
        allowlist: Terms never counted as matches
        sensitivity_level: 1 (aggressive) .. 5 (strict)
        language: 'en', 'id', 'zh', 'vi', 'th' or 'all'
        include_analysis: Attach a DetectionAnalysis to results
        debug: Log pipeline stages at INFO instead of DEBUG
    """
    keywords: Any = tuple(DEFAULT_KEYWORDS)
    support_keywords: Tuple[str, ...] = ()
    domains: Tuple[str, ...] = ()
    allowlist: Tuple[str, ...] = ()
    sensitivity_level: int = DEFAULT_SENSITIVITY
    language: str = DEFAULT_LANGUAGE
    include_analysis: bool = False
    debug: bool = False
    detect_repetition: bool = True
    detect_url_patterns: bool = True
    detect_evasion_techniques: bool = True
    detect_contextual_indicators: bool = True
    extract_contact_info: bool = True

    @classmethod
    def field_names(cls) -> FrozenSet[str]:
        """Names of all option fields."""
        return frozenset(f.name for f in fields(cls))

    def merged(self, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "DetectionOptions":
        """
        Return a copy with caller values applied on top of this one.

        Unknown keys are ignored with a warning. None values are skipped.
        """
        values = dict(overrides or {})
        values.update(kwargs)

        known = self.field_names()
        changes: Dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                logger.warning(f"Ignoring unknown detection option '{key}'")
                continue
            if value is None:
                continue
            if key in _TERM_LIST_FIELDS:
                value = (value,) if isinstance(value, str) else tuple(value)
            changes[key] = value

        return replace(self, **changes) if changes else self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        data = asdict(self)
        for key in _TERM_LIST_FIELDS:
            data[key] = list(data[key])
        return data


OptionsLike = Union[DetectionOptions, Mapping[str, Any], None]


def _coerce_options(options: OptionsLike) -> DetectionOptions:
    if isinstance(options, DetectionOptions):
        return options
    return DetectionOptions().merged(options)


def build_options(
    language_pack: Optional[str] = None,
    base: OptionsLike = None,
    **explicit: Any,
) -> DetectionOptions:
    """
    Build options with precedence explicit fields > language pack > defaults.

    Args:
        language_pack: Language whose support keywords and domains seed
            the options ('all' combines every pack)
        base: Starting options (library defaults when omitted)
        **explicit: Option fields set by the caller

    Returns:
        Merged DetectionOptions
    """
    options = _coerce_options(base)

    if language_pack:
        pack = get_language_patterns(language_pack)
        seeded: Dict[str, Any] = {
            "support_keywords": pack["support_keywords"],
            "domains": pack["domains"],
        }
        if language_pack in SUPPORTED_LANGUAGES or language_pack == DEFAULT_LANGUAGE:
            seeded["language"] = language_pack
        options = options.merged(seeded)

    return options.merged(explicit)


def build_options_from_settings(settings: DetectorSettings) -> DetectionOptions:
    """Build options from saved settings (language pack < settings values)."""
    return build_options(language_pack=settings.language_pack, **settings.to_overrides())


# =============================================================================
# THRESHOLDS
# =============================================================================

@dataclass(frozen=True)
class ConfidenceThresholds:
    """Checkpoint cut-offs for each confidence tier."""
    low: float
    medium: float
    high: float


def confidence_thresholds(sensitivity_level: float) -> ConfidenceThresholds:
    """
    Derive tier thresholds from a sensitivity level.

    Monotonic (low <= medium <= high) for every level, the level is
    clamped into 1..5 first.
    """
    factor = max(MIN_SENSITIVITY, min(MAX_SENSITIVITY, sensitivity_level)) / 3
    return ConfidenceThresholds(
        low=max(0.45, 0.5 * factor),
        medium=max(0.9, 0.8 * factor),
        high=max(1.2, 2.5 * factor),
    )


def sensitivity_cap(sensitivity_level: float) -> int:
    """Upper bound of the checkpoint (level 1 -> 5 ... level 5 -> 1, <= 0 -> 0)."""
    level = max(0, min(MAX_SENSITIVITY, int(sensitivity_level)))
    return SENSITIVITY_CAPS[level]


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class DetectionAnalysis:
    """Every signal that fired during one detection, plus match details."""
    garbage_detected: bool = False
    repetition_detected: bool = False
    suspicious_url_detected: bool = False
    suspicious_code_sequences: bool = False
    evasion_techniques: List[str] = field(default_factory=list)
    evasion_score: float = 0.0
    contextual_indicators: List[str] = field(default_factory=list)
    contextual_score: float = 0.0
    contact_info: Optional[ContactInfo] = None
    contains_non_standard_chars: bool = False
    word_separation_detected: bool = False
    separated_numbers_detected: bool = False
    language_specific_matches: List[str] = field(default_factory=list)
    language_score: float = 0.0
    blocked_domain_detected: bool = False
    supporting_keywords: List[str] = field(default_factory=list)
    keyword_match_count: int = 0
    content_length_suspicious: bool = False
    long_avg_word_length: Optional[float] = None
    matched_terms: List[str] = field(default_factory=list)
    all_matches: List[str] = field(default_factory=list)
    content_metrics: Dict[str, float] = field(default_factory=dict)


@dataclass
class DetectionResult:
    """Outcome of a detection call."""
    is_gambling: bool
    confidence: str
    checkpoint: float
    details: str
    comment: Any
    analysis: Optional[DetectionAnalysis] = None

    @property
    def confidence_level(self) -> Confidence:
        """Confidence as an enum."""
        return Confidence(self.confidence)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for export."""
        data = asdict(self)
        if self.analysis is None:
            del data["analysis"]
        return data


def _too_short(text: Any) -> DetectionResult:
    return DetectionResult(
        is_gambling=False,
        confidence=Confidence.NONE.value,
        checkpoint=0,
        details=DETAILS_TOO_SHORT,
        comment=text,
    )


# =============================================================================
# PIPELINE
# =============================================================================

def build_support_keyword_list(
    support_keywords: Sequence[str], domains: FrozenSet[str]
) -> List[str]:
    """
    Resolve the support keyword list for one call.

    Caller lists that contain neither "wdp" nor "win" are extended with
    the built-in list (order kept, duplicates dropped). Blocklisted and
    blank entries are removed.
    """
    keyword_list = list(support_keywords) if support_keywords else list(DEFAULT_SUPPORT_KEYWORDS)

    if not support_keywords or not any(marker in support_keywords for marker in SUPPORT_KEYWORD_MARKERS):
        keyword_list = list(dict.fromkeys(keyword_list + DEFAULT_SUPPORT_KEYWORDS))

    return [
        word for word in keyword_list
        if isinstance(word, str) and word.strip() and word.lower() not in domains
    ]


@dataclass
class _DetectionRun:
    """Per-call inputs and intermediate texts shared by the stages."""
    options: DetectionOptions
    text: str
    raw_text: str
    terms: List[str]
    weights: List[float]
    support_keywords: List[str]
    domains: FrozenSet[str]
    allowlist: FrozenSet[str]
    cap: int
    log: Callable[..., None]
    analysis: DetectionAnalysis = field(default_factory=DetectionAnalysis)
    reconstructed: str = ""
    merged: str = ""
    detected: bool = False


def _score_signals(checkpoint: float, run: _DetectionRun) -> float:
    options, raw_text, analysis = run.options, run.raw_text, run.analysis

    if is_mostly_ascii_garbage(raw_text, GARBAGE_THRESHOLD):
        checkpoint += GARBAGE_WEIGHT
        analysis.garbage_detected = True
        run.log("ASCII garbage detected in text")

    if options.detect_repetition and has_abnormal_repetition(raw_text):
        checkpoint += REPETITION_WEIGHT
        analysis.repetition_detected = True
        run.log("Abnormal repetition detected in text")

    if options.detect_url_patterns and has_suspicious_url_patterns(raw_text):
        checkpoint += URL_PATTERN_WEIGHT
        analysis.suspicious_url_detected = True
        run.log("Suspicious URL pattern detected")

    if has_suspicious_code_sequences(raw_text):
        checkpoint += CODE_SEQUENCE_WEIGHT
        analysis.suspicious_code_sequences = True
        run.log("Suspicious code sequences or emojis detected")

    if options.detect_evasion_techniques:
        evasion = analyze_evasion_techniques(raw_text)
        if evasion.score > 0:
            checkpoint += evasion.score
            analysis.evasion_techniques = evasion.techniques
            analysis.evasion_score = evasion.score
            run.log(f"Evasion techniques detected: {evasion.techniques}")

    if options.detect_contextual_indicators:
        contextual = detect_contextual_gambling_indicators(raw_text)
        if contextual.score > 0:
            checkpoint += contextual.score
            analysis.contextual_indicators = contextual.reasons
            analysis.contextual_score = contextual.score
            run.log(f"Contextual gambling indicators detected: {contextual.reasons}")

    if options.extract_contact_info:
        contact_info = extract_contact_infos(raw_text)
        if contact_info.found:
            checkpoint += CONTACT_INFO_WEIGHT
            analysis.contact_info = contact_info
            run.log(f"Contact information detected: {contact_info.types}")

    return checkpoint


def _score_normalization(checkpoint: float, run: _DetectionRun) -> float:
    cleaned = clean_text(run.raw_text)
    if cleaned != run.raw_text:
        checkpoint += NON_STANDARD_CHARS_WEIGHT
        run.analysis.contains_non_standard_chars = True
    run.log(f"After cleaning: {cleaned!r}")

    run.reconstructed = reconstruct_separated_words(cleaned)
    if run.reconstructed != cleaned:
        checkpoint += WORD_SEPARATION_WEIGHT
        run.analysis.word_separation_detected = True
        run.log(f"After reconstruction: {run.reconstructed!r}")

    run.merged = merge_text_with_trailing_numbers(run.reconstructed)
    if run.merged != run.reconstructed:
        checkpoint += MERGED_NUMBERS_WEIGHT
        run.analysis.separated_numbers_detected = True
    run.log(f"After merging numbers: {run.merged!r}")

    return checkpoint


def _score_language(checkpoint: float, run: _DetectionRun) -> float:
    language = detect_language_specific_patterns(run.merged, run.options.language, run.allowlist)
    if language.score > 0:
        checkpoint += language.score
        run.analysis.language_specific_matches = language.matches
        run.analysis.language_score = language.score
        run.log(f"Language-specific patterns detected: {language.matches}")
    return checkpoint


def _domain_matches(blocked: str, haystacks: Sequence[str]) -> bool:
    pattern = re.compile(rf'\b(?:https?://)?(?:www\.)?{re.escape(blocked)}\b', re.IGNORECASE | re.ASCII)
    return any(blocked in text or pattern.search(text) for text in haystacks)


def _score_blocked_domains(checkpoint: float, run: _DetectionRun) -> float:
    lower = run.merged.lower()
    haystacks = (lower, unpad_periods(lower))

    if any(blocked.strip() and _domain_matches(blocked, haystacks) for blocked in run.domains):
        checkpoint += BLOCKED_DOMAIN_WEIGHT
        run.analysis.blocked_domain_detected = True
        run.log("Domain in blocklist detected, increasing checkpoint")
    return checkpoint


def _score_keyword_fuzzy(checkpoint: float, run: _DetectionRun) -> float:
    """
    Small boost when an obfuscated comment contains a near-miss keyword.

    Scored the same whether or not the caller asked for the analysis.
    """
    analysis = run.analysis
    obfuscated = (
        analysis.garbage_detected
        or analysis.word_separation_detected
        or analysis.contains_non_standard_chars
    )
    if not obfuscated:
        return checkpoint

    for match in fuzzy_search(run.terms, run.reconstructed):
        if match.matched_with in run.terms:
            weight = run.weights[run.terms.index(match.matched_with)]
            increment = 0.06 if weight >= 1 else weight
            checkpoint += increment
            run.log(f"Adding {increment} from fuzzy match of '{match.matched_with}'")
            break
    return checkpoint


def _fuzzy_corrected_text(run: _DetectionRun) -> str:
    """Input with the first confident keyword typo corrected."""
    for match in fuzzy_search(run.terms, run.text):
        if match.score > 0.6:
            run.log(f"Applied fuzzy replacement: '{match.matched_word}' -> '{match.matched_with}'")
            return run.text.replace(match.matched_word, match.matched_with, 1)
    return run.text


def _score_patterns(checkpoint: float, run: _DetectionRun) -> float:
    context = PatternContext(
        keywords=tuple(run.terms),
        support_keywords=tuple(run.support_keywords),
        domains=run.domains,
        allowlist=run.allowlist,
        sensitivity_cap=run.cap,
        written_text=_fuzzy_corrected_text(run),
        debug=run.options.debug,
    )
    outcome = search_patterns(checkpoint, run.merged, context)

    run.detected = outcome.detected
    run.analysis.matched_terms = outcome.matched_terms
    run.analysis.all_matches = list(dict.fromkeys(outcome.all_matches))
    run.analysis.supporting_keywords = outcome.supporting_keywords
    run.analysis.keyword_match_count = outcome.keyword_match_count
    return outcome.checkpoint


def _score_content_metrics(checkpoint: float, run: _DetectionRun) -> float:
    word_count = len(_WORDS.findall(run.raw_text))
    char_count = len(run.raw_text)
    avg_word_length = char_count / word_count if word_count > 0 else 0

    if 5 <= word_count <= 50 or 30 <= char_count <= 500:
        checkpoint += SPAM_LENGTH_WEIGHT
        run.analysis.content_length_suspicious = True
        run.log("Content length matches gambling spam profile")

    if avg_word_length > LONG_AVG_WORD_LENGTH:
        checkpoint += LONG_WORD_WEIGHT
        run.analysis.long_avg_word_length = avg_word_length
        run.log(f"Unusually long average word length: {avg_word_length:.2f}")

    run.analysis.content_metrics = {
        "word_count": word_count,
        "char_count": char_count,
        "avg_word_length": round(avg_word_length, 2),
    }
    return checkpoint


# Order matters: later stages gate on the checkpoint built by earlier ones
SCORING_STAGES: Tuple[Callable[[float, _DetectionRun], float], ...] = (
    _score_signals,
    _score_normalization,
    _score_language,
    _score_blocked_domains,
    _score_keyword_fuzzy,
    _score_patterns,
    _score_content_metrics,
)


def _resolve_sensitivity(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    level, warning = SensitivityValidator.parse(value)
    if warning:
        logger.warning(warning)
    return level


def _classify(checkpoint: float, run: _DetectionRun, thresholds: ConfidenceThresholds) -> Tuple[Confidence, str]:
    if run.detected or checkpoint >= thresholds.low:
        if checkpoint >= thresholds.high:
            return Confidence.HIGH, DETAILS_HIGH
        if checkpoint >= thresholds.medium:
            return Confidence.MEDIUM, DETAILS_MEDIUM
        return Confidence.LOW, DETAILS_LOW
    if run.analysis.garbage_detected:
        return Confidence.MEDIUM, DETAILS_GARBAGE
    return Confidence.NONE, DETAILS_NONE


# =============================================================================
# PUBLIC API
# =============================================================================

def detect(text: Any, options: OptionsLike = None, **overrides: Any) -> DetectionResult:
    """
    Analyze one text for gambling promotion.

    Args:
        text: Text to analyze
        options: DetectionOptions or a mapping of option fields
        **overrides: Option fields applied on top of ``options``

    Returns:
        DetectionResult; ``comment`` is always the input as given
    """
    options = _coerce_options(options).merged(overrides)

    if not isinstance(text, str) or len(text.strip()) < 2:
        return _too_short(text)

    level = _resolve_sensitivity(options.sensitivity_level)
    thresholds = confidence_thresholds(level)
    domains = frozenset(d.lower() for d in options.domains if isinstance(d, str))
    terms, weights = extract_keyword_arrays(options.keywords)

    run = _DetectionRun(
        options=options,
        text=text,
        raw_text=normalize_input(text),
        terms=terms,
        weights=weights,
        support_keywords=build_support_keyword_list(options.support_keywords, domains),
        domains=domains,
        allowlist=frozenset(a.lower() for a in options.allowlist if isinstance(a, str)),
        cap=sensitivity_cap(level),
        log=logger.info if options.debug else logger.debug,
    )

    checkpoint = 0.0
    for stage in SCORING_STAGES:
        checkpoint = stage(checkpoint, run)

    checkpoint = parse_number(checkpoint, run.cap)
    confidence, details = _classify(checkpoint, run, thresholds)

    result = DetectionResult(
        is_gambling=confidence is not Confidence.NONE,
        confidence=confidence.value,
        checkpoint=round(checkpoint, 2),
        details=details,
        comment=text,
        analysis=run.analysis if options.include_analysis else None,
    )
    run.log(f"Final checkpoint {checkpoint:.2f}: {details}")
    return result


def detect_batch(texts: Any, options: OptionsLike = None, **overrides: Any) -> List[DetectionResult]:
    """
    Analyze many texts with the same options.

    A single non-list value is analyzed as ``str(texts)``.
    """
    options = _coerce_options(options).merged(overrides)

    if not isinstance(texts, (list, tuple)):
        return [detect(str(texts), options)]

    return [detect(text, options) for text in texts]


def is_gambling(text: Any, options: OptionsLike = None, **overrides: Any) -> bool:
    """Check if text is classified as gambling promotion."""
    return detect(text, options, **overrides).is_gambling


def get_language_patterns(language: str = DEFAULT_LANGUAGE) -> Dict[str, List[str]]:
    """
    Get support keywords and domains for a language.

    Args:
        language: 'en', 'id', 'vi', 'th' or 'all' (combined, duplicates
            removed); unknown languages get the English pack

    Returns:
        Dict with 'support_keywords' and 'domains' lists
    """
    if language == DEFAULT_LANGUAGE:
        support: List[str] = []
        domains: List[str] = []
        for pack in LANGUAGE_PACKS.values():
            support.extend(pack["support_keywords"])
            domains.extend(pack["domains"])
        return {
            "support_keywords": list(dict.fromkeys(support)),
            "domains": list(dict.fromkeys(domains)),
        }

    pack = LANGUAGE_PACKS.get(language, LANGUAGE_PACKS["en"])
    return {
        "support_keywords": list(pack["support_keywords"]),
        "domains": list(pack["domains"]),
    }


class GamblingDetector:
    """
    Detector bound to default options.

    Usage:
        detector = GamblingDetector({"sensitivity_level": 2})
        result = detector.detect("Z.e.u.s g.a.c.o.r")
        strict = detector.detect(text, {"sensitivity_level": 5})
    """

    version = APP_VERSION

    def __init__(self, default_options: OptionsLike = None):
        self.default_options = _coerce_options(default_options)

    def detect(self, text: Any, overrides: Optional[Mapping[str, Any]] = None) -> DetectionResult:
        """Analyze text with per-call overrides on top of the defaults."""
        return detect(text, self.default_options.merged(overrides))

    def detect_batch(self, texts: Any, overrides: Optional[Mapping[str, Any]] = None) -> List[DetectionResult]:
        """Analyze many texts with per-call overrides on top of the defaults."""
        return detect_batch(texts, self.default_options.merged(overrides))

    def load_patterns(self, source: Any) -> PatternSource:
        """Load a pattern source (file path, term list or mapping)."""
        return load_patterns(source)

    def with_patterns(self, source: Any) -> "GamblingDetector":
        """Return a detector whose defaults include a loaded pattern source."""
        patterns = source if isinstance(source, PatternSource) else load_patterns(source)
        return GamblingDetector(self.default_options.merged(patterns.to_overrides()))


def create_detector(default_options: OptionsLike = None) -> GamblingDetector:
    """
    Factory function to create a detector with default options.

    Args:
        default_options: DetectionOptions or mapping of option fields

    Returns:
        Configured GamblingDetector instance
    """
    return GamblingDetector(default_options)


__all__ = [
    "ConfidenceThresholds",
    "DetectionAnalysis",
    "DetectionOptions",
    "DetectionResult",
    "GamblingDetector",
    "PatternSource",
    "build_options",
    "build_options_from_settings",
    "build_support_keyword_list",
    "confidence_thresholds",
    "create_detector",
    "detect",
    "detect_batch",
    "get_language_patterns",
    "is_gambling",
    "load_patterns",
    "sensitivity_cap",
]
