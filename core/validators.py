"""
Input validation utilities.

Parses keyword weights, numeric values, sensitivity levels, languages and
term lists coming from callers, settings files and the command line.
Parsers never raise: invalid input falls back to a safe default, with a
warning message where the caller may want to show one.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from core.constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_SENSITIVITY,
    MAX_SENSITIVITY,
    MIN_SENSITIVITY,
    SUPPORTED_LANGUAGES,
    SensitivityLevel,
)

logger = logging.getLogger(__name__)

# Leading float prefix, "0.5x" -> 0.5
_FLOAT_PREFIX = re.compile(r'^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


@dataclass
class ValidationResult:
    """Result of a validation check."""
    is_valid: bool
    error_message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.is_valid


# =============================================================================
# NUMBERS / KEYWORD WEIGHTS
# =============================================================================

def parse_number(value: Any, maximum: float) -> float:
    """
    Parse a value into a number within ``[0, maximum]``.

    Args:
        value: Number or numeric string
        maximum: Upper bound

    Returns:
        Parsed number; 0 for "-", non-numeric input or negatives
    """
    if value is None or value == "-" or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip() or 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number or number < 0:  # NaN or negative
        return 0
    return min(number, maximum)


def _weight_from_number(number: float) -> float:
    if number > 5:
        return 1
    if number == 4:
        return 0.4
    if 0 <= number <= 1:
        return number
    return 1


def _keyword_weight(value: Any) -> float:
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (int, float)):
        return _weight_from_number(value)
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        return _weight_from_number(float(match.group(0))) if match else 1
    if value is None:
        return 0
    return 1


def extract_keyword_arrays(keywords: Any) -> Tuple[List[str], List[float]]:
    """
    Split keyword input into parallel term and weight lists.

    Accepts a single string, a mapping of term -> weight, or a list mixing
    strings and such mappings. Weights: booleans become 1/0, numbers above
    5 become 1, exactly 4 becomes 0.4, values in [0, 1] are kept and
    anything else becomes 1; numeric strings follow the same rule; None
    becomes 0. Blank strings and non-string keys are skipped.

    Args:
        keywords: Keyword input in any supported shape

    Returns:
        Tuple of (terms, weights)
    """
    terms: List[str] = []
    weights: List[float] = []

    def add_entry(key: Any, value: Any) -> None:
        if not key or not isinstance(key, str):
            return
        terms.append(key)
        weights.append(_keyword_weight(value))

    if keywords is None:
        return terms, weights

    if isinstance(keywords, str):
        if keywords.strip():
            terms.append(keywords)
            weights.append(1)
    elif isinstance(keywords, dict):
        for key, value in keywords.items():
            add_entry(key, value)
    elif isinstance(keywords, (list, tuple)):
        for item in keywords:
            if isinstance(item, str):
                if item.strip():
                    terms.append(item)
                    weights.append(1)
            elif isinstance(item, dict):
                for key, value in item.items():
                    add_entry(key, value)
            else:
                logger.warning(f"Skipping unsupported keyword entry: {item!r}")
    else:
        logger.warning(f"Unsupported keyword input type: {type(keywords).__name__}")

    return terms, weights


# =============================================================================
# SENSITIVITY / LANGUAGE
# =============================================================================

class SensitivityValidator:
    """Validates sensitivity levels (1 = aggressive ... 5 = strict)."""

    @classmethod
    def validate(cls, value: Any) -> ValidationResult:
        """
        Validate a sensitivity level.

        Args:
            value: Level as int, numeric string or display name

        Returns:
            ValidationResult with format validation
        """
        _, warning = cls.parse(value)
        if warning:
            return ValidationResult(False, warning)
        return ValidationResult(True)

    @classmethod
    def parse(cls, value: Any) -> Tuple[int, Optional[str]]:
        """
        Parse and validate a sensitivity level.

        Args:
            value: Level as int, numeric string or display name ("Strict")

        Returns:
            Tuple of (parsed_level, warning_message)
            Out-of-range values are clamped, invalid values use the default
        """
        if isinstance(value, SensitivityLevel):
            return value.value, None
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_SENSITIVITY, None

        if isinstance(value, str):
            text = value.strip()
            if text.capitalize() in {level.display_name for level in SensitivityLevel}:
                return SensitivityLevel.from_display_name(text.capitalize()).value, None
            value = text

        try:
            parsed = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_SENSITIVITY, f"Invalid sensitivity '{value}', using {DEFAULT_SENSITIVITY}"

        if parsed < MIN_SENSITIVITY:
            return MIN_SENSITIVITY, f"Sensitivity below {MIN_SENSITIVITY}, using {MIN_SENSITIVITY}"
        if parsed > MAX_SENSITIVITY:
            return MAX_SENSITIVITY, f"Sensitivity above {MAX_SENSITIVITY}, using {MAX_SENSITIVITY}"
        return parsed, None


class LanguageValidator:
    """Validates language codes."""

    @classmethod
    def parse(cls, value: Optional[str]) -> Tuple[str, Optional[str]]:
        """
        Parse a language code.

        Returns:
            Tuple of (language, warning_message)
            Unknown codes fall back to "all"
        """
        if not value or not value.strip():
            return DEFAULT_LANGUAGE, None

        language = value.strip().lower()
        if language == DEFAULT_LANGUAGE or language in SUPPORTED_LANGUAGES:
            return language, None
        return DEFAULT_LANGUAGE, f"Unsupported language '{value}', using '{DEFAULT_LANGUAGE}'"


# =============================================================================
# TERM LISTS
# =============================================================================

class TermListParser:
    """Parses comma- or newline-separated term lists."""

    _separators = re.compile(r'[,\n]')

    @classmethod
    def parse(cls, text: Optional[str]) -> List[str]:
        """
        Parse a term list into a list of strings.

        Args:
            text: Terms separated by commas or newlines; lines starting
                with '#' are comments

        Returns:
            List of cleaned, non-empty terms
        """
        if not text or not text.strip():
            return []

        terms = []
        for line in text.splitlines():
            if line.strip().startswith('#'):
                continue
            for term in cls._separators.split(line):
                cleaned = term.strip()
                if cleaned:
                    terms.append(cleaned)
        return terms

    @classmethod
    def to_text(cls, terms: List[str]) -> str:
        """Join terms back into newline-separated text."""
        return "\n".join(terms)
