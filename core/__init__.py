"""
Core modules for the gambling promotion detector.

This package contains the normalizer, signal detectors, fuzzy matcher,
pattern engine, configuration and validation helpers.
"""

from core.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_KEYWORDS,
    DEFAULT_SUPPORT_KEYWORDS,
    LANGUAGE_PACKS,
    SUPPORTED_LANGUAGES,
    Confidence,
    SensitivityLevel,
)
from core.fuzzy import FuzzyMatch, fuzzy_search
from core.patterns import PatternContext, PatternSearchOutcome, build_pattern_families, search_patterns
from core.signals import ContactInfo, ContextualAnalysis, EvasionAnalysis, LanguageAnalysis
from core.validators import (
    ValidationResult,
    SensitivityValidator,
    LanguageValidator,
    TermListParser,
    extract_keyword_arrays,
    parse_number,
)
from core.settings import SettingsManager, DetectorSettings, PatternSource, load_patterns

__all__ = [
    # Constants
    "APP_NAME",
    "APP_VERSION",
    "DEFAULT_KEYWORDS",
    "DEFAULT_SUPPORT_KEYWORDS",
    "LANGUAGE_PACKS",
    "SUPPORTED_LANGUAGES",
    # Enums
    "Confidence",
    "SensitivityLevel",
    # Matching
    "FuzzyMatch",
    "fuzzy_search",
    "PatternContext",
    "PatternSearchOutcome",
    "build_pattern_families",
    "search_patterns",
    # Signal results
    "ContactInfo",
    "ContextualAnalysis",
    "EvasionAnalysis",
    "LanguageAnalysis",
    # Validators
    "ValidationResult",
    "SensitivityValidator",
    "LanguageValidator",
    "TermListParser",
    "extract_keyword_arrays",
    "parse_number",
    # Settings
    "SettingsManager",
    "DetectorSettings",
    "PatternSource",
    "load_patterns",
]
