"""
Settings management and pattern source loading.

Detector settings are persisted as JSON so the batch scanner can be
re-run with the same keyword lists and sensitivity. Pattern sources
(keyword/domain/allowlist files) can be JSON objects of arrays or plain
newline-separated lists.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from core.constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_SENSITIVITY,
    SETTINGS_FILE,
)
from core.validators import LanguageValidator, SensitivityValidator, TermListParser

logger = logging.getLogger(__name__)


# =============================================================================
# PATTERN SOURCES
# =============================================================================

PATTERN_CATEGORIES = ("keywords", "domains", "patterns", "allowlist")


@dataclass
class PatternSource:
    """Term lists loaded from a pattern file, list or mapping."""
    keywords: List[str] = field(default_factory=list)
    domains: List[str] = field(default_factory=list)
    patterns: List[str] = field(default_factory=list)
    allowlist: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, category) for category in PATTERN_CATEGORIES)

    def to_overrides(self) -> Dict[str, List[str]]:
        """
        Convert to detection option overrides.

        Extra patterns are treated as additional keywords. Empty
        categories are left out so they don't replace existing values.
        """
        overrides: Dict[str, List[str]] = {}
        keywords = self.keywords + [p for p in self.patterns if p not in self.keywords]
        if keywords:
            overrides["keywords"] = keywords
        if self.domains:
            overrides["domains"] = list(self.domains)
        if self.allowlist:
            overrides["allowlist"] = list(self.allowlist)
        return overrides

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PatternSource":
        """Create from a mapping, keeping only list-valued known categories."""
        source = cls()
        for category in PATTERN_CATEGORIES:
            value = data.get(category)
            if isinstance(value, list):
                setattr(source, category, list(value))
        return source


def _parse_plain_list(text: str) -> List[str]:
    return [
        line.strip() for line in text.split('\n')
        if line.strip() and not line.strip().startswith('#')
    ]


def load_patterns(source: Union[str, Path, List[str], Mapping[str, Any], None]) -> PatternSource:
    """
    Load pattern categories from a file, a term list or a mapping.

    Args:
        source: Path to a ``.json`` file (object of arrays) or a plain
            newline-separated keyword file ('#' comments skipped), a list
            of keywords, or a mapping of category -> list

    Returns:
        PatternSource; empty when the source cannot be read or parsed
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            logger.error(f"Error loading patterns from {path}: {e}")
            return PatternSource()

        if path.suffix.lower() == '.json':
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                logger.error(f"Error parsing pattern JSON {path}: {e}")
                return PatternSource()
            if not isinstance(data, dict):
                logger.error(f"Pattern JSON {path} must contain an object of arrays")
                return PatternSource()
            return PatternSource.from_mapping(data)

        return PatternSource(keywords=_parse_plain_list(text))

    if isinstance(source, (list, tuple)):
        return PatternSource(keywords=list(source))

    if isinstance(source, Mapping):
        return PatternSource.from_mapping(source)

    logger.warning(f"Unsupported pattern source: {type(source).__name__}")
    return PatternSource()


# =============================================================================
# DETECTOR SETTINGS
# =============================================================================

@dataclass
class DetectorSettings:
    """Persisted detector settings."""

    # Scoring
    sensitivity_level: int = DEFAULT_SENSITIVITY
    language: str = DEFAULT_LANGUAGE
    language_pack: Optional[str] = None  # Seed support keywords/domains from a pack

    # Optional detectors
    detect_repetition: bool = True
    detect_url_patterns: bool = True
    detect_evasion_techniques: bool = True
    detect_contextual_indicators: bool = True
    extract_contact_info: bool = True
    include_analysis: bool = False

    # Term lists (newline or comma separated, empty = built-in defaults)
    keywords: str = ""
    support_keywords: str = ""
    domains: str = ""
    allowlist: str = ""

    # Extra pattern file merged on top of the lists above
    patterns_file: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        data = asdict(self)
        # Remove None values for cleaner JSON
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict) -> "DetectorSettings":
        """Create settings from dictionary."""
        # Filter to only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        unknown = sorted(set(data) - known_fields)
        if unknown:
            logger.debug(f"Ignoring unknown settings: {unknown}")
        filtered = {k: v for k, v in data.items() if k in known_fields}
        settings = cls(**filtered)

        settings.sensitivity_level, warning = SensitivityValidator.parse(settings.sensitivity_level)
        if warning:
            logger.warning(warning)
        settings.language, warning = LanguageValidator.parse(settings.language)
        if warning:
            logger.warning(warning)
        return settings

    def to_overrides(self) -> Dict[str, Any]:
        """Option fields set by these settings (empty term lists omitted)."""
        overrides: Dict[str, Any] = {
            "sensitivity_level": self.sensitivity_level,
            "language": self.language,
            "detect_repetition": self.detect_repetition,
            "detect_url_patterns": self.detect_url_patterns,
            "detect_evasion_techniques": self.detect_evasion_techniques,
            "detect_contextual_indicators": self.detect_contextual_indicators,
            "extract_contact_info": self.extract_contact_info,
            "include_analysis": self.include_analysis,
        }
        for name in ("keywords", "support_keywords", "domains", "allowlist"):
            terms = TermListParser.parse(getattr(self, name))
            if terms:
                overrides[name] = terms

        if self.patterns_file:
            patterns = load_patterns(self.patterns_file)
            for name, terms in patterns.to_overrides().items():
                existing = overrides.get(name, [])
                overrides[name] = existing + [t for t in terms if t not in existing]

        return overrides


class SettingsManager:
    """
    Loads and saves detector settings as JSON.

    Usage:
        manager = SettingsManager()
        settings = manager.load()

        settings.sensitivity_level = 2
        settings.allowlist = "poker"

        manager.save(settings)
    """

    def __init__(self, settings_file: Optional[str] = None):
        """
        Initialize the settings manager.

        Args:
            settings_file: Path to settings file. Defaults to SETTINGS_FILE constant.
        """
        self.settings_file = Path(settings_file or SETTINGS_FILE)

    def load(self) -> DetectorSettings:
        """
        Load settings from file.

        Returns:
            DetectorSettings with loaded values, or defaults if no settings exist
        """
        settings = DetectorSettings()

        if self.settings_file.exists():
            try:
                with open(self.settings_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    settings = DetectorSettings.from_dict(data)
                else:
                    logger.error(f"Settings file {self.settings_file} must contain an object")
            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse settings file: {e}")
            except Exception as e:
                logger.error(f"Failed to load settings: {e}")

        return settings

    def save(self, settings: DetectorSettings) -> bool:
        """
        Save settings to file.

        Args:
            settings: DetectorSettings to save

        Returns:
            True if saved successfully
        """
        try:
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
            return True

        except Exception as e:
            logger.error(f"Failed to save settings: {e}")
            return False
