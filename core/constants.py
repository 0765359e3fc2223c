"""
Application constants and configuration values.

Centralized location for default keyword lists, language packs, score
presets and other magic numbers used by the detector.
"""

from enum import Enum
from typing import Dict, List


# =============================================================================
# APPLICATION METADATA
# =============================================================================

APP_NAME = "GB Detector"
APP_VERSION = "1.1.2"
APP_DESCRIPTION = "Detect gambling promotion (judol) content in comments"


# =============================================================================
# DEFAULT KEYWORDS
# =============================================================================

# Primary pattern terms (site names / gambling stems)
DEFAULT_KEYWORDS: List[str] = [
    "slot", "casino", "jack", "zeus", "scatter", "toto", "judol", "jodol",
    "poker", "roulette", "betting", "gamble", "joker",
]

# Secondary terms that corroborate a pattern match
DEFAULT_SUPPORT_KEYWORDS: List[str] = [
    # English gambling terminology
    "wdp", "wd", "win", "happy", "joyful", "rich", "trustworthy", "lucky", "trust",
    "definitely get", "jp", "jackpot", "proud", "harvest", "smart", "gambli", "great",
    "money back", "trusted", "beautiful", "harvest", "fishing", "bet", "put", "bonus",
    "dp", "pay", "enough", "game", "play", "happy", "deposit", "withdraw", "min", "max",
    "winning", "fortune", "luck", "lucky", "prize", "reward", "vip", "member", "free",
    "register", "sign", "join", "profit", "earn", "money", "cash", "credit", "debit",
    "join", "login", "official", "original", "genuine", "link", "alternative",
    "customer", "service", "provider", "welcome", "promotion", "online", "platform",
    "app", "application", "alternati", "scatter", "wager", "baccarat", "blackjack",
    "dice", "spin", "multiplier", "odds",
    # Indonesian gambling terminology
    "menang", "senang", "gacor", "gembira", "kaya", "pasti dapat", "bangga", "panen",
    "beruntung", "untung", "mancing", "uang kembali", "dipercaya", "amanah", "terpercaya",
    "cantik", "pancing", "judi", "taruhan", "pasang", "togel", "hadiah", "bonus",
    "register", "masuk", "dana", "jamin", "aman", "situs", "resmi", "asli", "maxwin",
    "gampang", "bocoran", "prediksi", "jitu", "akurat", "terpercaya", "terbaik",
    "rekomendasi", "main", "permainan", "daftar", "minimal", "maksimal", "pasaran",
    "nomor", "petaruh", "peluang", "kesempatan", "keberuntungan", "ratusan", "ribuan",
    "jutaan", "hadiah", "alternatif",
]

# Caller support lists containing either marker replace the defaults outright
SUPPORT_KEYWORD_MARKERS = ("wdp", "win")


# =============================================================================
# LANGUAGE PACKS
# =============================================================================

SUPPORTED_LANGUAGES = ("en", "id", "zh", "vi", "th")
DEFAULT_LANGUAGE = "all"

LANGUAGE_PACKS: Dict[str, Dict[str, List[str]]] = {
    "en": {
        "support_keywords": [
            "bet", "casino", "gambling", "jackpot", "poker", "slot", "win", "deposit",
            "bonus", "spin", "play", "vip", "fortune", "lucky", "prize", "free",
        ],
        "domains": [
            "bet", "casino", "gambling", "play", "game", "win", "luck", "fortune", "vegas",
        ],
    },
    "id": {
        "support_keywords": [
            "judi", "slot", "togel", "maxwin", "gacor", "menang", "jackpot", "deposit",
            "bonus", "daftar", "situs", "link", "alternatif", "terpercaya", "terbaik", "resmi",
        ],
        "domains": [
            "slot", "togel", "judi", "bet", "toto", "game", "win", "gacor", "maxwin", "untung",
        ],
    },
    "vi": {
        "support_keywords": [
            "cá cược", "đánh bạc", "sòng bạc", "khe", "xổ số", "thắng", "tiền thưởng",
            "quay miễn phí", "đặt cược", "may mắn", "đăng ký", "người chơi", "vip",
            " ca cuoc ", " danh bac ", " song bac ", " khe ", " xo so ", " thang ",
            " tien thuong ", " quay mien phi ", " dat cuoc ", " may man ", " dang ky ",
            " nguoi choi ",
        ],
        "domains": [
            "casino", "bet", "win", "slot", "game", "lucky", "vip", "play", "cược", "thắng",
        ],
    },
    "th": {
        "support_keywords": [
            "การพนัน", "คาสิโน", "สล็อต", "พนัน", "เดิมพัน", "แทง", "โบนัส", "ฟรีสปิน",
            "ถอนเงิน", "ฝากเงิน", "สมัคร", "รับโบนัส", "โชคดี", "ชนะ", "เล่น",
        ],
        "domains": [
            "คาสิโน", "สล็อต", "พนัน", "เดิมพัน", "แทง", "โบนัส", "ชนะ", "เล่น", "casino", "bet",
        ],
    },
}


# =============================================================================
# SCORING CONFIGURATION
# =============================================================================

# Fixed checkpoint increments per signal
GARBAGE_WEIGHT = 0.4
REPETITION_WEIGHT = 0.5
URL_PATTERN_WEIGHT = 0.7
CODE_SEQUENCE_WEIGHT = 0.3
CONTACT_INFO_WEIGHT = 0.4
NON_STANDARD_CHARS_WEIGHT = 0.3
WORD_SEPARATION_WEIGHT = 0.3
MERGED_NUMBERS_WEIGHT = -0.3
BLOCKED_DOMAIN_WEIGHT = 0.57
SPAM_LENGTH_WEIGHT = 0.2
LONG_WORD_WEIGHT = 0.3

GARBAGE_THRESHOLD = 0.45
LONG_AVG_WORD_LENGTH = 12

# Reversed sensitivity scale: level -> checkpoint cap
SENSITIVITY_CAPS: Dict[int, int] = {0: 0, 1: 5, 2: 4, 3: 3, 4: 2, 5: 1}

MIN_SENSITIVITY = 1
MAX_SENSITIVITY = 5
DEFAULT_SENSITIVITY = 3


# =============================================================================
# ENUMS
# =============================================================================

class Confidence(Enum):
    """Confidence tier of a detection result."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SensitivityLevel(Enum):
    """Preset sensitivity levels (lower = more permissive, higher = stricter)."""
    AGGRESSIVE = 1   # Catch more, risks false positives
    ELEVATED = 2
    MODERATE = 3     # Balanced (default)
    CAUTIOUS = 4
    STRICT = 5       # Only obvious promotion

    @classmethod
    def from_display_name(cls, name: str) -> "SensitivityLevel":
        """Convert display name to enum value."""
        mapping = {
            "Aggressive": cls.AGGRESSIVE,
            "Elevated": cls.ELEVATED,
            "Moderate": cls.MODERATE,
            "Cautious": cls.CAUTIOUS,
            "Strict": cls.STRICT,
        }
        return mapping.get(name, cls.MODERATE)

    @property
    def display_name(self) -> str:
        """Get human-readable display name."""
        return self.name.capitalize()


# =============================================================================
# RESULT MESSAGES
# =============================================================================

DETAILS_TOO_SHORT = "Text too short for analysis"
DETAILS_NONE = "No gambling content detected"
DETAILS_HIGH = "✅ Gambling content detected with high confidence"
DETAILS_MEDIUM = "✅ Gambling content likely detected"
DETAILS_LOW = "⚠️ Possible gambling content (manual review recommended)"
DETAILS_GARBAGE = "⚠️ Suspicious content detected (excessive symbol usage)"


# =============================================================================
# SETTINGS / REPORTING
# =============================================================================

SETTINGS_FILE = "detector_settings.json"
DEFAULT_REPORT_FILE = "gambling_report.csv"
DEFAULT_TEXT_COLUMN = "Comment Text"
