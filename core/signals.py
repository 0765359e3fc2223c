"""
Independent signal checks for gambling promotion.

Each detector looks at one aspect of a comment (symbol noise, repetition,
URLs, emoji, evasion tricks, contextual phrasing, contact details,
language-specific vocabulary). They never raise: unexpected input yields
a negative result so the scoring pipeline can carry on.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Tuple

from core.constants import SUPPORTED_LANGUAGES
from core.normalizer import has_separated_words

logger = logging.getLogger(__name__)

_AI = re.IGNORECASE | re.ASCII
# Vietnamese vocabulary: Unicode case folding ("Đ"/"đ") and spacing (NBSP)
_UI = re.IGNORECASE


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class EvasionAnalysis:
    """Evasion techniques found in a text."""
    score: float = 0.0
    techniques: List[str] = field(default_factory=list)


@dataclass
class ContextualAnalysis:
    """Contextual gambling phrasing found in a text."""
    score: float = 0.0
    reasons: List[str] = field(default_factory=list)


@dataclass
class LanguageAnalysis:
    """Language-specific vocabulary hits."""
    score: float = 0.0
    matches: List[str] = field(default_factory=list)


@dataclass
class ContactInfo:
    """Contact details extracted from a text."""
    found: bool = False
    types: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary for export."""
        return {"found": self.found, "types": list(self.types), "values": list(self.values)}


# =============================================================================
# GARBAGE / REPETITION
# =============================================================================

_ASCII_GARBAGE = re.compile(r'[^a-zA-Z0-9\s.,!?]', re.ASCII)
_REPEATED_CHARS = re.compile(r'(.)\1{3,}')
_WORDS = re.compile(r'\b\w+\b', re.ASCII)


def is_mostly_ascii_garbage(text: str, threshold: float = 0.45) -> bool:
    """
    Check if text is mostly symbols outside a basic alphanumeric set.

    Args:
        text: Text to evaluate
        threshold: Ratio of garbage characters that flags the text

    Returns:
        True if the garbage ratio is at or above the threshold
    """
    if not isinstance(text, str) or not text:
        return False

    garbage = len(_ASCII_GARBAGE.findall(text))
    return garbage / len(text) >= threshold


def has_abnormal_repetition(text: str, threshold: float = 0.4) -> bool:
    """
    Check for repeated characters, words or phrases.

    Triggers on character runs of 4+ covering more than ``threshold`` of
    the text, fewer than 50% unique words (5+ words), or fewer than 70%
    unique 3-word phrases (9+ words).
    """
    if not isinstance(text, str) or len(text) < 5:
        return False

    repeated = [m.group(0) for m in _REPEATED_CHARS.finditer(text)]
    if repeated and len(''.join(repeated)) / len(text) > threshold:
        return True

    words = _WORDS.findall(text.lower())
    if len(words) >= 5 and len(set(words)) / len(words) < 0.5:
        return True

    if len(words) >= 9:
        phrases = [
            f"{words[i]} {words[i + 1]} {words[i + 2]}"
            for i in range(len(words) - 2)
        ]
        if len(phrases) >= 3 and len(set(phrases)) / len(phrases) < 0.7:
            return True

    return False


# =============================================================================
# URLS
# =============================================================================

_URL_PATTERNS: Tuple[re.Pattern, ...] = (
    # Basic domains
    re.compile(
        r'\b\w+\.(com|net|io|xyz|site|online|id|org|gz|en|uk|int|edu|gov|ren|xin|'
        r'[A-Z]?[a-zA-Z_+-]{2,8})',
        _AI,
    ),
    re.compile(r'\bbit\.ly/\w+', _AI),
    # Spaced out URLs
    re.compile(r'\w+\s*\.\s*\w+\s*/\s*\w+', _AI),
    re.compile(r'h\s*t\s*t\s*p\s*s?', _AI),
    re.compile(r'w\s*w\s*w\s*\.\s*\w+', _AI),
    # Shorteners and messaging links
    re.compile(r'\b(?:t(?:\.)?me|t(?:\.)?ly|is\.gd|goo\.gl|v\.gd|bit\.ly|tinyurl)', _AI),
    re.compile(r'\bwa\.me/\d+', _AI),
    re.compile(r'\bt(?:\.)?g/\w+', _AI),
    re.compile(r'\blink(?:\.)?in/bio', _AI),
)

# Domain names with inserted separators ("site - com", "site*com")
_SEPARATED_DOMAIN = re.compile(r'\b([a-zA-Z0-9_-]+)[\s.*_\-|+=:;]+([a-zA-Z]{2,5})\b', re.ASCII)

COMMON_TLDS: FrozenSet[str] = frozenset({
    'com', 'net', 'org', 'io', 'co', 'xyz', 'site', 'online', 'app', 'vip', 'biz',
})


def has_suspicious_url_patterns(text: str) -> bool:
    """Detect plain, spaced-out or separator-obfuscated URLs."""
    if not isinstance(text, str):
        return False

    has_separated_domain = any(
        match.group(2).lower() in COMMON_TLDS
        for match in _SEPARATED_DOMAIN.finditer(text)
    )

    return any(pattern.search(text) for pattern in _URL_PATTERNS) or has_separated_domain


# =============================================================================
# EMOJI / CODE SEQUENCES
# =============================================================================

# Pictographs in U+1F000-U+1FBFF count as gambling emoji and weigh double
_EMOJI_BLOCK_START = 0x1F000
_EMOJI_BLOCK_END = 0x1FBFF

EMOJI_SYMBOLS: FrozenSet[str] = frozenset({
    '♠', '♥', '♦', '♣', '⚽', '⭐', '✨', '\ufe0f',
})
GAMBLING_EMOJI_SYMBOLS: FrozenSet[str] = frozenset({
    '♠', '♥', '♦', '♣', '⭐', '\ufe0f',
})

_CODE_LIKE = re.compile(r'\b[A-Z][0-9][A-Z0-9]{2,}\b|\b[A-Z]{2,}[0-9]{2,}\b', re.ASCII)
_GAMBLING_CODE = re.compile(
    r'\b[Ss][1l][0Oo][Tt]\b|\b[Bb][0Oo][0Oo][Nn][Uu][Ss]\b|'
    r'\b[Jj][4Aa][Cc][Kk][Pp][0Oo][Tt]\b|\b[Bb][3Ee][Tt]\b|\b[Ww][1lI][Nn]\b|'
    r'\b[Cc][4Aa][Ss][1lI][Nn][0Oo]\b|\b[Pp][0Oo][Kk][3Ee][Rr]\b',
    re.ASCII,
)


def _is_pictograph(char: str) -> bool:
    return _EMOJI_BLOCK_START <= ord(char) <= _EMOJI_BLOCK_END


def has_suspicious_code_sequences(text: str) -> bool:
    """
    Detect emoji bursts and code-like tokens typical of gambling ads.

    True on 2+ emoji, any gambling emoji, an uppercase/digit code token
    ("S1OT", "JP88") or a digit-for-letter gambling term ("b0nus").
    """
    if not isinstance(text, str):
        return False

    emoji_count = 0
    has_gambling_emoji = False
    for char in text:
        if _is_pictograph(char):
            emoji_count += 2
            has_gambling_emoji = True
        elif char in EMOJI_SYMBOLS:
            emoji_count += 1
            if char in GAMBLING_EMOJI_SYMBOLS:
                has_gambling_emoji = True

    return (
        emoji_count >= 2
        or has_gambling_emoji
        or _CODE_LIKE.search(text) is not None
        or _GAMBLING_CODE.search(text) is not None
    )


# =============================================================================
# EVASION TECHNIQUES
# =============================================================================

_SUBSTITUTION_PATTERNS: Tuple[re.Pattern, ...] = (
    # Words with numbers/symbols mixed in
    re.compile(
        r'\b[a-zA-Z]*[0-9!@#$%^&*][a-zA-Z0-9!@#$%^&*]*[a-zA-Z]+[a-zA-Z0-9!@#$%^&*]*\b',
        re.ASCII,
    ),
    # Words with many trailing numbers
    re.compile(r'\b[a-zA-Z]+[0-9]{3,}\b', re.ASCII),
)
_MULTI_SPACE = re.compile(r'\s{2,}')
_SPACED_LETTERS = re.compile(r'[a-zA-Z]\s[a-zA-Z]\s[a-zA-Z]')
_MIXED_CASE = re.compile(r'[a-z][A-Z]|[A-Z][a-z][A-Z]')
_LONG_WORDS = re.compile(r'\b\w{4,}\b', re.ASCII)


def analyze_evasion_techniques(text: str) -> EvasionAnalysis:
    """
    Score how hard a text tries to dodge keyword filters.

    Returns:
        EvasionAnalysis with cumulative score and technique tags
    """

    analysis = EvasionAnalysis()
    if not isinstance(text, str):
        return analysis

    for pattern in _SUBSTITUTION_PATTERNS:
        if pattern.search(text):
            analysis.score += 0.3
            analysis.techniques.append('character_substitution')

    if has_separated_words(text):
        analysis.score += 0.4
        analysis.techniques.append('word_separation')

    if _MULTI_SPACE.search(text) or _SPACED_LETTERS.search(text):
        analysis.score += 0.2
        analysis.techniques.append('unusual_spacing')

    if _MIXED_CASE.search(text):
        analysis.score += 0.2
        analysis.techniques.append('mixed_case')

    for word in _LONG_WORDS.findall(text):
        reversed_word = word[::-1]
        if reversed_word != word and reversed_word in text:
            analysis.score += 0.5
            analysis.techniques.append('reversed_text')
            break

    return analysis


# =============================================================================
# CONTEXTUAL INDICATORS
# =============================================================================

_MONEY_PHRASES: Tuple[re.Pattern, ...] = (
    re.compile(r'\b(?:min(?:imum)?\s*dep(?:osit)?|min\s*wd|wd\s*min)\b.*?(?:\d+[kK]?|ribu|juta|rb)', _AI),
    re.compile(r'\b(?:deposit|withdrawal|cashout|bayar)\b.*?(?:\d+[kK]?|ribu|juta|rb)', _AI),
    re.compile(r'\b(?:bonus|promo|free)\b.*?(?:\d+%|\d+[kK]?|ribu|juta|rb)', _AI),
    re.compile(r'\b(?:win|menang|dapat|untung)\b.*?(?:\d+[xX]|\d+[kK]?|ribu|juta|rb)', _AI),
)
_URGENCY_PHRASES: Tuple[re.Pattern, ...] = (
    re.compile(r'\b(?:today|hari\s*ini|sekarang|now|langsung)\b.*?(?:bonus|promo|free)', _AI),
    re.compile(r'\b(?:limited|terbatas|hanya|only)\b.*?(?:time|waktu|hari|jam)', _AI),
)
_CS_PHRASES: Tuple[re.Pattern, ...] = (
    re.compile(r'\b(?:cs|customer\s*service|layanan\s*pelanggan|admin|help\s*desk)\b', _AI),
    re.compile(r'\b(?:wa|whatsapp|telegram|line|chat)\b.*?(?:\d{4,}|online|24\s*(?:jam|hours))', _AI),
    re.compile(r'\b(?:kontak|contact|hubungi)\b.*?(?:wa|whatsapp|telegram|line|chat)', _AI),
)
_PAYMENT_PHRASES: Tuple[re.Pattern, ...] = (
    re.compile(
        r'\b(?:bank|bca|bni|bri|mandiri|dana|ovo|gopay|linkaja|pulsa|e-wallet|wallet|'
        r'dompet|payment|pembayaran)\b',
        _AI,
    ),
    re.compile(r'\b(?:all\s*bank|semua\s*bank|bank\s*lokal|local\s*bank)\b', _AI),
)

_CONTEXT_CATEGORIES: Tuple[Tuple[Tuple[re.Pattern, ...], float, str], ...] = (
    (_MONEY_PHRASES, 0.05, 'monetary_phrase'),
    (_URGENCY_PHRASES, 0.03, 'urgency_phrase'),
    (_CS_PHRASES, 0.03, 'cs_indicator'),
    (_PAYMENT_PHRASES, 0.01, 'payment_indicator'),
)


def detect_contextual_gambling_indicators(text: str) -> ContextualAnalysis:
    """Score money, urgency, customer-service and payment phrasing."""
    indicators = ContextualAnalysis()
    if not isinstance(text, str):
        return indicators

    for patterns, weight, reason in _CONTEXT_CATEGORIES:
        for pattern in patterns:
            if pattern.search(text):
                indicators.score += weight
                indicators.reasons.append(reason)

    return indicators


# =============================================================================
# CONTACT INFO
# =============================================================================

_CONTACT_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    ('whatsapp', re.compile(
        r'\b(?:wa|whatsapp|w4|wea)[\s.:]*(?:\+?\d{8,15}|\+?\d{2,4}[-\s]?\d{2,4}[-\s]?\d{2,5})\b', _AI)),
    ('telegram', re.compile(r'\b(?:telegram|tele|t\.me|tg)[\s.:]*(?:@\w+|\+?\d{8,15})', _AI)),
    ('phone', re.compile(
        r'\b(?:tel|telp|hp|phone|hubungi|call)[\s.:]*'
        r'(?:\+?\d{8,15}|\+?\d{2,4}[-\s]?\d{2,4}[-\s]?\d{2,5})\b', _AI)),
    ('instagram', re.compile(r'\b(?:ig|instagram|insta)[\s.:]*(?:@\w+|\w+)', _AI)),
    ('line', re.compile(r'\b(?:line|ln)[\s.:]*(?:@\w+|\w+)', _AI)),
    ('website', re.compile(
        r'\b(?:https?://)?(?:www\.)?([a-zA-Z0-9-]+)(?:\.[a-zA-Z0-9-]+)+(?:/[^\s]*)?', _AI)),
)


def extract_contact_infos(text: str) -> ContactInfo:
    """Collect WhatsApp, Telegram, phone, Instagram, LINE and website mentions."""
    contact_info = ContactInfo()
    if not isinstance(text, str):
        return contact_info

    for contact_type, pattern in _CONTACT_PATTERNS:
        matches = [m.group(0) for m in pattern.finditer(text)]
        if matches:
            contact_info.found = True
            contact_info.types.append(contact_type)
            contact_info.values.extend(matches)

    return contact_info


# =============================================================================
# LANGUAGE-SPECIFIC PATTERNS
# =============================================================================

LANGUAGE_REGEXES: Dict[str, Tuple[re.Pattern, ...]] = {
    'en': (
        re.compile(r'\b(?:bet(?:ting)?|wager|casino|poker|slot|roulette|jackpot|gambling)\b', _AI),
        re.compile(r'\b(?:online\s+gaming|sports\s+betting|odds|bookmaker|bookie)\b', _AI),
        re.compile(r'\b(?:deposit|withdraw|bonus|free\s+spin|vip\s+member|promo\s+code)\b', _AI),
    ),
    'id': (
        re.compile(r'\b(?:judi|togel|gacor|maxwin|slot|toto|rolet|kasino|bandar)\b', _AI),
        re.compile(r'\b(?:taruhan|pasang|daftar|situs|bo|link\s+alternatif|akun|member)\b', _AI),
        re.compile(r'\b(?:menang|jackpot|deposit|withdraw|bonus|spin|prediksi|bocoran)\b', _AI),
    ),
    'zh': (
        re.compile(r'\b(?:博彩|赌场|赌博|投注|老虎机|轮盘|扑克|百家乐)\b', _AI),
        re.compile(r'\b(?:押注|下注|返水|彩金|奖金|优惠|免费旋转)\b', _AI),
    ),
    'vi': (
        re.compile(r'\b(?:cá\s+cược|đánh\s+bạc|sòng\s+bạc|khe|xổ\s+số|cược)\b', _UI),
        re.compile(r'\b(?:tiền\s+thưởng|quay\s+miễn\s+phí|đặt\s+cược|trúng)\b', _UI),
    ),
    'th': (
        re.compile(r'\b(?:การพนัน|คาสิโน|สล็อต|พนัน|เดิมพัน|แทง)\b', _AI),
        re.compile(r'\b(?:โบนัส|ฟรีสปิน|ถอนเงิน|ฝากเงิน|สมัคร)\b', _AI),
    ),
}


def detect_language_specific_patterns(
    text: str,
    language: str = 'all',
    allowlist: Iterable[str] = (),
) -> LanguageAnalysis:
    """
    Match the vocabulary of one language (or all supported languages).

    Each regex is searched once; a hit adds 0.3 per match and records the
    matched substring. Allowlisted terms never count.

    Args:
        text: Text to analyze
        language: Language code ('en', 'id', 'zh', 'vi', 'th') or 'all'
        allowlist: Lowercase terms to ignore

    Returns:
        LanguageAnalysis with score and matched substrings
    """
    result = LanguageAnalysis()
    if not isinstance(text, str):
        return result

    allowed = {term.lower() for term in allowlist}
    languages = SUPPORTED_LANGUAGES if language == 'all' else (language,)

    for lang in languages:
        patterns = LANGUAGE_REGEXES.get(lang)
        if not patterns:
            logger.debug(f"No language patterns for '{lang}'")
            continue

        for pattern in patterns:
            match = pattern.search(text)
            if match is None or match.group(0).lower() in allowed:
                continue
            result.score += 0.3
            result.matches.append(match.group(0))

    return result
