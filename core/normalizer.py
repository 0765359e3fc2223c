"""
Text normalization for obfuscated gambling promotion.

Promoters hide site names behind diacritics, dotted or spaced letters
("Z.e.u.s", "s l o t"), look-alike symbols and digit substitutions
("sl0t88"). The helpers here undo those tricks so the pattern engine can
see the underlying words.

Word-level regexes use ASCII semantics: ``\\w``, ``\\b`` and ``\\d`` only
cover ``[A-Za-z0-9_]`` and ``[0-9]``. Whitespace collapsing is Unicode
aware, so normalize_input turns NBSP and other Unicode spaces into plain
ASCII spaces before any signal runs.
"""

import re
import unicodedata
from typing import Dict

# =============================================================================
# SUBSTITUTION MAPS
# =============================================================================

# Look-alike symbols/digits replaced globally by clean_weird_patterns (order matters)
WEIRD_CHAR_MAP: Dict[str, str] = {
    '¢': 'c',
    '€': 'e',
    '£': 'l',
    '¥': 'y',
    '@': 'a',
    '5': 's',
    '3': 'e',
    '1': 'i',
    '0': 'o',
    '4': 'a',
    '7': 't',
    '6': 'g',
    '9': 'g',
    '8': 'b',
}

# Leetspeak map used per word token by convert_comment_fixed
LEET_CONVERSION_MAP: Dict[str, str] = {
    '1': 'i', '2': 'z', '3': 'e', '4': 'a', '5': 's',
    '6': 'g', '7': 't', '8': 'b', '9': 'g', '0': 'o',
    '!': 'i', '&': 'e', '@': 'a', '#': 'h', '$': 's',
    '?': 'q', '+': 't', '*': 'x', '_': 'l', '%': 'o',
    '|': 'l',
}

MAX_IGNORE_LAST_DIGITS = 6

_A = re.ASCII

# =============================================================================
# COMPILED PATTERNS
# =============================================================================

_WHITESPACE = re.compile(r'\s+')
_PERIOD = re.compile(r'\.')
_PADDED_PERIOD = re.compile(r'\s*\.\s*')
_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")

_DOTTED_LETTERS = re.compile(r'(\w)\s*\.\s*(\w)', _A)
_SEPARATED_LETTERS = re.compile(r"(\w)[\s.*_\-|+=:;,']+(\w)", _A)
_SPACED_TRIPLET = re.compile(r'\s+(\w)\s+(\w)\s+(\w)\s+', _A)

_SPACED_FOUR = re.compile(r'\b([a-zA-Z])\s+([a-zA-Z])\s+([a-zA-Z])\s+([a-zA-Z])\b', _A)
_SPACED_THREE = re.compile(r'\b([a-zA-Z])\s+([a-zA-Z])\s+([a-zA-Z])\b', _A)
_SPACED_TWO = re.compile(r'\b([a-zA-Z])\s+([a-zA-Z])\b', _A)
_JOINED_TWO = re.compile(r"\b([a-zA-Z])[.\-_*|+=:;,']([a-zA-Z])\b", _A)
_JOINED_THREE = re.compile(
    r"\b([a-zA-Z])[.\-_*|+=:;,']([a-zA-Z])[.\-_*|+=:;,']([a-zA-Z])\b", _A
)
_JOINED_PREFIX = re.compile(
    r"\b([a-zA-Z])[.\-_*|+=:;,']([a-zA-Z])[.\-_*|+=:;,']([a-zA-Z])[.\-_*|+=:;,']", _A
)
_JOINED_FOUR = re.compile(
    r"\b([a-zA-Z])([.\-_*|+=:;,'])([a-zA-Z])([.\-_*|+=:;,'])"
    r"([a-zA-Z])([.\-_*|+=:;,'])([a-zA-Z])\b",
    _A,
)

_SHORT_PAIR = re.compile(r'\b([a-zA-Z]{1,3})\s+([a-zA-Z]{1,3})\b', _A)
_SHORT_TRIPLE = re.compile(
    r'\b([a-zA-Z]{1,3})\s+([a-zA-Z]{1,3})\s+([a-zA-Z]{1,3})\b', _A
)

_TRAILING_NUMBER_GROUPS = re.compile(
    r'\b([A-Z]?[a-zA-Z_+-]{2,}\d{0,10})((?:\s+\d+)+)\b(?!\.)', _A
)
_SEPARATED_TRAILING_NUMBER = re.compile(
    r'\b([A-Z]?[a-zA-Z_+-]{2,}\d{0,10})[\s.-]+(\d+)\b', _A
)
_WORD_NUMBER_WORD = re.compile(
    r'\b([A-Z]?[a-zA-Z_+-]{2,})\s+(\d+)\s+([a-zA-Z_+-]{2,})\b', _A
)
_DIGITS = re.compile(r'\d+', _A)

_WORD_TOKEN = re.compile(r'\b\w+\b', _A)

_SEPARATION_SHAPES = (
    re.compile(r'\b[a-zA-Z]\s+[a-zA-Z]\b', _A),
    re.compile(r'\b[a-zA-Z][^a-zA-Z0-9\s]{1,2}[a-zA-Z]\b', _A),
    re.compile(r"\b([a-zA-Z])[\s.*_\-|+=:;,']([a-zA-Z])\b", _A),
)


# =============================================================================
# NORMALIZATION FUNCTIONS
# =============================================================================

def normalize_input(text: str) -> str:
    """Flatten newlines, pad periods with spaces and collapse (Unicode) whitespace."""
    text = text.replace('\n', ' ')
    text = _PERIOD.sub(' . ', text)
    return _WHITESPACE.sub(' ', text).strip()


def unpad_periods(text: str) -> str:
    """Undo period padding ("site . com" -> "site.com")."""
    return _PADDED_PERIOD.sub('.', text)


def clean_text(text: str) -> str:
    """
    Strip diacritics while keeping the base letters.

    Decomposes with NFKD, drops combining marks U+0300-U+036F and
    recomposes with NFKC. Idempotent.
    """
    decomposed = unicodedata.normalize('NFKD', text)
    stripped = _COMBINING_MARKS.sub('', decomposed)
    return unicodedata.normalize('NFKC', stripped)


def clean_weird_patterns(text: str) -> str:
    """
    Remove spacing/punctuation tricks and map look-alike characters.

    Args:
        text: Text to clean

    Returns:
        Text with separators between word characters removed and
        symbol/digit look-alikes replaced by letters
    """
    text = _WHITESPACE.sub(' ', text).strip()

    # 'Z . e . u . s' => 'Zeus'
    text = _DOTTED_LETTERS.sub(r'\1\2', text)
    text = _SEPARATED_LETTERS.sub(r'\1\2', text)
    text = _SPACED_TRIPLET.sub(r'\1\2\3', text)

    for char, replacement in WEIRD_CHAR_MAP.items():
        text = text.replace(char, replacement)

    return text


def reconstruct_separated_words(text: str) -> str:
    """
    Join letters that were deliberately split apart.

    Handles 4-, 3- and 2-letter whitespace runs ("s l o t"), single
    separators ("s.l", "s-l-o") and, when an "x.y.z." shape is left over,
    4-letter separator runs ("s_l_o_t" -> "slot").
    """
    result = _SPACED_FOUR.sub(r'\1\2\3\4', text)
    result = _SPACED_THREE.sub(r'\1\2\3', result)
    result = _SPACED_TWO.sub(r'\1\2', result)
    result = _JOINED_TWO.sub(r'\1\2', result)
    result = _JOINED_THREE.sub(r'\1\2\3', result)

    if _JOINED_PREFIX.search(result):
        result = _JOINED_FOUR.sub(r'\1\3\5\7', result)

    return result


def combine_short_words(text: str) -> str:
    """
    Combine 1-3 letter words separated by spaces ("sl ot" -> "slot").

    Two pair passes catch words created by the first pass, a final pass
    handles remaining runs of three.
    """
    result = _SHORT_PAIR.sub(r'\1\2', text)
    result = _SHORT_PAIR.sub(r'\1\2', result)
    return _SHORT_TRIPLE.sub(r'\1\2\3', result)


def merge_text_with_trailing_numbers(text: str) -> str:
    """
    Merge number groups that follow a word ("judi 123 456" -> "judi123456").

    Also joins hyphen/dot separated numbers and "word number word" triples.
    """
    def _join_groups(match: re.Match) -> str:
        return match.group(1) + ''.join(_DIGITS.findall(match.group(2)))

    text = _TRAILING_NUMBER_GROUPS.sub(_join_groups, text)
    text = _SEPARATED_TRAILING_NUMBER.sub(r'\1\2', text)
    return _WORD_NUMBER_WORD.sub(r'\1\2\3', text)


def convert_comment_fixed(comment: str, ignore_last_digits: int = 0) -> str:
    """
    Convert leetspeak characters in every word token.

    The last ``ignore_last_digits`` characters of each token are kept
    verbatim so trailing numbers ("garuda123") can be treated either as
    real digits or as disguised letters.

    Args:
        comment: Text to process
        ignore_last_digits: Number of trailing characters per word to skip

    Returns:
        Text with substitutions applied
    """
    def _convert(match: re.Match) -> str:
        word = match.group(0)
        length = len(word)
        if length <= ignore_last_digits:
            return word

        convert_part = word[:length - ignore_last_digits]
        remain_part = word[length - ignore_last_digits:]
        converted = ''.join(LEET_CONVERSION_MAP.get(c, c) for c in convert_part)
        return converted + remain_part

    return _WORD_TOKEN.sub(_convert, comment)


def has_separated_words(text: str) -> bool:
    """Check for single letters split by spaces or inserted symbols."""
    return any(shape.search(text) for shape in _SEPARATION_SHAPES)
