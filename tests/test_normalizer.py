import pytest

from core.normalizer import (
    clean_text,
    clean_weird_patterns,
    combine_short_words,
    convert_comment_fixed,
    has_separated_words,
    merge_text_with_trailing_numbers,
    normalize_input,
    reconstruct_separated_words,
    unpad_periods,
)


def test_normalize_input_pads_periods_and_flattens_lines():
    assert normalize_input("a.b\nc   d") == "a . b c d"


def test_normalize_input_maps_unicode_spaces():
    assert normalize_input("slot\u00a0gacor\u2003maxwin") == "slot gacor maxwin"


def test_unpad_periods():
    assert unpad_periods("scamsite . com") == "scamsite.com"


def test_clean_text_strips_diacritics():
    assert clean_text("café señor") == "cafe senor"


def test_clean_text_is_idempotent():
    once = clean_text("Jáckpót ŝlot")
    assert clean_text(once) == once


@pytest.mark.parametrize("text, expected", [
    ("Z . e . u . s", "Zeus"),
    ("sl0t", "slot"),
    ("g4cor", "gacor"),
    ("s-l-o-t", "slot"),
])
def test_clean_weird_patterns(text, expected):
    assert clean_weird_patterns(text) == expected


def test_reconstruct_separated_words_spaced_letters():
    assert reconstruct_separated_words("s l o t") == "slot"


def test_reconstruct_separated_words_keeps_normal_text():
    text = "this is a normal sentence"
    assert reconstruct_separated_words(text) == text


def test_combine_short_words():
    assert combine_short_words("sl ot") == "slot"


def test_merge_trailing_numbers():
    assert merge_text_with_trailing_numbers("judi 123 456") == "judi123456"


def test_merge_trailing_numbers_simple_question():
    assert merge_text_with_trailing_numbers("berapa angka 12 + 22?") == "berapa angka12 + 22?"


def test_convert_comment_fixed_full_conversion():
    assert convert_comment_fixed("sl0t88", 0) == "slotbb"


def test_convert_comment_fixed_keeps_trailing_digits():
    assert convert_comment_fixed("sl0t88", 2) == "slot88"


def test_convert_comment_fixed_short_words_untouched():
    assert convert_comment_fixed("sl0t88", 6) == "sl0t88"


def test_has_separated_words():
    assert has_separated_words("s l o t")
    assert has_separated_words("g.a")
    assert not has_separated_words("hello world")
