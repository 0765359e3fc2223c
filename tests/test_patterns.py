import pytest

from core.patterns import (
    PatternContext,
    build_pattern_families,
    create_pattern_regex,
    search_patterns,
    supporting_keyword_bonus,
    tiny_pattern_regex,
)


@pytest.fixture
def context():
    return PatternContext(keywords=("zeus",), support_keywords=("gacor", "maxwin"))


def test_create_pattern_regex_empty():
    assert create_pattern_regex([]) is None
    assert tiny_pattern_regex([]) is None


def test_custom_pattern_allows_affix_and_digits():
    pattern = create_pattern_regex(["garuda"])

    assert pattern.search("xgaruda88").group(0) == "xgaruda88"


def test_custom_pattern_escapes_terms():
    pattern = create_pattern_regex(["a.b"])

    assert pattern.search("a.b") is not None
    assert pattern.search("axb") is None


def test_loose_pattern_allows_digit_prefix():
    pattern = create_pattern_regex(["zeus"], loose=True)

    assert pattern.search("9zeus").group(0) == "9zeus"


def test_pattern_families_are_cached():
    assert build_pattern_families(("zeus", "toto")) is build_pattern_families(("zeus", "toto"))


def test_supporting_keyword_bonus_is_capped():
    assert supporting_keyword_bonus(2) == pytest.approx(0.73)
    assert supporting_keyword_bonus(1000) == 1.5


def test_search_detects_keyword_with_support(context):
    outcome = search_patterns(1.0, "zeus gacor", context)

    assert outcome.detected
    assert outcome.matched_terms == ["zeusgacor"]
    assert outcome.supporting_keywords == ["gacor"]
    assert outcome.keyword_match_count == 1
    assert outcome.checkpoint == pytest.approx(2.015)


def test_search_needs_prior_evidence(context):
    outcome = search_patterns(-1.0, "zeus gacor", context)

    assert not outcome.detected
    assert outcome.matched_terms


def test_search_text_unlike_support_keywords_loses_score(context):
    outcome = search_patterns(0.0, "hello world", context)

    assert not outcome.detected
    assert outcome.checkpoint < 0
    assert outcome.matched_terms == []


def test_search_keeps_score_when_support_keyword_resembles_text():
    context = PatternContext(keywords=("zzzz",), support_keywords=("daftar",))

    outcome = search_patterns(0.3, "daftar", context)

    assert not outcome.detected
    assert outcome.checkpoint == pytest.approx(0.3)


def test_search_penalizes_only_passes_that_merge_words():
    context = PatternContext(keywords=("zzzz",), support_keywords=("daftar",))

    outcome = search_patterns(0.3, "daftar sekarang", context)

    # "daftar" resembles a support keyword only before the cleaning passes
    # merge it into "daftarsekarang"
    assert outcome.checkpoint == pytest.approx(0.3 - 7 * 0.0307 - 7 * 0.0264)


def test_search_falls_back_to_written_site_id():
    context = PatternContext(
        keywords=("zeus",),
        support_keywords=("gacor",),
        written_text="main di hoki77",
    )

    outcome = search_patterns(1.0, "main di hoki77", context)

    assert outcome.detected
    assert "hoki77" in outcome.matched_terms


def test_search_site_id_fallback_off_at_high_sensitivity():
    context = PatternContext(
        keywords=("zeus",),
        support_keywords=("gacor",),
        sensitivity_cap=2,
        written_text="main di hoki77",
    )

    outcome = search_patterns(1.0, "main di hoki77", context)

    assert "hoki77" not in outcome.matched_terms


def test_search_ignores_site_id_built_by_merging():
    context = PatternContext(
        keywords=("zeus",),
        support_keywords=("gacor",),
        written_text="angka 12",
    )

    outcome = search_patterns(1.0, "angka12", context)

    assert "angka12" not in outcome.matched_terms


def test_search_respects_allowlist():
    context = PatternContext(
        keywords=("zeus",),
        support_keywords=("gacor",),
        allowlist=frozenset({"zeusgacor", "zeus"}),
    )

    outcome = search_patterns(1.0, "zeus gacor", context)

    assert "zeusgacor" not in outcome.matched_terms
