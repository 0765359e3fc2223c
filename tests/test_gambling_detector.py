import pytest

from core.constants import DETAILS_TOO_SHORT, Confidence
from gambling_detector import (
    DetectionOptions,
    GamblingDetector,
    build_options,
    build_support_keyword_list,
    confidence_thresholds,
    create_detector,
    detect,
    detect_batch,
    get_language_patterns,
    is_gambling,
    sensitivity_cap,
)


# Thresholds

def test_default_thresholds():
    thresholds = confidence_thresholds(3)

    assert thresholds.low == pytest.approx(0.5)
    assert thresholds.medium == pytest.approx(0.9)
    assert thresholds.high == pytest.approx(2.5)


def test_aggressive_thresholds():
    thresholds = confidence_thresholds(1)

    assert thresholds.low == pytest.approx(0.45)
    assert thresholds.medium == pytest.approx(0.9)
    assert thresholds.high == pytest.approx(1.2)


@pytest.mark.parametrize("level", [1, 2, 3, 4, 5])
def test_thresholds_are_ordered(level):
    thresholds = confidence_thresholds(level)
    assert thresholds.low <= thresholds.medium <= thresholds.high


@pytest.mark.parametrize("level, cap", [(1, 5), (3, 3), (5, 1), (0, 0), (-2, 0), (9, 1)])
def test_sensitivity_cap(level, cap):
    assert sensitivity_cap(level) == cap


# Too short / invalid input

@pytest.mark.parametrize("text", ["", "a", "  x  ", None, 42])
def test_too_short_or_not_text(text):
    result = detect(text)

    assert not result.is_gambling
    assert result.confidence == "none"
    assert result.checkpoint == 0
    assert result.details == DETAILS_TOO_SHORT
    assert result.comment == text


# Detection

def test_dotted_site_name_detected():
    result = detect("Z.e.u.s g.a.c.o.r m.a.x.w.i.n", include_analysis=True)

    assert result.is_gambling
    assert result.confidence in ("medium", "high")
    assert result.analysis.word_separation_detected
    assert "zeusgacor" in result.analysis.matched_terms
    assert result.comment == "Z.e.u.s g.a.c.o.r m.a.x.w.i.n"


def test_zero_sensitivity_caps_checkpoint():
    result = detect("Z.e.u.s g.a.c.o.r m.a.x.w.i.n", sensitivity_level=0)

    assert result.checkpoint == 0
    assert result.is_gambling
    assert result.confidence == "low"


def test_indonesian_promotion_with_language_pack():
    options = build_options(language_pack="id", include_analysis=True)
    result = detect("sl0t88 maxwin dijamin menang!", options)

    assert result.is_gambling
    assert result.confidence in ("medium", "high")
    assert result.analysis.blocked_domain_detected
    assert "maxwin" in result.analysis.language_specific_matches


@pytest.mark.parametrize("text, site_id", [
    ("daftar sekarang di hoki77 bonus 100%", "hoki77"),
    ("ayo main di kingjp55 sekarang juga", "kingjp55"),
])
def test_bare_site_id_promotion_detected(text, site_id):
    result = detect(text, include_analysis=True)

    assert result.is_gambling
    assert result.confidence == "medium"
    assert site_id in result.analysis.matched_terms


def test_keyword_fuzzy_scored_without_analysis():
    text = "s l o t gacor hari ini"

    plain = detect(text, sensitivity_level=1)
    detailed = detect(text, sensitivity_level=1, include_analysis=True)

    assert detailed.analysis.word_separation_detected
    assert plain.checkpoint == detailed.checkpoint


def test_number_question_not_flagged():
    result = detect("berapa angka 12 + 22?", include_analysis=True)

    assert not result.is_gambling
    assert result.analysis.separated_numbers_detected


@pytest.mark.parametrize("text", [
    "I really enjoyed this video! Thanks for sharing.",
    "This is a normal sentence with no gambling content.",
])
def test_normal_comments(text):
    result = detect(text)

    assert not result.is_gambling
    assert result.confidence == "none"
    assert result.analysis is None


def test_allowlisted_term_is_ignored():
    result = detect("poker", allowlist=["poker"], include_analysis=True)

    assert result.confidence == "none"
    assert result.analysis.matched_terms == []
    assert result.analysis.language_specific_matches == []


def test_blocked_domain():
    text = "kunjungi scamsite.com sekarang"

    with_domain = detect(text, domains=["scamsite.com"], include_analysis=True)
    without_domain = detect(text, include_analysis=True)

    assert with_domain.analysis.blocked_domain_detected
    assert not without_domain.analysis.blocked_domain_detected


def test_result_to_dict_without_analysis():
    data = detect("hello there friend").to_dict()

    assert "analysis" not in data
    assert set(data) == {"is_gambling", "confidence", "checkpoint", "details", "comment"}


def test_confidence_level_enum():
    assert detect("hello there friend").confidence_level is Confidence.NONE


def test_is_gambling_helper():
    assert not is_gambling("I really enjoyed this video! Thanks for sharing.")


# Batch

def test_detect_batch_keeps_order():
    texts = ["hello there friend", "Z.e.u.s g.a.c.o.r m.a.x.w.i.n", None]

    results = detect_batch(texts)

    assert [r.comment for r in results] == texts
    assert results[1].is_gambling
    assert results[2].details == DETAILS_TOO_SHORT


def test_detect_batch_single_value():
    results = detect_batch(12345)

    assert len(results) == 1
    assert results[0].comment == "12345"


# Options

def test_merged_ignores_unknown_and_none():
    options = DetectionOptions().merged({"bogus": 1, "language": None, "allowlist": "poker"})

    assert options.language == "all"
    assert options.allowlist == ("poker",)


def test_build_options_explicit_beats_pack():
    options = build_options(language_pack="id", domains=["only.com"])

    assert options.language == "id"
    assert options.domains == ("only.com",)
    assert "gacor" in options.support_keywords


def test_language_patterns_fallback_to_english():
    assert get_language_patterns("zh") == get_language_patterns("en")


def test_language_patterns_all_has_no_duplicates():
    patterns = get_language_patterns("all")

    assert len(patterns["domains"]) == len(set(patterns["domains"]))
    assert len(patterns["support_keywords"]) == len(set(patterns["support_keywords"]))


def test_support_keywords_extended_without_markers():
    keywords = build_support_keyword_list(["promo"], frozenset())

    assert keywords[0] == "promo"
    assert "wdp" in keywords


def test_support_keywords_kept_with_marker():
    assert build_support_keyword_list(["wdp", "promo"], frozenset()) == ["wdp", "promo"]


def test_support_keywords_drop_blocked_domains():
    assert "gacor" not in build_support_keyword_list([], frozenset({"gacor"}))


# Detector instance

def test_detector_overrides_do_not_leak():
    detector = create_detector({"sensitivity_level": 2})

    detector.detect("hello there friend", {"sensitivity_level": 5})

    assert detector.default_options.sensitivity_level == 2


def test_detector_with_patterns():
    detector = GamblingDetector().with_patterns({"domains": ["scamsite.com"], "allowlist": ["poker"]})

    assert detector.default_options.domains == ("scamsite.com",)
    assert detector.default_options.allowlist == ("poker",)
    assert detector.detect("kunjungi scamsite.com sekarang", {"include_analysis": True}).analysis.blocked_domain_detected


def test_detector_version():
    assert GamblingDetector.version == "1.1.2"
