import pytest

from core.fuzzy import damerau_levenshtein, fuzzy_search


def test_leetspeak_word_is_exact_match():
    matches = fuzzy_search(["slot"], "sl0t")

    assert len(matches) == 1
    assert matches[0].matched_word == "slot"
    assert matches[0].matched_with == "slot"
    assert matches[0].score == 1.0


def test_single_deletion_scores_by_length():
    matches = fuzzy_search(["gacor"], "gacr")

    assert matches[0].matched_with == "gacor"
    assert matches[0].score == pytest.approx(0.8)


def test_results_sorted_by_score():
    matches = fuzzy_search(["slat", "slot"], "slot")

    assert [m.matched_with for m in matches] == ["slot", "slat"]


def test_unrelated_words_do_not_match():
    assert fuzzy_search(["gacor"], "hello world") == []


def test_blank_query():
    assert fuzzy_search(["slot"], "   ") == []


def test_invalid_candidates():
    with pytest.raises(TypeError):
        fuzzy_search("slot", "slot")


def test_invalid_query():
    with pytest.raises(TypeError):
        fuzzy_search(["slot"], None)


def test_transposition_counts_once():
    assert damerau_levenshtein("slto", "slot") == 1


def test_length_gap_short_circuits():
    assert damerau_levenshtein("a", "abcd", 2) == 3


def test_distance_above_limit_is_capped():
    assert damerau_levenshtein("slot", "judi", 2) == 3
    assert damerau_levenshtein("slot", "judi", 4) == 4


def test_identical_and_empty():
    assert damerau_levenshtein("judi", "judi") == 0
    assert damerau_levenshtein("", "toto") == 4
