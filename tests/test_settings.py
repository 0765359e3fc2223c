import json

import pytest

from core.settings import DetectorSettings, PatternSource, SettingsManager, load_patterns
from core.validators import (
    LanguageValidator,
    SensitivityValidator,
    TermListParser,
    extract_keyword_arrays,
    parse_number,
)
from gambling_detector import build_options_from_settings


# Keyword weights

def test_keyword_mapping_weights():
    terms, weights = extract_keyword_arrays({
        "slot": True, "zeus": False, "toto": 4, "jack": 10, "poker": 0.5,
        "joker": 3, "x": None, "y": "0.3", "z": "abc",
    })

    assert terms == ["slot", "zeus", "toto", "jack", "poker", "joker", "x", "y", "z"]
    assert weights == [1, 0, 0.4, 1, 0.5, 1, 0, 0.3, 1]


def test_keyword_mixed_list():
    assert extract_keyword_arrays(["slot", {"zeus": 0.2}, "", 5]) == (["slot", "zeus"], [1, 0.2])


def test_keyword_single_string():
    assert extract_keyword_arrays("slot") == (["slot"], [1])


def test_keyword_none():
    assert extract_keyword_arrays(None) == ([], [])


@pytest.mark.parametrize("value, maximum, expected", [
    ("-", 5, 0),
    ("2.5", 5, 2.5),
    (-1, 5, 0),
    (7, 3, 3),
    ("abc", 5, 0),
    (None, 5, 0),
    (float("nan"), 5, 0),
])
def test_parse_number(value, maximum, expected):
    assert parse_number(value, maximum) == expected


# Sensitivity / language

@pytest.mark.parametrize("value, expected", [
    ("Strict", 5),
    ("aggressive", 1),
    (2, 2),
    ("4", 4),
    (None, 3),
])
def test_sensitivity_parse_valid(value, expected):
    assert SensitivityValidator.parse(value) == (expected, None)


@pytest.mark.parametrize("value, expected", [("0", 1), (12, 5), ("x", 3)])
def test_sensitivity_parse_invalid(value, expected):
    level, warning = SensitivityValidator.parse(value)

    assert level == expected
    assert warning is not None


def test_sensitivity_validate():
    assert SensitivityValidator.validate(3)
    assert not SensitivityValidator.validate("x")


def test_language_parse():
    assert LanguageValidator.parse(" ID ") == ("id", None)
    assert LanguageValidator.parse("") == ("all", None)

    language, warning = LanguageValidator.parse("fr")
    assert language == "all"
    assert warning is not None


def test_term_list_parse():
    assert TermListParser.parse("a, b\n# c\nd") == ["a", "b", "d"]
    assert TermListParser.parse("   ") == []


# Pattern sources

def test_load_patterns_json(tmp_path):
    path = tmp_path / "patterns.json"
    path.write_text(json.dumps({"keywords": ["garuda"], "domains": ["scam.com"], "extra": ["x"]}), encoding="utf-8")

    patterns = load_patterns(str(path))

    assert patterns.keywords == ["garuda"]
    assert patterns.domains == ["scam.com"]
    assert patterns.allowlist == []


def test_load_patterns_json_array_rejected(tmp_path):
    path = tmp_path / "patterns.json"
    path.write_text('["garuda"]', encoding="utf-8")

    assert load_patterns(path).is_empty


def test_load_patterns_invalid_json(tmp_path):
    path = tmp_path / "patterns.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_patterns(path).is_empty


def test_load_patterns_plain_list(tmp_path):
    path = tmp_path / "patterns.txt"
    path.write_text("garuda\n# comment\n\nhoki\n", encoding="utf-8")

    assert load_patterns(path).keywords == ["garuda", "hoki"]


def test_load_patterns_missing_file(tmp_path):
    assert load_patterns(tmp_path / "missing.txt").is_empty


def test_load_patterns_list_and_unsupported():
    assert load_patterns(["garuda"]).keywords == ["garuda"]
    assert load_patterns(42).is_empty


def test_pattern_source_overrides():
    source = PatternSource(keywords=["garuda"], patterns=["hoki", "garuda"], allowlist=["poker"])

    assert source.to_overrides() == {"keywords": ["garuda", "hoki"], "allowlist": ["poker"]}


# Detector settings

def test_settings_round_trip(tmp_path):
    manager = SettingsManager(str(tmp_path / "settings.json"))
    settings = DetectorSettings(sensitivity_level=2, language="id", allowlist="poker")

    assert manager.save(settings)
    loaded = manager.load()

    assert loaded.sensitivity_level == 2
    assert loaded.language == "id"
    assert loaded.allowlist == "poker"


def test_settings_load_missing_file(tmp_path):
    settings = SettingsManager(str(tmp_path / "none.json")).load()

    assert settings == DetectorSettings()


def test_settings_load_invalid_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("not json", encoding="utf-8")

    assert SettingsManager(str(path)).load() == DetectorSettings()


def test_settings_from_dict_validates():
    settings = DetectorSettings.from_dict({"sensitivity_level": 99, "language": "fr", "unknown": 1})

    assert settings.sensitivity_level == 5
    assert settings.language == "all"


def test_options_from_settings():
    settings = DetectorSettings(sensitivity_level=4, allowlist="poker, toto", language_pack="id")

    options = build_options_from_settings(settings)

    assert options.sensitivity_level == 4
    assert options.allowlist == ("poker", "toto")
    assert "gacor" in options.domains


def test_settings_patterns_file_merged(tmp_path):
    path = tmp_path / "patterns.txt"
    path.write_text("garuda\n", encoding="utf-8")
    settings = DetectorSettings(keywords="slot", patterns_file=str(path))

    assert settings.to_overrides()["keywords"] == ["slot", "garuda"]
