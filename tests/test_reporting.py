import pandas as pd
import pytest

from gambling_detector import DetectionAnalysis, DetectionResult
from reporting import results_to_dataframe, save_to_csv, save_to_excel, summarize


def make_result(confidence, text, checkpoint=0.0, analysis=None):
    return DetectionResult(
        is_gambling=confidence != "none",
        confidence=confidence,
        checkpoint=checkpoint,
        details="details",
        comment=text,
        analysis=analysis,
    )


@pytest.fixture
def sample():
    texts = ["nice video", "zeus gacor maxwin", "slot88"]
    results = [
        make_result("none", texts[0]),
        make_result("high", texts[1], 2.8),
        make_result("low", texts[2], 0.6),
    ]
    return texts, results


def test_summarize(sample):
    _, results = sample

    assert summarize(results) == {
        "total": 3, "flagged": 2, "none": 1, "low": 1, "medium": 0, "high": 1,
    }


def test_dataframe_length_mismatch(sample):
    texts, results = sample

    with pytest.raises(ValueError):
        results_to_dataframe(texts[:2], results)


def test_dataframe_analysis_columns():
    analysis = DetectionAnalysis(matched_terms=["zeusgacor"], supporting_keywords=["gacor", "maxwin"])

    df = results_to_dataframe(["zeus gacor maxwin"], [make_result("high", "zeus gacor maxwin", 2.8, analysis)])

    assert df.loc[0, "Matched Terms"] == "zeusgacor"
    assert df.loc[0, "Supporting Keywords"] == "gacor, maxwin"
    assert df.loc[0, "Contact Info"] == ""


def test_save_to_csv(tmp_path, sample):
    texts, results = sample
    path = tmp_path / "report.csv"

    save_to_csv(texts, results, str(path))

    df = pd.read_csv(path, encoding="utf-8-sig")
    assert list(df["Comment Text"]) == texts
    assert list(df["Confidence"]) == ["none", "high", "low"]


def test_save_to_csv_only_flagged(tmp_path, sample):
    texts, results = sample
    path = tmp_path / "report.csv"

    save_to_csv(texts, results, str(path), only_flagged=True)

    df = pd.read_csv(path, encoding="utf-8-sig")
    assert list(df["Comment Text"]) == ["zeus gacor maxwin", "slot88"]


def test_save_to_excel(tmp_path, sample):
    texts, results = sample
    path = tmp_path / "report.xlsx"

    save_to_excel(texts, results, str(path))

    sheets = pd.read_excel(path, sheet_name=None, engine="openpyxl")
    assert list(sheets) == ["Results", "Flagged", "Summary"]
    assert len(sheets["Results"]) == 3
    assert len(sheets["Flagged"]) == 2


def test_save_to_excel_without_flagged(tmp_path):
    path = tmp_path / "report.xlsx"

    save_to_excel(["nice video"], [make_result("none", "nice video")], str(path))

    sheets = pd.read_excel(path, sheet_name=None, engine="openpyxl")
    assert list(sheets) == ["Results", "Summary"]


def test_save_to_excel_only_flagged(tmp_path, sample):
    texts, results = sample
    path = tmp_path / "report.xlsx"

    save_to_excel(texts, results, str(path), only_flagged=True)

    sheets = pd.read_excel(path, sheet_name=None, engine="openpyxl")
    assert list(sheets) == ["Results", "Summary"]
    assert list(sheets["Results"]["Comment Text"]) == ["zeus gacor maxwin", "slot88"]
    summary = dict(zip(sheets["Summary"]["Metric"], sheets["Summary"]["Count"]))
    assert summary["total"] == 3
