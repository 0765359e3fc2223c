"""
Report export for detection results.

Turns detection results into pandas DataFrames and writes them as CSV or
multi-sheet Excel workbooks.
"""

import logging
from typing import Any, Dict, Sequence

import pandas as pd

from core.constants import Confidence
from gambling_detector import DetectionResult

logger = logging.getLogger(__name__)

CSV_ENCODING = "utf-8-sig"  # BOM for Excel compatibility


def _join(values: Sequence[str]) -> str:
    return ", ".join(str(v) for v in values)


def result_to_row(text: Any, result: DetectionResult) -> Dict[str, Any]:
    """Convert one text/result pair to a report row."""
    row = {
        "Comment Text": text,
        "Is Gambling": result.is_gambling,
        "Confidence": result.confidence,
        "Checkpoint": result.checkpoint,
        "Details": result.details,
    }

    analysis = result.analysis
    if analysis is not None:
        row["Matched Terms"] = _join(analysis.matched_terms)
        row["Supporting Keywords"] = _join(analysis.supporting_keywords)
        row["Language Matches"] = _join(analysis.language_specific_matches)
        row["Evasion Techniques"] = _join(analysis.evasion_techniques)
        row["Contact Info"] = _join(analysis.contact_info.values) if analysis.contact_info else ""
        row["Blocked Domain"] = analysis.blocked_domain_detected

    return row


def results_to_dataframe(texts: Sequence[Any], results: Sequence[DetectionResult]) -> pd.DataFrame:
    """
    Build a report DataFrame.

    Args:
        texts: Analyzed texts
        results: Detection results in the same order

    Returns:
        DataFrame with one row per text

    Raises:
        ValueError: If texts and results differ in length
    """
    if len(texts) != len(results):
        raise ValueError(
            f"Got {len(texts)} texts but {len(results)} results"
        )

    return pd.DataFrame([result_to_row(text, result) for text, result in zip(texts, results)])


def summarize(results: Sequence[DetectionResult]) -> Dict[str, int]:
    """
    Count results per confidence tier.

    Returns:
        Dict with 'total', 'flagged' and one count per confidence value
    """
    summary = {"total": len(results), "flagged": sum(1 for r in results if r.is_gambling)}
    for level in Confidence:
        summary[level.value] = sum(1 for r in results if r.confidence == level.value)
    return summary


def save_to_csv(
    texts: Sequence[Any],
    results: Sequence[DetectionResult],
    filename: str,
    only_flagged: bool = False,
) -> str:
    """
    Save a detection report to CSV.

    Args:
        texts: Analyzed texts
        results: Detection results
        filename: Output filename
        only_flagged: Keep only rows classified as gambling

    Returns:
        Filename used
    """
    df = results_to_dataframe(texts, results)
    if only_flagged and not df.empty:
        df = df[df["Is Gambling"]]

    df.to_csv(filename, index=False, encoding=CSV_ENCODING)
    logger.info(f"Saved {len(df)} rows to {filename}")
    return filename


def save_to_excel(
    texts: Sequence[Any],
    results: Sequence[DetectionResult],
    filename: str,
    only_flagged: bool = False,
) -> str:
    """
    Save a detection report to an Excel file with multiple sheets.

    Sheets: "Results" (every text), "Flagged" (gambling only, when any)
    and "Summary" (counts per confidence tier). With ``only_flagged`` the
    "Results" sheet already holds just the gambling rows, so no separate
    "Flagged" sheet is written; the summary still counts every text.

    Args:
        texts: Analyzed texts
        results: Detection results
        filename: Output filename
        only_flagged: Keep only rows detected as gambling in "Results"

    Returns:
        Filename used
    """
    df = results_to_dataframe(texts, results)
    summary = summarize(results)
    df_summary = pd.DataFrame(
        [{"Metric": key, "Count": value} for key, value in summary.items()]
    )
    flagged = df[df["Is Gambling"]] if not df.empty else df

    with pd.ExcelWriter(filename, engine="openpyxl") as writer:
        if only_flagged:
            flagged.to_excel(writer, sheet_name="Results", index=False)
        else:
            df.to_excel(writer, sheet_name="Results", index=False)
            if summary["flagged"]:
                flagged.to_excel(writer, sheet_name="Flagged", index=False)

        df_summary.to_excel(writer, sheet_name="Summary", index=False)

    rows = len(flagged) if only_flagged else len(df)
    logger.info(f"Saved report with {rows} rows to {filename}")
    return filename
