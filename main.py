"""
GB Detector - Batch Scanner.

Reads comments from a CSV/Excel export or a plain text file (one comment
per line), runs the gambling promotion detector over them and writes a
CSV or Excel report.

Usage:
    python main.py comments.csv --output report.xlsx --sensitivity 2
    python main.py comments.txt --language id --only-flagged
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from core.constants import (
    APP_DESCRIPTION,
    APP_NAME,
    APP_VERSION,
    DEFAULT_REPORT_FILE,
    DEFAULT_TEXT_COLUMN,
)
from core.settings import DetectorSettings, SettingsManager, load_patterns
from core.validators import LanguageValidator, SensitivityValidator
from gambling_detector import build_options_from_settings, create_detector
from reporting import save_to_csv, save_to_excel, summarize

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = (".xlsx",)


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="gbdetector",
        description=f"{APP_NAME} v{APP_VERSION} - {APP_DESCRIPTION}",
    )
    parser.add_argument("input", help="CSV/Excel file with a text column, or a text file with one comment per line")
    parser.add_argument("-o", "--output", default=DEFAULT_REPORT_FILE, help="Report file (.csv or .xlsx)")
    parser.add_argument("-s", "--sensitivity", help="Sensitivity 1 (aggressive) to 5 (strict), or a level name")
    parser.add_argument("-l", "--language", help="Language: en, id, zh, vi, th or all")
    parser.add_argument("--settings", help="Detector settings JSON file")
    parser.add_argument("--patterns", help="Pattern file (.json object of arrays or newline list)")
    parser.add_argument("--text-column", default=DEFAULT_TEXT_COLUMN, help="Column holding comment text")
    parser.add_argument("--only-flagged", action="store_true", help="Write only comments flagged as gambling")
    parser.add_argument("--debug", action="store_true", help="Log every detection stage")
    return parser


def read_comments(path: Path, text_column: str) -> List[str]:
    """
    Read comments from a file.

    Args:
        path: CSV, Excel or plain text file
        text_column: Column name for tabular files

    Returns:
        List of comment texts

    Raises:
        KeyError: If a tabular file has no such column
    """
    suffix = path.suffix.lower()

    if suffix == ".csv" or suffix in EXCEL_SUFFIXES:
        if suffix == ".csv":
            df = pd.read_csv(path, encoding="utf-8-sig")
        else:
            df = pd.read_excel(path, engine="openpyxl")
        if text_column not in df.columns:
            raise KeyError(f"Column '{text_column}' not found (available: {', '.join(map(str, df.columns))})")
        return df[text_column].fillna("").astype(str).tolist()

    with open(path, "r", encoding="utf-8") as f:
        return [line.rstrip("\n") for line in f if line.strip()]


def load_settings(args: argparse.Namespace) -> DetectorSettings:
    """Load settings from file, then apply command-line values."""
    settings = SettingsManager(args.settings).load() if args.settings else DetectorSettings()

    if args.sensitivity is not None:
        settings.sensitivity_level, warning = SensitivityValidator.parse(args.sensitivity)
        if warning:
            logger.warning(warning)

    if args.language is not None:
        settings.language, warning = LanguageValidator.parse(args.language)
        if warning:
            logger.warning(warning)

    return settings


def main(argv: Optional[List[str]] = None) -> int:
    """Run the batch scanner."""
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {input_path}")
        return 1

    try:
        comments = read_comments(input_path, args.text_column)
    except (KeyError, OSError, UnicodeDecodeError, ValueError) as e:
        logger.error(f"Failed to read comments: {e}")
        return 1

    options = build_options_from_settings(load_settings(args)).merged(debug=args.debug)
    detector = create_detector(options)
    if args.patterns:
        patterns = load_patterns(args.patterns)
        if patterns.is_empty:
            logger.warning(f"No patterns loaded from {args.patterns}")
        detector = detector.with_patterns(patterns)

    logger.info(f"Scanning {len(comments)} comments from {input_path}")
    results = detector.detect_batch(comments)

    output = Path(args.output)
    try:
        if output.suffix.lower() in EXCEL_SUFFIXES:
            save_to_excel(comments, results, str(output), only_flagged=args.only_flagged)
        else:
            save_to_csv(comments, results, str(output), only_flagged=args.only_flagged)
    except OSError as e:
        logger.error(f"Failed to write report: {e}")
        return 1

    summary = summarize(results)
    logger.info(
        f"Done: {summary['flagged']}/{summary['total']} flagged "
        f"(high={summary['high']}, medium={summary['medium']}, low={summary['low']})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
