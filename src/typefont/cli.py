# -*- coding: utf-8 -*-
"""
src/typefont/cli.py

Command line entry point: `typefont IMAGE [options]`.

Defaults come from the user's config.ini (see `typefont.config.Config`);
flags given on the command line override them for this run only.
"""

import argparse
import asyncio
import json
import logging
import math
import sys
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .app import Typefont
from .config import DUPLICATE_POLICIES, Config
from .errors import TypefontError
from .models import ComparisonResult, FontScore
from .utils.clipboard_manager import copy_to_clipboard

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="typefont",
        description="Identify the typeface of the text in an image by comparing its glyphs to a font catalog",
    )
    parser.add_argument("image", help="Path, http(s) URL or data URI of the image to recognize")
    parser.add_argument("--fonts-index", help="Path or URL of the fonts index JSON file")
    parser.add_argument("--fonts-directory", help="Path or URL prefix of the per-font directories")
    parser.add_argument("--fonts-data", help="Name of the JSON data file inside each font directory")
    parser.add_argument("--min-confidence", type=float, help="Minimum OCR confidence (0-100) for a glyph")
    parser.add_argument("--threshold", type=float, help="Pixel tolerance of the analytical comparison (0-1)")
    parser.add_argument("--no-same-size", action="store_true", help="Do not rescale glyph pairs before comparing")
    parser.add_argument("--duplicates", choices=DUPLICATE_POLICIES, help="Which occurrence of a repeated character to use")
    parser.add_argument("--lang", help="OCR language code (e.g. eng)")
    parser.add_argument("--top", type=int, help="Number of matches to print")
    parser.add_argument("--json", action="store_true", help="Print the full ranking as JSON")
    parser.add_argument("--copy", action="store_true", help="Copy the best match's name to the clipboard")
    parser.add_argument("--show", action="store_true", help="Show the ranking in a results window")
    parser.add_argument("--config-dir", type=Path, help="Directory holding config.ini")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> Dict[str, object]:
    """Option overrides for the flags that were actually given."""
    flags = {
        "fonts_index": args.fonts_index,
        "fonts_directory": args.fonts_directory,
        "fonts_data": args.fonts_data,
        "min_symbol_confidence": args.min_confidence,
        "analytic_comparison_threshold": args.threshold,
        "duplicate_symbols": args.duplicates,
        "language": args.lang,
    }
    overrides = {key: value for key, value in flags.items() if value is not None}
    if args.no_same_size:
        overrides["same_size_comparison"] = False
    return overrides


def log_progress(name: str, comparisons: Mapping[str, ComparisonResult], fraction: float) -> None:
    logger.info(f"[{fraction:6.1%}] {name}: compared {len(comparisons)} characters")


def to_json(ranking: Mapping[str, FontScore]) -> str:
    payload = {}
    for name, score in ranking.items():
        entry = score.to_dict()
        if math.isnan(entry["similarity"]):
            entry["similarity"] = None
        payload[name] = entry
    return json.dumps(payload, indent=2)


def print_ranking(ranking: Mapping[str, FontScore], top: int) -> None:
    if not ranking:
        print("No fonts in the catalog.")
        return
    print("Top Matches:")
    for i, score in enumerate(list(ranking.values())[:top], start=1):
        similarity = "n/a" if score.is_degenerate else f"{score.similarity:.4f}"
        print(f"{i:>3}. {score.name:<32} {similarity:>8}  ({score.compared} chars)")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        config = Config(args.config_dir)
        app = Typefont(config.to_options())
        ranking = asyncio.run(app.recognize(args.image, build_overrides(args), progress=log_progress))
    except TypefontError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    top = args.top if args.top is not None else config.results_count
    if args.json:
        print(to_json(ranking))
    else:
        print_ranking(ranking, top)

    scores = list(ranking.values())
    copied = False
    if args.copy and scores and not scores[0].is_degenerate:
        copied = copy_to_clipboard(scores[0].name)

    if args.show:
        from .gui.results_window import show_results
        show_results(scores[:top], copied=copied)

    return 0


if __name__ == '__main__':
    sys.exit(main())
