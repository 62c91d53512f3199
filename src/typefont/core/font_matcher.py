# -*- coding: utf-8 -*-
"""
src/typefont/core/font_matcher.py

Compares the recognized glyphs against one reference font and reduces the
per-character results to a single similarity score, then ranks fonts by it.
"""

import asyncio
import contextlib
import logging
import math
from typing import Callable, Dict, Iterable, Mapping, Optional

from ..errors import ComparisonError, first_error
from ..models import ComparisonResult, FontScore, GlyphImage
from .image_comparison import compare_glyphs

logger = logging.getLogger(__name__)

Metric = Callable[[GlyphImage, GlyphImage, float, bool], ComparisonResult]


async def compare_all(
    recognized: Mapping[str, GlyphImage],
    reference: Mapping[str, GlyphImage],
    threshold: float,
    same_size: bool,
    limiter: Optional[asyncio.Semaphore] = None,
    metric: Metric = compare_glyphs,
) -> Dict[str, ComparisonResult]:
    """
    Runs `metric` on every character of `recognized` against `reference`.

    One task is started per character. The blocking metric runs in a worker
    thread; `limiter`, when given, caps how many run at once. If any
    comparison fails the remaining ones are cancelled and a single
    `ComparisonError` is raised.

    Args:
        recognized: Glyphs cropped from the image, already restricted to
            characters the font has.
        reference: The font's alphabet.
        threshold (float): Pixel tolerance for the analytical metric.
        same_size (bool): Resize glyph pairs to equal dimensions first.
        limiter (asyncio.Semaphore, optional): Shared concurrency bound.
        metric: The glyph comparison function.

    Returns:
        Dict[str, ComparisonResult]: Results keyed by character; empty when
        `recognized` is empty.
    """
    missing = recognized.keys() - reference.keys()
    if missing:
        raise ComparisonError(f"Reference font lacks characters {sorted(missing)}.")

    results: Dict[str, ComparisonResult] = {}

    async def compare_one(char: str) -> None:
        async with limiter if limiter is not None else contextlib.nullcontext():
            try:
                results[char] = await asyncio.to_thread(
                    metric, recognized[char], reference[char], threshold, same_size
                )
            except ComparisonError as e:
                e.symbol = char
                raise
            except Exception as e:
                raise ComparisonError(f"Comparison of '{char}' failed: {e}", symbol=char) from e

    try:
        async with asyncio.TaskGroup() as group:
            for char in recognized:
                group.create_task(compare_one(char))
    except BaseExceptionGroup as group_error:
        raise first_error(group_error) from None

    return results


def average(comparisons: Mapping[str, ComparisonResult]) -> float:
    """
    Mean of `(perceptual + analytical) / 2` over all compared characters.

    An empty mapping has no mean; `nan` is returned and callers are expected
    to treat that font as unscored rather than failed.
    """
    if not comparisons:
        return math.nan
    return sum(result.combined for result in comparisons.values()) / len(comparisons)


def rank(scores: Iterable[FontScore]) -> Dict[str, FontScore]:
    """
    Orders font scores from most to least similar.

    Degenerate (nan) scores go last; equal scores are ordered by font name so
    the ranking does not depend on completion order.
    """
    ordered = sorted(
        scores,
        key=lambda s: (s.is_degenerate, -s.similarity if not s.is_degenerate else 0.0, s.name),
    )
    return {score.name: score for score in ordered}
