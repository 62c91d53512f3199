# -*- coding: utf-8 -*-
"""
The Core Processing Package for Typefont.

- `image_processor`: image loading, pivot preparation, cropping and the OCR wrapper.
- `symbol_extractor`: turns OCR symbols into a character -> glyph mapping.
- `domain`: restricts two glyph mappings to their shared characters.
- `image_comparison`: the perceptual and analytical glyph metrics.
- `font_matcher`: concurrent per-font comparison, score averaging and ranking.
"""

from .domain import common_keys, reduce_to_common_domain, restrict
from .font_matcher import average, compare_all, rank
from .image_comparison import compare_glyphs
from .symbol_extractor import extract_glyphs

__all__ = [
    "common_keys",
    "reduce_to_common_domain",
    "restrict",
    "average",
    "compare_all",
    "rank",
    "compare_glyphs",
    "extract_glyphs",
]
