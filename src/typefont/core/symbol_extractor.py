# -*- coding: utf-8 -*-
"""
src/typefont/core/symbol_extractor.py

Turns OCR output into the character -> glyph mapping that gets compared
against every reference font.
"""

import logging
from typing import Dict, Iterable, Tuple

import numpy as np

from ..models import GlyphImage, Symbol
from .image_processor import crop, encode_base64

logger = logging.getLogger(__name__)


def _select_glyphs(
    image: np.ndarray, symbols: Iterable[Symbol], min_confidence: float, duplicates: str
) -> Dict[str, Tuple[Symbol, np.ndarray]]:
    selected: Dict[str, Tuple[Symbol, np.ndarray]] = {}
    for symbol in symbols:
        if symbol.confidence <= min_confidence:
            logger.debug(f"Rejected char: '{symbol.text}' with confidence {symbol.confidence:.1f}")
            continue

        fragment = crop(image, symbol.bbox)
        if fragment.size == 0:
            logger.debug(f"Skipping '{symbol.text}': bounding box {tuple(symbol.bbox)} is outside the image.")
            continue

        current = selected.get(symbol.text)
        if current is None or duplicates == "last":
            selected[symbol.text] = (symbol, fragment)
        elif duplicates == "best" and symbol.confidence > current[0].confidence:
            selected[symbol.text] = (symbol, fragment)
        # "first": keep what we have

        logger.debug(f"Accepted char: '{symbol.text}' with confidence {symbol.confidence:.1f}")
    return selected


def extract_glyphs(
    image: np.ndarray,
    symbols: Iterable[Symbol],
    min_confidence: float,
    duplicates: str = "last",
) -> Dict[str, GlyphImage]:
    """
    Crops every sufficiently confident symbol out of `image`.

    Only symbols with `confidence > min_confidence` are kept. When the same
    character is recognized more than once, `duplicates` decides which
    occurrence supplies the glyph:

    - "last": the last accepted occurrence in OCR reading order.
    - "first": the first accepted occurrence.
    - "best": the most confident occurrence; ties keep the earlier one.

    Occurrences whose box lies outside the image never take part in the
    selection.

    Args:
        image (np.ndarray): The pivot image the OCR ran on.
        symbols (Iterable[Symbol]): OCR output in reading order.
        min_confidence (float): Exclusive confidence floor, 0-100.
        duplicates (str): Duplicate-character policy.

    Returns:
        Dict[str, GlyphImage]: Base64 PNG crops keyed by character.
    """
    glyphs: Dict[str, GlyphImage] = {}
    for char, (_, fragment) in _select_glyphs(image, symbols, min_confidence, duplicates).items():
        glyphs[char] = encode_base64(fragment)

    logger.info(f"Extracted {len(glyphs)} glyphs: {''.join(sorted(glyphs))!r}")
    return glyphs

