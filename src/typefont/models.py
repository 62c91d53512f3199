# -*- coding: utf-8 -*-
"""
src/typefont/models.py

Plain data types passed between the stages of a recognition run.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, NamedTuple, Tuple

import numpy as np

# A glyph travels through the pipeline as a base64-encoded PNG fragment,
# the same representation used by the "alpha" section of a font data file.
GlyphImage = str

FontIndex = Tuple[str, ...]


class BoundingBox(NamedTuple):
    """Pixel rectangle of a recognized symbol, (x0, y0) inclusive, (x1, y1) exclusive."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0


@dataclass(frozen=True)
class Symbol:
    """A single character reported by the OCR engine."""

    text: str
    bbox: BoundingBox
    confidence: float  # 0-100


@dataclass(frozen=True)
class RecognitionResult:
    """
    Output of the image recognition branch.

    `glyphs` is read-only; font evaluations take private copies of the
    characters they need instead of reducing it in place.
    """

    symbols: Tuple[Symbol, ...]
    glyphs: Mapping[str, GlyphImage]
    pivot: np.ndarray = field(repr=False, compare=False)

    @classmethod
    def build(cls, symbols, glyphs: Dict[str, GlyphImage], pivot: np.ndarray) -> "RecognitionResult":
        return cls(tuple(symbols), MappingProxyType(dict(glyphs)), pivot)


@dataclass(frozen=True)
class Font:
    """A reference font: free-form metadata plus its rendered alphabet."""

    name: str
    meta: Mapping[str, Any]
    alphabet: Mapping[str, GlyphImage]


@dataclass(frozen=True)
class ComparisonResult:
    """Similarity of one character pair; both metrics are in [0, 1], 1 meaning identical."""

    perceptual: float
    analytical: float

    @property
    def combined(self) -> float:
        return (self.perceptual + self.analytical) / 2


@dataclass(frozen=True)
class FontScore:
    """The ranked, user-visible result for one font."""

    name: str
    meta: Mapping[str, Any]
    similarity: float
    compared: int = 0

    @property
    def is_degenerate(self) -> bool:
        # No characters in common with the image: the mean is undefined.
        return math.isnan(self.similarity)

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.meta)
        result["similarity"] = self.similarity
        return result
