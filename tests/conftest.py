"""Pytest configuration and shared fixtures for Typefont tests."""

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional

import cv2
import numpy as np
import pytest

from typefont.core.image_processor import encode_base64
from typefont.models import BoundingBox, Symbol


def draw_glyph(char: str, size: int = 40, thickness: int = 2) -> np.ndarray:
    """Black character on a white square, drawn with OpenCV's Hershey font."""
    image = np.full((size, size, 3), 255, dtype=np.uint8)
    cv2.putText(image, char, (6, size - 8), cv2.FONT_HERSHEY_SIMPLEX, 1.0, (0, 0, 0), thickness)
    return image


def glyph_b64(char: str, size: int = 40, thickness: int = 2) -> str:
    return encode_base64(draw_glyph(char, size, thickness))


class FakeOCR:
    """Stands in for the EasyOCR wrapper; returns canned symbols."""

    def __init__(self, symbols: Optional[List[Symbol]] = None, error: Optional[Exception] = None):
        self.symbols = symbols or []
        self.error = error
        self.calls = []

    def recognize_text(self, image, lang="eng", character_whitelist=""):
        self.calls.append((image.shape, lang, character_whitelist))
        if self.error is not None:
            raise self.error
        return list(self.symbols)


@pytest.fixture
def sample_image(tmp_path: Path) -> Path:
    """A bright 40x120 PNG with three drawn characters."""
    canvas = np.full((40, 120, 3), 255, dtype=np.uint8)
    for i, char in enumerate("ABC"):
        canvas[:, i * 40:(i + 1) * 40] = draw_glyph(char)
    path = tmp_path / "sample.png"
    cv2.imwrite(str(path), canvas)
    return path


@pytest.fixture
def symbols_abc() -> List[Symbol]:
    return [
        Symbol("A", BoundingBox(0, 0, 40, 40), 95.0),
        Symbol("B", BoundingBox(40, 0, 80, 40), 88.0),
        Symbol("C", BoundingBox(80, 0, 120, 40), 91.0),
    ]


@pytest.fixture
def make_catalog(tmp_path: Path) -> Callable[..., Dict[str, str]]:
    """
    Writes a font catalog under tmp_path and returns the matching options.

    Usage: make_catalog({"fontA": {"meta": {...}, "alpha": {...}}}, index=[...])
    """

    def _make(fonts: Dict[str, dict], index: Optional[List[str]] = None) -> Dict[str, str]:
        root = tmp_path / "storage"
        fonts_dir = root / "fonts"
        for name, content in fonts.items():
            font_dir = fonts_dir / name
            font_dir.mkdir(parents=True, exist_ok=True)
            (font_dir / "data.json").write_text(json.dumps(content), encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        index_path = root / "index.json"
        index_path.write_text(json.dumps({"index": index if index is not None else list(fonts)}))
        return {
            "fontsIndex": str(index_path),
            "fontsDirectory": f"{fonts_dir}/",
            "fontsData": "data.json",
        }

    return _make
