"""Tests for confidence filtering and duplicate handling in glyph extraction."""

import numpy as np
import pytest

from typefont.core.image_processor import decode_base64
from typefont.core.symbol_extractor import extract_glyphs
from typefont.models import BoundingBox, Symbol


@pytest.fixture
def striped_image() -> np.ndarray:
    """Three 10px-wide vertical bands with distinct gray levels."""
    image = np.zeros((10, 30, 3), dtype=np.uint8)
    image[:, 0:10] = 50
    image[:, 10:20] = 150
    image[:, 20:30] = 250
    return image


def band(index: int) -> BoundingBox:
    return BoundingBox(index * 10, 0, (index + 1) * 10, 10)


class TestConfidenceFilter:
    def test_keeps_only_symbols_above_threshold(self, striped_image):
        symbols = [
            Symbol("A", band(0), 95.0),
            Symbol("B", band(1), 10.0),
            Symbol("C", band(2), 31.0),
        ]
        glyphs = extract_glyphs(striped_image, symbols, min_confidence=30)
        assert set(glyphs) == {"A", "C"}

    def test_threshold_is_exclusive(self, striped_image):
        glyphs = extract_glyphs(striped_image, [Symbol("A", band(0), 30.0)], min_confidence=30)
        assert glyphs == {}

    def test_glyph_is_the_cropped_region(self, striped_image):
        glyphs = extract_glyphs(striped_image, [Symbol("B", band(1), 99.0)], min_confidence=30)
        crop = decode_base64(glyphs["B"])
        assert crop.shape == (10, 10, 3)
        assert np.all(crop == 150)

    def test_box_outside_image_is_skipped(self, striped_image):
        symbols = [Symbol("Z", BoundingBox(100, 100, 120, 120), 99.0)]
        assert extract_glyphs(striped_image, symbols, min_confidence=30) == {}

    def test_box_is_clamped_to_image(self, striped_image):
        symbols = [Symbol("C", BoundingBox(20, -5, 40, 20), 99.0)]
        crop = decode_base64(extract_glyphs(striped_image, symbols, min_confidence=30)["C"])
        assert crop.shape == (10, 10, 3)


class TestDuplicateCharacters:
    @pytest.fixture
    def duplicates(self):
        # Same character three times, each over a different band.
        return [
            Symbol("A", band(0), 60.0),
            Symbol("A", band(1), 90.0),
            Symbol("A", band(2), 70.0),
        ]

    def level(self, glyphs) -> int:
        return int(decode_base64(glyphs["A"])[0, 0, 0])

    def test_last_occurrence_wins_by_default(self, striped_image, duplicates):
        glyphs = extract_glyphs(striped_image, duplicates, min_confidence=30)
        assert self.level(glyphs) == 250

    def test_first_policy(self, striped_image, duplicates):
        glyphs = extract_glyphs(striped_image, duplicates, min_confidence=30, duplicates="first")
        assert self.level(glyphs) == 50

    def test_best_policy(self, striped_image, duplicates):
        glyphs = extract_glyphs(striped_image, duplicates, min_confidence=30, duplicates="best")
        assert self.level(glyphs) == 150

    def test_rejected_duplicate_does_not_overwrite(self, striped_image):
        symbols = [Symbol("A", band(0), 90.0), Symbol("A", band(2), 5.0)]
        glyphs = extract_glyphs(striped_image, symbols, min_confidence=30)
        assert self.level(glyphs) == 50

    @pytest.mark.parametrize("policy", ["last", "best"])
    def test_out_of_image_duplicate_does_not_drop_the_character(self, striped_image, policy):
        symbols = [Symbol("A", band(0), 60.0), Symbol("A", BoundingBox(500, 0, 540, 10), 90.0)]
        glyphs = extract_glyphs(striped_image, symbols, min_confidence=30, duplicates=policy)
        assert self.level(glyphs) == 50
