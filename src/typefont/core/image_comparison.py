# -*- coding: utf-8 -*-
"""
src/typefont/core/image_comparison.py

The two similarity metrics applied to every glyph pair:

- perceptual: Hamming distance between perceptual hashes (imagehash.phash),
  robust to small shifts and resampling artefacts.
- analytical: fraction of pixels whose grayscale difference stays within a
  threshold, a strict pixel-level check.

Both are reported as similarities in [0, 1] where 1 means identical.
"""

import cv2
import imagehash
import numpy as np
from PIL import Image

from ..errors import ComparisonError
from ..models import ComparisonResult, GlyphImage
from .image_processor import decode_base64, to_gray

HASH_SIZE = 8


def perceptual_similarity(first: np.ndarray, second: np.ndarray, hash_size: int = HASH_SIZE) -> float:
    """1 - normalized Hamming distance between the phashes of two images."""
    hash_a = imagehash.phash(Image.fromarray(to_gray(first)), hash_size=hash_size)
    hash_b = imagehash.phash(Image.fromarray(to_gray(second)), hash_size=hash_size)
    bits = hash_a.hash.size
    return 1.0 - (hash_a - hash_b) / bits


def analytical_similarity(
    first: np.ndarray,
    second: np.ndarray,
    threshold: float,
    same_size: bool = True,
) -> float:
    """
    Pixel-level similarity of two images.

    Both images are compared in grayscale on a 0-1 scale; a pixel pair is a
    mismatch when their absolute difference exceeds `threshold`.

    Args:
        first (np.ndarray): Reference geometry for resizing.
        second (np.ndarray): The other image.
        threshold (float): Per-pixel tolerance in [0, 1].
        same_size (bool): Resize `second` to `first`'s dimensions before
            comparing. When False, only the overlapping top-left region is
            compared and every pixel outside it counts as a mismatch.

    Returns:
        float: 1 - mismatched_pixels / total_pixels.
    """
    a = to_gray(first).astype(np.float32) / 255.0
    b = to_gray(second).astype(np.float32) / 255.0

    if same_size:
        if a.shape != b.shape:
            b = cv2.resize(b, (a.shape[1], a.shape[0]), interpolation=cv2.INTER_AREA)
        total = a.size
        mismatches = int(np.count_nonzero(np.abs(a - b) > threshold))
    else:
        h, w = min(a.shape[0], b.shape[0]), min(a.shape[1], b.shape[1])
        total = max(a.shape[0], b.shape[0]) * max(a.shape[1], b.shape[1])
        overlap = np.abs(a[:h, :w] - b[:h, :w]) > threshold
        mismatches = int(np.count_nonzero(overlap)) + (total - h * w)

    return 1.0 - mismatches / total


def compare_glyphs(
    first: GlyphImage,
    second: GlyphImage,
    threshold: float,
    same_size: bool = True,
) -> ComparisonResult:
    """
    Decodes two glyph payloads and runs both metrics on them.

    Raises:
        ComparisonError: If either glyph cannot be decoded or is empty.
    """
    try:
        image_a = decode_base64(first)
        image_b = decode_base64(second)
    except ValueError as e:
        raise ComparisonError(f"Could not decode glyph: {e}") from e

    if image_a.size == 0 or image_b.size == 0:
        raise ComparisonError("Cannot compare an empty glyph.")

    return ComparisonResult(
        perceptual=perceptual_similarity(image_a, image_b),
        analytical=analytical_similarity(image_a, image_b, threshold, same_size),
    )
