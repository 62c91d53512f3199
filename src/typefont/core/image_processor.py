# -*- coding: utf-8 -*-
"""
src/typefont/core/image_processor.py

Image primitives and the OCR wrapper used by the recognition branch.

This module is responsible for loading the source image, deciding whether it
should be binarized before OCR, running it through EasyOCR to get
per-character boxes, and cropping/encoding individual glyphs.
"""

import asyncio
import base64
import binascii
import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional

import cv2
import easyocr
import httpx
import numpy as np

from ..config import DEFAULT_LANGUAGE, DEFAULT_WHITELIST
from ..errors import ImageLoadError, RecognitionError
from ..models import BoundingBox, GlyphImage, Symbol

logger = logging.getLogger(__name__)

# --- Module-level Configuration ---

# Images whose mean brightness falls strictly inside this range are
# binarized before OCR; very dark and very bright images are left alone.
BINARIZE_MIN_BRIGHTNESS = 25
BINARIZE_MAX_BRIGHTNESS = 125

# Tesseract-style language codes mapped to the ones EasyOCR expects.
LANGUAGE_CODES = {
    "eng": "en",
    "fra": "fr",
    "deu": "de",
    "spa": "es",
    "ita": "it",
    "por": "pt",
    "nld": "nl",
}

DATA_URI_PREFIX = "data:"
HTTP_TIMEOUT = 30.0


# =============================================================================
# Loading and encoding
# =============================================================================

def _decode_bytes(data: bytes, source: str) -> np.ndarray:
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None
    if image is None:
        raise ImageLoadError(f"Could not decode image data from {source!r}.")
    return image


async def load_image(source: str, client: Optional[httpx.AsyncClient] = None) -> np.ndarray:
    """
    Loads an image from a local path, an http(s) URL or a data URI.

    Args:
        source (str): Where to read the image from.
        client (httpx.AsyncClient, optional): Client used for URLs. A
            temporary one is created when omitted.

    Returns:
        np.ndarray: The decoded image in BGR order.

    Raises:
        ImageLoadError: If the image cannot be fetched or decoded.
    """
    source = str(source)

    if source.startswith(DATA_URI_PREFIX):
        try:
            _, payload = source.split(",", 1)
            data = base64.b64decode(payload, validate=True)
        except (ValueError, binascii.Error) as e:
            raise ImageLoadError(f"Malformed data URI: {e}") from e

    elif source.startswith(("http://", "https://")):
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=HTTP_TIMEOUT, follow_redirects=True) as temp:
                    response = await temp.get(source)
            else:
                response = await client.get(source)
            response.raise_for_status()
            data = response.content
        except httpx.HTTPError as e:
            raise ImageLoadError(f"Failed to fetch image {source}: {e}") from e

    else:
        try:
            data = await asyncio.to_thread(Path(source).read_bytes)
        except OSError as e:
            raise ImageLoadError(f"Failed to read image {source}: {e}") from e

    image = await asyncio.to_thread(_decode_bytes, data, source)
    logger.info(f"Loaded image {source[:64]!r} with shape {image.shape}.")
    return image


def encode_base64(image: np.ndarray) -> GlyphImage:
    """Encodes an image as a base64 PNG payload (without a data URI prefix)."""
    ok, buffer = cv2.imencode(".png", image)
    if not ok:
        raise ValueError(f"Could not PNG-encode an image of shape {image.shape}.")
    return base64.b64encode(buffer.tobytes()).decode("ascii")


def decode_base64(glyph: GlyphImage) -> np.ndarray:
    """
    Decodes a base64 PNG payload into a BGR image.

    A leading `data:image/...;base64,` prefix is tolerated. Transparent
    pixels are flattened onto a white background, which is how reference
    alphabets are usually exported.

    Raises:
        ValueError: If the payload is not a decodable image.
    """
    if glyph.startswith(DATA_URI_PREFIX):
        glyph = glyph.split(",", 1)[-1]
    try:
        raw = base64.b64decode(glyph, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Glyph is not valid base64: {e}") from e

    buffer = np.frombuffer(raw, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED) if buffer.size else None
    if image is None:
        raise ValueError("Glyph payload is not a decodable image.")
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        alpha = image[:, :, 3:4].astype(np.float32) / 255.0
        rgb = image[:, :, :3].astype(np.float32)
        flattened = rgb * alpha + 255.0 * (1.0 - alpha)
        return flattened.astype(np.uint8)
    return image


# =============================================================================
# Pixel operations
# =============================================================================

def to_gray(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return image
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def brightness(image: np.ndarray) -> float:
    """Mean luma of the image on a 0-255 scale."""
    if image.size == 0:
        return 0.0
    return float(np.mean(to_gray(image)))


def binarize(image: np.ndarray, threshold: float) -> np.ndarray:
    """
    Thresholds the image to pure black and white.

    Pixels brighter than `threshold` become white (255), the rest black.
    The result keeps three channels so it can be cropped and encoded like
    the original.
    """
    _, binary = cv2.threshold(to_gray(image), threshold, 255, cv2.THRESH_BINARY)
    return cv2.cvtColor(binary, cv2.COLOR_GRAY2BGR)


def prepare_pivot(image: np.ndarray) -> np.ndarray:
    """
    Returns the image OCR and glyph cropping should work on.

    Mid-dark images (brightness strictly between 25 and 125) are binarized
    using their own brightness as the threshold, which gives the OCR engine
    cleaner edges. Anything else is used as-is.
    """
    level = brightness(image)
    if BINARIZE_MIN_BRIGHTNESS < level < BINARIZE_MAX_BRIGHTNESS:
        logger.debug(f"Binarizing pivot image at brightness {level:.1f}.")
        return binarize(image, level)
    logger.debug(f"Using pivot image as-is (brightness {level:.1f}).")
    return image


def crop(image: np.ndarray, bbox: BoundingBox) -> np.ndarray:
    """Crops `bbox` out of `image`, clamped to the image bounds. May return an empty array."""
    h, w = image.shape[:2]
    x0, x1 = max(0, min(bbox.x0, w)), max(0, min(bbox.x1, w))
    y0, y1 = max(0, min(bbox.y0, h)), max(0, min(bbox.y1, h))
    return image[y0:y1, x0:x1]


# =============================================================================
# OCR
# =============================================================================

class OpticalRecognition:
    """
    Wraps EasyOCR and reports one `Symbol` per recognized character.

    Readers are created lazily, once per language set, because loading the
    model is slow. An instance can therefore be shared across recognition
    runs; `recognize_text` is blocking and is meant to be called from a
    worker thread.
    """

    def __init__(self, gpu: bool = False):
        self.gpu = gpu
        self._readers: Dict[str, easyocr.Reader] = {}
        self._lock = threading.Lock()

    def _get_reader(self, lang: str) -> easyocr.Reader:
        code = LANGUAGE_CODES.get(lang, lang)
        with self._lock:
            if code not in self._readers:
                logger.info(f"Initializing EasyOCR Reader for language '{code}'...")
                self._readers[code] = easyocr.Reader([code], gpu=self.gpu)
                logger.info("EasyOCR Reader initialized successfully.")
            return self._readers[code]

    def recognize_text(
        self,
        image: np.ndarray,
        lang: str = DEFAULT_LANGUAGE,
        character_whitelist: str = DEFAULT_WHITELIST,
    ) -> List[Symbol]:
        """
        Runs OCR on `image` and splits every detected word into characters.

        EasyOCR only reports word or line boxes, so each box is divided into
        equal-width slices, one per character. Characters outside the
        whitelist are dropped.

        Args:
            image (np.ndarray): The pivot image.
            lang (str): Language code, Tesseract (`eng`) or EasyOCR (`en`) style.
            character_whitelist (str): Characters the engine may report.

        Returns:
            List[Symbol]: Symbols in reading order, confidence on a 0-100 scale.

        Raises:
            RecognitionError: If the engine fails to load or to run.
        """
        try:
            reader = self._get_reader(lang)
            results = reader.readtext(
                image,
                detail=1,
                paragraph=False,
                allowlist=character_whitelist or None,
            )
        except Exception as e:
            logger.error(f"An error occurred during OCR processing: {e}")
            raise RecognitionError(f"OCR engine failed: {e}") from e

        symbols: List[Symbol] = []
        for (points, text, conf) in results:
            text = (text or "").strip()
            if not text:
                continue

            # The box is four corner points; take their extent.
            xs = [p[0] for p in points]
            ys = [p[1] for p in points]
            x0, x1 = int(min(xs)), int(round(max(xs)))
            y0, y1 = int(min(ys)), int(round(max(ys)))
            if x1 <= x0 or y1 <= y0:
                continue

            step = (x1 - x0) / len(text)
            for i, char in enumerate(text):
                if character_whitelist and char not in character_whitelist:
                    continue
                bbox = BoundingBox(
                    int(x0 + i * step), y0, int(round(x0 + (i + 1) * step)), y1
                )
                symbols.append(Symbol(char, bbox, float(conf) * 100.0))

        logger.info(f"OCR complete. Found {len(symbols)} characters in {len(results)} text blocks.")
        return symbols
