# -*- coding: utf-8 -*-
"""
src/typefont/app.py

Recognition orchestrator for Typefont.

This module contains `Typefont`, which drives a full recognition run:

1. Merge per-call overrides into a fresh `RecognitionOptions`.
2. Recognize the image (load, conditional binarization, OCR, glyph
   extraction) while the font index is fetched.
3. Evaluate every indexed font concurrently: fetch it, restrict both glyph
   sets to the characters they share, compare, and average.
4. Rank the fonts once every evaluation has finished.

Any failure cancels all work still in flight and is raised as a single
`TypefontError` naming the failing stage.
"""

import asyncio
import logging
import math
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config import RecognitionOptions
from .core.domain import common_keys, restrict
from .core.font_matcher import Metric, average, compare_all, rank
from .core.image_comparison import compare_glyphs
from .core.image_processor import OpticalRecognition, load_image, prepare_pivot
from .core.symbol_extractor import extract_glyphs
from .errors import ComparisonError, RecognitionError, TypefontError, first_error
from .models import ComparisonResult, FontIndex, FontScore, GlyphImage, RecognitionResult
from .storage.font_storage import FontStorage

logger = logging.getLogger(__name__)

StorageFactory = Callable[[RecognitionOptions], FontStorage]


def default_storage(options: RecognitionOptions) -> FontStorage:
    return FontStorage(options.fonts_index, options.fonts_directory, options.fonts_data)


class Typefont:
    """
    Identifies the typeface of the text in an image.

    An instance holds only immutable defaults and long-lived collaborators
    (the OCR engine, the storage factory, the glyph metric), so it can serve
    overlapping `recognize` calls.
    """

    def __init__(
        self,
        options: Optional[RecognitionOptions] = None,
        ocr: Optional[OpticalRecognition] = None,
        storage_factory: StorageFactory = default_storage,
        metric: Metric = compare_glyphs,
    ):
        self.options = options or RecognitionOptions()
        self._ocr = ocr
        self.storage_factory = storage_factory
        self.metric = metric

    @property
    def ocr(self) -> OpticalRecognition:
        # EasyOCR is slow to load; create it only when an image is recognized.
        if self._ocr is None:
            self._ocr = OpticalRecognition()
        return self._ocr

    async def recognize(
        self,
        image_source: str,
        options: Optional[Mapping[str, Any]] = None,
        **overrides: Any,
    ) -> Dict[str, FontScore]:
        """
        Ranks every catalog font by similarity to the text in `image_source`.

        Args:
            image_source (str): Path, http(s) URL or data URI of the image.
            options (Mapping, optional): Per-call overrides, camelCase or
                snake_case names.
            **overrides: More overrides, e.g. `min_symbol_confidence=50`.

        Returns:
            Dict[str, FontScore]: Font name to score, best match first.
            Fonts sharing no character with the image have a nan similarity
            and are listed last.

        Raises:
            TypefontError: The first failure of any stage.
        """
        opts = self.options.merged(options, **overrides)

        try:
            async with self.storage_factory(opts) as storage:
                recognition, index = await self._prepare(image_source, storage, opts)
                scores = await self._evaluate_fonts(storage, recognition, index, opts)
        except TypefontError as e:
            logger.error(f"Recognition of {str(image_source)[:64]!r} failed: {e}")
            raise

        ranking = rank(scores)
        logger.info(f"Ranked {len(ranking)} fonts for {str(image_source)[:64]!r}.")
        return ranking

    async def recognize_image(self, image_source: str, opts: RecognitionOptions) -> RecognitionResult:
        """Loads the image, prepares the pivot, runs OCR and extracts glyphs."""
        image = await load_image(image_source)
        pivot = await asyncio.to_thread(prepare_pivot, image)

        try:
            symbols = await asyncio.to_thread(
                self.ocr.recognize_text, pivot, opts.language, opts.character_whitelist
            )
        except RecognitionError:
            raise
        except Exception as e:
            raise RecognitionError(f"OCR engine failed: {e}") from e

        try:
            glyphs = await asyncio.to_thread(
                extract_glyphs, pivot, symbols, opts.min_symbol_confidence, opts.duplicate_symbols
            )
        except Exception as e:
            raise RecognitionError(f"Glyph extraction failed: {e}") from e
        if not glyphs:
            logger.warning("OCR did not find any characters with sufficient confidence.")
        return RecognitionResult.build(symbols, glyphs, pivot)

    async def _prepare(
        self,
        image_source: str,
        storage: FontStorage,
        opts: RecognitionOptions,
    ) -> Tuple[RecognitionResult, FontIndex]:
        try:
            async with asyncio.TaskGroup() as group:
                recognition = group.create_task(self.recognize_image(image_source, opts))
                index = group.create_task(storage.fetch_index())
        except BaseExceptionGroup as e:
            raise first_error(e) from None
        return recognition.result(), index.result()

    async def evaluate_font(
        self,
        storage: FontStorage,
        name: str,
        glyphs: Mapping[str, GlyphImage],
        opts: RecognitionOptions,
        limiter: Optional[asyncio.Semaphore] = None,
    ) -> Tuple[FontScore, Dict[str, ComparisonResult]]:
        """
        Scores a single font against the recognized glyphs.

        `glyphs` is only read: the comparison works on private copies
        restricted to the characters both sides have.
        """
        font = await storage.fetch_font(name)

        shared = common_keys(glyphs, font.alphabet)
        try:
            comparisons = await compare_all(
                restrict(glyphs, shared),
                restrict(font.alphabet, shared),
                opts.analytic_comparison_threshold,
                opts.same_size_comparison,
                limiter=limiter,
                metric=self.metric,
            )
        except ComparisonError as e:
            e.font = name
            raise

        similarity = average(comparisons)
        if math.isnan(similarity):
            logger.warning(f"Font '{name}' shares no characters with the image; leaving it unscored.")
        else:
            logger.debug(f"Font '{name}': similarity {similarity:.4f} over {len(comparisons)} characters.")

        return FontScore(name, font.meta, similarity, len(comparisons)), comparisons

    async def _evaluate_fonts(
        self,
        storage: FontStorage,
        recognition: RecognitionResult,
        index: FontIndex,
        opts: RecognitionOptions,
    ) -> List[FontScore]:
        font_limiter = asyncio.Semaphore(opts.max_concurrent_fonts)
        comparison_limiter = asyncio.Semaphore(opts.max_concurrent_comparisons)
        scores: List[FontScore] = []
        completed = 0

        async def evaluate(name: str) -> None:
            nonlocal completed
            async with font_limiter:
                score, comparisons = await self.evaluate_font(
                    storage, name, recognition.glyphs, opts, comparison_limiter
                )
            scores.append(score)
            completed += 1
            if opts.progress is not None:
                opts.progress(name, comparisons, completed / len(index))

        try:
            async with asyncio.TaskGroup() as group:
                for name in index:
                    group.create_task(evaluate(name))
        except BaseExceptionGroup as e:
            raise first_error(e) from None
        return scores


_default_app: Optional[Typefont] = None


async def recognize(
    image_source: str,
    options: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> Dict[str, FontScore]:
    """Recognizes with a shared default `Typefont`, reusing its OCR models across calls."""
    global _default_app
    if _default_app is None:
        _default_app = Typefont()
    return await _default_app.recognize(image_source, options, **overrides)


def recognize_sync(
    image_source: str,
    options: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> Dict[str, FontScore]:
    """Blocking wrapper around `recognize` for scripts without an event loop."""
    return asyncio.run(recognize(image_source, options, **overrides))
