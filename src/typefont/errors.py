# -*- coding: utf-8 -*-
"""
src/typefont/errors.py

Exception hierarchy for Typefont.

Every failure raised out of a recognition run is a `TypefontError` whose
`stage` names the part of the pipeline that failed. The orchestrator fails
fast, so a caller only ever sees one of these per `recognize` call.
"""

from typing import Optional


class TypefontError(Exception):
    """Base exception for all recognition pipeline failures."""

    stage = "recognize"

    def __init__(self, message: str, font: Optional[str] = None):
        super().__init__(message)
        self.font = font

    def __str__(self) -> str:
        message = super().__str__()
        if self.font:
            return f"[{self.stage}:{self.font}] {message}"
        return f"[{self.stage}] {message}"


def first_error(group: BaseExceptionGroup) -> BaseException:
    """
    The first leaf exception of a (possibly nested) task group failure.

    Task groups cancel their siblings on the first failure, so the group
    normally holds a single error; this unwraps it for callers that expect
    one plain exception per failed run.
    """
    error: BaseException = group
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error


class ConfigurationError(TypefontError):
    """Raised when an option override has an unusable value."""

    stage = "configure"


class ImageLoadError(TypefontError):
    """Raised when the source image cannot be fetched or decoded."""

    stage = "image"


class RecognitionError(TypefontError):
    """Raised when the OCR engine fails on the pivot image."""

    stage = "ocr"


class CatalogFetchError(TypefontError):
    """Raised when the font index or a font file is missing or unreadable."""

    def __init__(self, message: str, font: Optional[str] = None, location: Optional[str] = None):
        super().__init__(message, font=font)
        self.location = location
        self.stage = "font" if font else "index"


class ComparisonError(TypefontError):
    """Raised when the similarity metrics fail for a character."""

    stage = "comparison"

    def __init__(self, message: str, font: Optional[str] = None, symbol: Optional[str] = None):
        super().__init__(message, font=font)
        self.symbol = symbol
