"""
Typefont Package.

Identifies the typeface used to render the text in an image: glyphs
recognized by OCR are compared against every font of a reference catalog
with a perceptual and a pixel-level metric, and fonts are ranked by their
average similarity.

Typical use:

    from typefont import recognize_sync
    ranking = recognize_sync("sample.png", fontsIndex="storage/index.json")
"""

__version__ = "0.1.0"

from .app import Typefont, recognize, recognize_sync
from .config import Config, RecognitionOptions
from .errors import (
    CatalogFetchError,
    ComparisonError,
    ConfigurationError,
    ImageLoadError,
    RecognitionError,
    TypefontError,
)
from .models import BoundingBox, ComparisonResult, Font, FontScore, RecognitionResult, Symbol

__all__ = [
    "Typefont",
    "recognize",
    "recognize_sync",
    "Config",
    "RecognitionOptions",
    "TypefontError",
    "ConfigurationError",
    "ImageLoadError",
    "RecognitionError",
    "CatalogFetchError",
    "ComparisonError",
    "BoundingBox",
    "Symbol",
    "RecognitionResult",
    "Font",
    "ComparisonResult",
    "FontScore",
]
