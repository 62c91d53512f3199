# -*- coding: utf-8 -*-
"""
src/typefont/config.py

Module for handling recognition configuration.

Two layers live here:

- `Config` loads user defaults from a `config.ini` file in the application
  data directory, creating one with default values on the first run.
- `RecognitionOptions` is the immutable option set threaded through a single
  recognition run. Overrides never mutate an existing instance; `merged()`
  always returns a new one, so overlapping runs cannot observe each other's
  settings.
"""

import configparser
import dataclasses
import logging
import platform
import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# --- Constants ---
APP_NAME = "Typefont"
DEFAULT_CONFIG_FILENAME = "config.ini"

DEFAULT_MIN_SYMBOL_CONFIDENCE = 30.0
DEFAULT_ANALYTIC_THRESHOLD = 0.52161
DEFAULT_FONTS_DIRECTORY = "storage/fonts/"
DEFAULT_FONTS_DATA = "data.json"
DEFAULT_FONTS_INDEX = "storage/index.json"
DEFAULT_LANGUAGE = "eng"
DEFAULT_WHITELIST = string.ascii_letters + string.digits

DUPLICATE_POLICIES = ("last", "first", "best")

# Public option names as used in font catalogs and by JS-style callers,
# mapped onto the dataclass fields below.
OPTION_ALIASES = {
    "minSymbolConfidence": "min_symbol_confidence",
    "analyticComparisonThreshold": "analytic_comparison_threshold",
    "sameSizeComparison": "same_size_comparison",
    "fontsDirectory": "fonts_directory",
    "fontsData": "fonts_data",
    "fontsIndex": "fonts_index",
    "duplicateSymbols": "duplicate_symbols",
    "characterWhitelist": "character_whitelist",
    "lang": "language",
    "maxConcurrentFonts": "max_concurrent_fonts",
    "maxConcurrentComparisons": "max_concurrent_comparisons",
}

ProgressCallback = Callable[[str, Mapping[str, Any], float], None]


@dataclass(frozen=True)
class RecognitionOptions:
    """Per-call recognition settings."""

    min_symbol_confidence: float = DEFAULT_MIN_SYMBOL_CONFIDENCE
    analytic_comparison_threshold: float = DEFAULT_ANALYTIC_THRESHOLD
    same_size_comparison: bool = True
    fonts_directory: str = DEFAULT_FONTS_DIRECTORY
    fonts_data: str = DEFAULT_FONTS_DATA
    fonts_index: str = DEFAULT_FONTS_INDEX
    progress: Optional[ProgressCallback] = field(default=None, compare=False)
    duplicate_symbols: str = "last"
    language: str = DEFAULT_LANGUAGE
    character_whitelist: str = DEFAULT_WHITELIST
    max_concurrent_fonts: int = 16
    max_concurrent_comparisons: int = 8
    # Unknown keys are kept so callers can round-trip them, but nothing reads them.
    extras: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.duplicate_symbols not in DUPLICATE_POLICIES:
            raise ConfigurationError(
                f"duplicate_symbols must be one of {DUPLICATE_POLICIES}, got {self.duplicate_symbols!r}"
            )
        for name in ("min_symbol_confidence", "analytic_comparison_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
        if self.max_concurrent_fonts < 1 or self.max_concurrent_comparisons < 1:
            raise ConfigurationError("Concurrency limits must be at least 1.")
        if self.progress is not None and not callable(self.progress):
            raise ConfigurationError("progress must be callable.")

    def merged(self, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "RecognitionOptions":
        """
        Returns a copy of these options with the given overrides applied.

        Both the camelCase names (`minSymbolConfidence`) and the field names
        (`min_symbol_confidence`) are accepted. Keys matching neither are
        stored in `extras`.

        Args:
            overrides: A mapping of option names to values.
            **kwargs: Additional overrides, applied after `overrides`.

        Returns:
            RecognitionOptions: A new, independent instance.
        """
        known = {f.name for f in dataclasses.fields(self)} - {"extras"}
        changes: Dict[str, Any] = {}
        extras = dict(self.extras)

        for key, value in {**(overrides or {}), **kwargs}.items():
            name = OPTION_ALIASES.get(key, key)
            if name in known:
                changes[name] = value
            else:
                logger.debug(f"Storing unrecognized option '{key}'.")
                extras[key] = value

        return dataclasses.replace(self, extras=extras, **changes)


def get_app_dir() -> Path:
    """
    Gets the application's data directory in a cross-platform way.

    - Windows: %APPDATA%/Typefont
    - macOS: ~/Library/Application Support/Typefont
    - Linux: ~/.config/Typefont

    Returns:
        Path: A Path object to the application's data directory.
    """
    if platform.system() == "Windows":
        app_dir = Path.home() / "AppData" / "Roaming" / APP_NAME
    elif platform.system() == "Darwin":  # macOS
        app_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    else:  # Linux and other Unix-like
        app_dir = Path.home() / ".config" / APP_NAME

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


class Config:
    """
    Manages user defaults by loading built-in values and overriding them
    with settings from a user-specific config file.
    """

    def __init__(self, app_dir: Optional[Path] = None):
        self.parser = configparser.ConfigParser(interpolation=None)
        self.app_dir = Path(app_dir) if app_dir is not None else get_app_dir()
        self.config_file_path = self.app_dir / DEFAULT_CONFIG_FILENAME

        self._load_defaults()
        self._load_from_file()

    def _load_defaults(self):
        """Sets the default configuration values in the parser object."""
        self.parser["Recognition"] = {
            "min_symbol_confidence": str(DEFAULT_MIN_SYMBOL_CONFIDENCE),
            "analytic_comparison_threshold": str(DEFAULT_ANALYTIC_THRESHOLD),
            "same_size_comparison": "True",
            "duplicate_symbols": "last",
            "language": DEFAULT_LANGUAGE,
        }
        self.parser["Catalog"] = {
            "fonts_directory": DEFAULT_FONTS_DIRECTORY,
            "fonts_data": DEFAULT_FONTS_DATA,
            "fonts_index": DEFAULT_FONTS_INDEX,
        }
        self.parser["Concurrency"] = {
            "max_concurrent_fonts": "16",
            "max_concurrent_comparisons": "8",
        }
        self.parser["Display"] = {
            "results_count": "5",
        }

    def _load_from_file(self):
        """
        Loads settings from the config.ini file, overriding defaults.
        If the file doesn't exist, it will be created with default values.
        """
        if not self.config_file_path.exists():
            self._save_defaults()
        else:
            try:
                self.parser.read(self.config_file_path)
            except configparser.Error as e:
                raise ConfigurationError(f"Could not parse {self.config_file_path}: {e}") from e

    def _save_defaults(self):
        """Saves the current (default) configuration to the config file."""
        try:
            self.app_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w") as configfile:
                configfile.write(f"# {APP_NAME} Configuration File\n")
                configfile.write("# Command line flags take precedence over these values.\n\n")
                self.parser.write(configfile)
        except OSError as e:
            # Non-critical: the built-in defaults are still in effect.
            logger.warning(f"Could not write config file at {self.config_file_path}: {e}")

    # --- Properties to access settings easily and with correct types ---

    @property
    def min_symbol_confidence(self) -> float:
        """Minimum OCR confidence (0-100) for a glyph to be compared."""
        return self.parser.getfloat(
            "Recognition", "min_symbol_confidence", fallback=DEFAULT_MIN_SYMBOL_CONFIDENCE
        )

    @property
    def analytic_comparison_threshold(self) -> float:
        """Per-pixel difference above which two pixels count as different."""
        return self.parser.getfloat(
            "Recognition", "analytic_comparison_threshold", fallback=DEFAULT_ANALYTIC_THRESHOLD
        )

    @property
    def same_size_comparison(self) -> bool:
        return self.parser.getboolean("Recognition", "same_size_comparison", fallback=True)

    @property
    def duplicate_symbols(self) -> str:
        return self.parser.get("Recognition", "duplicate_symbols", fallback="last")

    @property
    def language(self) -> str:
        return self.parser.get("Recognition", "language", fallback=DEFAULT_LANGUAGE)

    @property
    def fonts_directory(self) -> str:
        return self.parser.get("Catalog", "fonts_directory", fallback=DEFAULT_FONTS_DIRECTORY)

    @property
    def fonts_data(self) -> str:
        return self.parser.get("Catalog", "fonts_data", fallback=DEFAULT_FONTS_DATA)

    @property
    def fonts_index(self) -> str:
        return self.parser.get("Catalog", "fonts_index", fallback=DEFAULT_FONTS_INDEX)

    @property
    def max_concurrent_fonts(self) -> int:
        return self.parser.getint("Concurrency", "max_concurrent_fonts", fallback=16)

    @property
    def max_concurrent_comparisons(self) -> int:
        return self.parser.getint("Concurrency", "max_concurrent_comparisons", fallback=8)

    @property
    def results_count(self) -> int:
        """The number of top font matches to display."""
        return self.parser.getint("Display", "results_count", fallback=5)

    def to_options(self) -> RecognitionOptions:
        """Builds the recognition options described by this file."""
        try:
            return RecognitionOptions(
                min_symbol_confidence=self.min_symbol_confidence,
                analytic_comparison_threshold=self.analytic_comparison_threshold,
                same_size_comparison=self.same_size_comparison,
                fonts_directory=self.fonts_directory,
                fonts_data=self.fonts_data,
                fonts_index=self.fonts_index,
                duplicate_symbols=self.duplicate_symbols,
                language=self.language,
                max_concurrent_fonts=self.max_concurrent_fonts,
                max_concurrent_comparisons=self.max_concurrent_comparisons,
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in {self.config_file_path}: {e}") from e


# --- Example Usage (for testing this module directly) ---
if __name__ == '__main__':
    config = Config()
    print(f"--- {APP_NAME} Configuration ---")
    print(f"Config file path: {config.config_file_path}")
    print(f"Fonts index: {config.fonts_index}")
    print(f"Fonts directory: {config.fonts_directory}")

    print("\n--- Loaded Settings ---")
    for name, value in dataclasses.asdict(config.to_options()).items():
        print(f"{name}: {value!r}")
