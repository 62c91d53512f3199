# -*- coding: utf-8 -*-
"""
The GUI Package for Typefont.

PyQt6 widgets for presenting a font ranking. Importing this package pulls in
Qt, so the command line only loads it when `--show` is given.
"""

from .results_window import ResultsWindow, show_results

__all__ = [
    "ResultsWindow",
    "show_results",
]
