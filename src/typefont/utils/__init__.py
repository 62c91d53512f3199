# -*- coding: utf-8 -*-
"""
The Utilities Package for Typefont.

Small helpers around the recognition run that are not part of the pipeline
itself, such as clipboard access.
"""

from .clipboard_manager import copy_to_clipboard

__all__ = [
    "copy_to_clipboard",
]
