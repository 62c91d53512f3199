# -*- coding: utf-8 -*-
"""Access to the reference font catalog (index and per-font data files)."""

from .font_storage import FontStorage

__all__ = ["FontStorage"]
