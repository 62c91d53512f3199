# -*- coding: utf-8 -*-
"""
src/typefont/utils/clipboard_manager.py

A simple wrapper for copying the best font match to the system clipboard.
"""

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """
    Copies the given text to the system clipboard.

    A missing clipboard is not an error for the recognition itself, so the
    failure is logged and reported through the return value.

    Args:
        text (str): The string to be copied.

    Returns:
        bool: True if the text was copied successfully, False otherwise.
    """
    try:
        pyperclip.copy(text)
        logger.info(f"Successfully copied to clipboard: '{text}'")
        return True
    except pyperclip.PyperclipException as e:
        # Headless Linux boxes often lack xclip/xsel.
        logger.error(f"Failed to copy text to clipboard: {e}")
        logger.warning(
            "Clipboard functionality may not be available on this system. "
            "If on Linux, please ensure 'xclip' or 'xsel' is installed."
        )
        return False
