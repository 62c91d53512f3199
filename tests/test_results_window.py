"""Tests for the PyQt6 results window."""

import math
import os
import subprocess
import sys
import textwrap

import pytest

from typefont.models import FontScore

pytest.importorskip("PyQt6.QtWidgets")

from typefont.gui.results_window import describe  # noqa: E402


def test_describe():
    assert describe(FontScore("roboto", {"name": "Roboto"}, 0.875, 4)) == "Roboto (87.5%, 4 chars)"
    assert describe(FontScore("bare", {}, math.nan, 0)) == "bare (no shared characters)"


def test_show_results_returns_after_timeout():
    script = textwrap.dedent("""
        from typefont.gui import results_window
        from typefont.models import FontScore

        results_window.WINDOW_TIMEOUT_MS = 200
        scores = [FontScore("a", {}, 0.5, 1), FontScore("b", {}, 0.25, 1)]
        raise SystemExit(results_window.show_results(scores, copied=True))
    """)
    env = {**os.environ, "QT_QPA_PLATFORM": "offscreen"}

    completed = subprocess.run([sys.executable, "-c", script], env=env, timeout=30)

    assert completed.returncode == 0
