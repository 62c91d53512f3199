"""Tests for the command line front end."""

import json
import math

from typefont import cli
from typefont.errors import CatalogFetchError
from typefont.models import FontScore


class StubTypefont:
    """Replaces the orchestrator so the CLI can be driven without OCR models."""

    ranking = {}
    error = None
    received = None

    def __init__(self, options=None, **kwargs):
        self.options = options

    async def recognize(self, image_source, options=None, **overrides):
        StubTypefont.received = (image_source, dict(options or {}), overrides)
        if StubTypefont.error is not None:
            raise StubTypefont.error
        return StubTypefont.ranking


def run(monkeypatch, tmp_path, argv, ranking=None, error=None):
    StubTypefont.ranking = ranking or {}
    StubTypefont.error = error
    monkeypatch.setattr(cli, "Typefont", StubTypefont)
    return cli.main([*argv, "--config-dir", str(tmp_path)])


def test_only_given_flags_become_overrides():
    args = cli.parse_args(["img.png", "--min-confidence", "45", "--no-same-size"])
    assert cli.build_overrides(args) == {"min_symbol_confidence": 45.0, "same_size_comparison": False}


def test_json_output_uses_null_for_unscored_fonts(monkeypatch, tmp_path, capsys):
    ranking = {
        "good": FontScore("good", {"name": "Good"}, 0.8, 3),
        "none": FontScore("none", {}, math.nan, 0),
    }
    assert run(monkeypatch, tmp_path, ["img.png", "--json"], ranking) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload == {"good": {"name": "Good", "similarity": 0.8}, "none": {"similarity": None}}


def test_table_output_respects_top(monkeypatch, tmp_path, capsys):
    ranking = {name: FontScore(name, {}, 1.0 - i / 10, 2) for i, name in enumerate("abcd")}
    run(monkeypatch, tmp_path, ["img.png", "--top", "2"], ranking)
    out = capsys.readouterr().out
    assert "a" in out and "b" in out
    assert " c " not in out and " d " not in out


def test_catalog_flags_are_forwarded(monkeypatch, tmp_path):
    run(monkeypatch, tmp_path, ["img.png", "--fonts-index", "idx.json", "--duplicates", "best"])
    image, overrides, kwargs = StubTypefont.received
    assert image == "img.png"
    assert overrides == {"fonts_index": "idx.json", "duplicate_symbols": "best"}
    assert callable(kwargs["progress"])


def test_failure_exits_with_error(monkeypatch, tmp_path, capsys):
    error = CatalogFetchError("Unable to open the fonts index.")
    assert run(monkeypatch, tmp_path, ["img.png"], error=error) == 1
    assert "[index] Unable to open the fonts index." in capsys.readouterr().err


def test_copy_puts_best_match_on_clipboard(monkeypatch, tmp_path):
    copied = []
    monkeypatch.setattr(cli, "copy_to_clipboard", lambda text: copied.append(text) or True)
    ranking = {"best": FontScore("best", {}, 0.9, 1), "worse": FontScore("worse", {}, 0.1, 1)}
    run(monkeypatch, tmp_path, ["img.png", "--copy"], ranking)
    assert copied == ["best"]


def test_top_zero_prints_no_rows(monkeypatch, tmp_path, capsys):
    ranking = {"a": FontScore("a", {}, 0.9, 2)}
    assert run(monkeypatch, tmp_path, ["img.png", "--top", "0"], ranking) == 0
    out = capsys.readouterr().out
    assert "Top Matches:" in out
    assert "1." not in out
