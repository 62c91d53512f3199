"""Tests for per-call option merging and the INI-backed defaults."""

import pytest

from typefont.config import Config, RecognitionOptions
from typefont.errors import ConfigurationError


class TestRecognitionOptions:
    def test_defaults(self):
        options = RecognitionOptions()
        assert options.min_symbol_confidence == 30
        assert options.analytic_comparison_threshold == pytest.approx(0.52161)
        assert options.same_size_comparison is True
        assert options.fonts_directory == "storage/fonts/"
        assert options.fonts_data == "data.json"
        assert options.fonts_index == "storage/index.json"
        assert options.progress is None

    def test_camel_case_and_snake_case_overrides(self):
        options = RecognitionOptions().merged({"minSymbolConfidence": 50}, fonts_data="font.json")
        assert options.min_symbol_confidence == 50
        assert options.fonts_data == "font.json"

    def test_merge_never_mutates_the_original(self):
        base = RecognitionOptions()
        base.merged(minSymbolConfidence=99, sameSizeComparison=False)
        assert base.min_symbol_confidence == 30
        assert base.same_size_comparison is True

    def test_unknown_keys_are_kept_in_extras(self):
        options = RecognitionOptions().merged({"colorMode": "dark"})
        assert options.extras == {"colorMode": "dark"}
        assert RecognitionOptions().extras == {}

    def test_progress_callback(self):
        def callback(name, comparisons, fraction):
            pass

        assert RecognitionOptions().merged(progress=callback).progress is callback

    @pytest.mark.parametrize("overrides", [
        {"duplicateSymbols": "random"},
        {"maxConcurrentFonts": 0},
        {"progress": "not callable"},
        {"minSymbolConfidence": "high"},
        {"analyticComparisonThreshold": None},
    ])
    def test_invalid_values_raise(self, overrides):
        with pytest.raises(ConfigurationError):
            RecognitionOptions().merged(overrides)


class TestConfigFile:
    def test_creates_file_with_defaults(self, tmp_path):
        config = Config(tmp_path)
        assert config.config_file_path.exists()
        assert config.to_options() == RecognitionOptions()
        assert config.results_count == 5

    def test_file_values_override_defaults(self, tmp_path):
        (tmp_path / "config.ini").write_text(
            "[Recognition]\nmin_symbol_confidence = 55\nsame_size_comparison = no\n"
            "[Catalog]\nfonts_index = https://cdn.test/index.json\n"
            "[Display]\nresults_count = 2\n"
        )
        config = Config(tmp_path)
        options = config.to_options()
        assert options.min_symbol_confidence == 55
        assert options.same_size_comparison is False
        assert options.fonts_index == "https://cdn.test/index.json"
        assert options.fonts_data == "data.json"
        assert config.results_count == 2

    def test_bad_value_raises_configuration_error(self, tmp_path):
        (tmp_path / "config.ini").write_text("[Recognition]\nmin_symbol_confidence = lots\n")
        with pytest.raises(ConfigurationError):
            Config(tmp_path).to_options()
