"""
Configuration tests.
"""

import pytest

from docsguard.base import ConfigError
from docsguard.config import (
    DEFAULT_BASELINE_DIR,
    DEFAULT_MAX_COMMENT_GAP,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MIN_CONFIDENCE,
    Settings,
)


class TestSettings:
    def test_defaults(self):
        """Defaults match the documented values."""
        settings = Settings()
        assert settings.max_file_size == 10 * 1024 * 1024
        assert settings.max_comment_gap == 2
        assert settings.min_confidence == 0.80
        assert settings.baseline_dir == ".docsguard"

    def test_empty_environment(self):
        """No variables set gives the defaults."""
        assert Settings.from_env({}) == Settings()

    def test_from_environment(self):
        """Every field can be set from the environment."""
        settings = Settings.from_env(
            {
                "DOCSGUARD_MAX_FILE_SIZE": "1024",
                "DOCSGUARD_MAX_COMMENT_GAP": "4",
                "DOCSGUARD_MIN_CONFIDENCE": "0.5",
                "DOCSGUARD_BASELINE_DIR": "ci",
            }
        )
        assert settings == Settings(
            max_file_size=1024, max_comment_gap=4, min_confidence=0.5, baseline_dir="ci"
        )

    def test_blank_values_use_defaults(self):
        """Blank variables fall back to the defaults."""
        settings = Settings.from_env(
            {"DOCSGUARD_MAX_FILE_SIZE": "  ", "DOCSGUARD_MIN_CONFIDENCE": ""}
        )
        assert settings.max_file_size == DEFAULT_MAX_FILE_SIZE
        assert settings.min_confidence == DEFAULT_MIN_CONFIDENCE

    def test_reads_os_environ(self, monkeypatch):
        """Without an explicit mapping, os.environ is read."""
        monkeypatch.setenv("DOCSGUARD_MAX_COMMENT_GAP", "0")
        monkeypatch.delenv("DOCSGUARD_BASELINE_DIR", raising=False)
        settings = Settings.from_env()
        assert settings.max_comment_gap == 0
        assert settings.baseline_dir == DEFAULT_BASELINE_DIR

    @pytest.mark.parametrize(
        "name,value",
        [
            ("DOCSGUARD_MAX_FILE_SIZE", "ten"),
            ("DOCSGUARD_MAX_COMMENT_GAP", "1.5"),
            ("DOCSGUARD_MIN_CONFIDENCE", "high"),
        ],
    )
    def test_unparseable_value(self, name, value):
        """Values that fail to convert name the offending variable."""
        with pytest.raises(ConfigError, match=name):
            Settings.from_env({name: value})

    @pytest.mark.parametrize(
        "kwargs,message",
        [
            ({"max_file_size": 0}, "max_file_size"),
            ({"max_comment_gap": -1}, "max_comment_gap"),
            ({"min_confidence": 1.5}, "min_confidence"),
            ({"baseline_dir": " "}, "baseline_dir"),
        ],
    )
    def test_invalid_values(self, kwargs, message):
        """Out-of-range values are rejected at construction."""
        with pytest.raises(ConfigError, match=message):
            Settings(**kwargs)

    def test_out_of_range_environment(self):
        """Range checks also apply to environment values."""
        with pytest.raises(ConfigError, match="min_confidence"):
            Settings.from_env({"DOCSGUARD_MIN_CONFIDENCE": "2"})

    def test_frozen(self):
        """Settings cannot be mutated after construction."""
        settings = Settings()
        with pytest.raises(AttributeError):
            settings.max_comment_gap = DEFAULT_MAX_COMMENT_GAP + 1
