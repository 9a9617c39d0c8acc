"""Runtime configuration.

Settings are read from the environment on demand and passed explicitly to
the extractors, the matcher and the baseline engine. Nothing is cached at
module level, so a long-running caller sees environment changes on the
next call to Settings.from_env().
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from docsguard.base import ConfigError

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
DEFAULT_MAX_COMMENT_GAP = 2
DEFAULT_MIN_CONFIDENCE = 0.80
DEFAULT_BASELINE_DIR = ".docsguard"


@dataclass(frozen=True)
class Settings:
    """Tunables shared by every stage of a run."""

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    # Largest line distance between consecutive comments above a function
    # that still counts as one comment block.
    max_comment_gap: int = DEFAULT_MAX_COMMENT_GAP
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    baseline_dir: str = DEFAULT_BASELINE_DIR

    def __post_init__(self) -> None:
        if self.max_file_size <= 0:
            raise ConfigError(f"max_file_size must be positive, got {self.max_file_size}")
        if self.max_comment_gap < 0:
            raise ConfigError(
                f"max_comment_gap must not be negative, got {self.max_comment_gap}"
            )
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ConfigError(
                f"min_confidence must be between 0 and 1, got {self.min_confidence}"
            )
        if not self.baseline_dir.strip():
            raise ConfigError("baseline_dir must not be empty")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from DOCSGUARD_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ (used by tests)

        Raises:
            ConfigError: If a variable is set to an invalid value.
        """
        env = os.environ if environ is None else environ
        return cls(
            max_file_size=_parse(env, "DOCSGUARD_MAX_FILE_SIZE", int, DEFAULT_MAX_FILE_SIZE),
            max_comment_gap=_parse(
                env, "DOCSGUARD_MAX_COMMENT_GAP", int, DEFAULT_MAX_COMMENT_GAP
            ),
            min_confidence=_parse(
                env, "DOCSGUARD_MIN_CONFIDENCE", float, DEFAULT_MIN_CONFIDENCE
            ),
            baseline_dir=env.get("DOCSGUARD_BASELINE_DIR", DEFAULT_BASELINE_DIR),
        )


def _parse(env: Mapping[str, str], name: str, convert, default):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return convert(raw.strip())
    except ValueError as e:
        raise ConfigError(f"Invalid value for {name}: {raw!r}") from e
