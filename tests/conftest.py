"""Shared pytest configuration for docsguard tests."""

import textwrap
from pathlib import Path

import pytest

from docsguard.config import Settings


@pytest.fixture
def settings():
    """Default settings, independent of the environment running the tests."""
    return Settings()


@pytest.fixture
def write_file(tmp_path):
    """
    Factory fixture that writes dedented text files under tmp_path.

    Example:
        def test_extract(write_file):
            path = write_file("api.md", '''
                <!-- @docs-id: auth-login -->
                ## Login
            ''')
    """

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path

    return _write
