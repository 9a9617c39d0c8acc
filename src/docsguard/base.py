"""Base exceptions for docsguard.

Every error raised by the extractors, the baseline engine and the
configuration layer derives from DocsguardError and keeps the path of the
file involved, so callers can report it without re-deriving context.
Validation findings are not errors: they are returned, never raised.
"""

from __future__ import annotations

from pathlib import Path


class DocsguardError(Exception):
    """Base exception for docsguard operations."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class InputError(DocsguardError):
    """Raised when an input file is missing, unreadable or not UTF-8."""


class UnsupportedLanguageError(InputError):
    """Raised when a source file extension maps to no known grammar."""


class FileTooLargeError(InputError):
    """Raised when an input file exceeds the configured size ceiling."""


class ParseError(DocsguardError):
    """Raised when a grammar or the markdown parser fails on a file."""


class BaselineError(DocsguardError):
    """Raised when a baseline snapshot cannot be read, validated or written."""


class ConfigError(DocsguardError):
    """Raised when environment configuration is invalid."""
