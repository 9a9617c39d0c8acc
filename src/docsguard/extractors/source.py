"""Bounded reading of input files shared by both extractors."""

from __future__ import annotations

from pathlib import Path

from docsguard.base import FileTooLargeError, InputError


def read_source(path: Path, max_size: int) -> str:
    """Read a UTF-8 file, refusing anything larger than max_size bytes.

    The size is checked with stat() before any content is read.

    Raises:
        InputError: If the file is missing, unreadable or not valid UTF-8.
        FileTooLargeError: If the file exceeds max_size.
    """
    try:
        size = path.stat().st_size
    except FileNotFoundError as e:
        raise InputError(f"File not found: {path}", path) from e
    except OSError as e:
        raise InputError(f"Cannot read file metadata: {path}: {e}", path) from e

    if size > max_size:
        raise FileTooLargeError(
            f"File too large ({size / (1024 * 1024):.1f} MB, "
            f"maximum: {max_size / (1024 * 1024):.1f} MB): {path}",
            path,
        )

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InputError(f"File is not valid UTF-8: {path}", path) from e
    except OSError as e:
        raise InputError(f"Cannot read file: {path}: {e}", path) from e
