"""Watch mode: re-run a check whenever the code or documentation file changes.

Both files' parent directories are observed with watchdog. Editors tend to
save in bursts (truncate, write, rename), so change events are debounced:
the callback runs once, DEFAULT_DEBOUNCE seconds after the last relevant
event. The callback is expected to re-extract everything from disk; nothing
is carried over between runs.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from docsguard.base import InputError

log = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.15  # seconds


class ChangeHandler(FileSystemEventHandler):
    """Calls on_change once a burst of events on the watched files settles."""

    def __init__(
        self,
        paths: Iterable[Path],
        on_change: Callable[[], None],
        debounce: float = DEFAULT_DEBOUNCE,
    ):
        super().__init__()
        self.paths = frozenset(Path(p).resolve() for p in paths)
        self._on_change = on_change
        self._debounce = debounce
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    def on_created(self, event: FileSystemEvent) -> None:
        self._handle(event, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._handle(event, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Atomic saves write a temp file and rename it over the target
        self._handle(event, event.dest_path)

    def _handle(self, event: FileSystemEvent, path: str | bytes) -> None:
        if event.is_directory:
            return
        if Path(os.fsdecode(path)).resolve() not in self.paths:
            return

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self._on_change)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop a pending callback, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


def watch(
    code_file: Path,
    doc_file: Path,
    on_change: Callable[[], None],
    debounce: float = DEFAULT_DEBOUNCE,
    stop: threading.Event | None = None,
) -> None:
    """Run on_change now, then again after every change to either file.

    Blocks until stop is set (or the process is interrupted).

    Args:
        code_file: Source file to watch
        doc_file: Markdown file to watch
        on_change: Callback re-running the check
        debounce: Quiet period in seconds before on_change runs
        stop: Event ending the watch; None watches until interrupted

    Raises:
        InputError: If either file does not exist when watching starts.
    """
    paths = []
    for path in (code_file, doc_file):
        if not Path(path).exists():
            raise InputError(f"File not found: {path}", path)
        paths.append(Path(path).resolve())

    on_change()

    handler = ChangeHandler(paths, on_change, debounce)
    observer = Observer()
    for directory in sorted({p.parent for p in paths}):
        observer.schedule(handler, str(directory), recursive=False)
        log.debug("Watching %s", directory)

    stop = stop or threading.Event()
    observer.start()
    try:
        while not stop.wait(0.5):
            pass
    finally:
        handler.cancel()
        observer.stop()
        observer.join()
