"""
Watch mode tests.

Tests for:
- Debouncing bursts of file events
- Filtering events to the watched files
- Re-running the check after a real file change
"""

import threading
import time

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from docsguard.base import InputError
from docsguard.watch import ChangeHandler, watch

DEBOUNCE = 0.05
SETTLE = 0.3


@pytest.fixture
def target(tmp_path):
    path = tmp_path / "auth.ts"
    path.write_text("function login() {}\n", encoding="utf-8")
    return path


class TestChangeHandler:
    """Event filtering and debouncing."""

    def test_burst_runs_once(self, target):
        """Several events inside the quiet period trigger a single re-check."""
        calls = []
        handler = ChangeHandler([target], lambda: calls.append(1), debounce=DEBOUNCE)
        for _ in range(5):
            handler.on_modified(FileModifiedEvent(str(target)))
        time.sleep(SETTLE)
        assert calls == [1]

    def test_separate_bursts_run_separately(self, target):
        """Events further apart than the quiet period each trigger a re-check."""
        calls = []
        handler = ChangeHandler([target], lambda: calls.append(1), debounce=DEBOUNCE)
        handler.on_modified(FileModifiedEvent(str(target)))
        time.sleep(SETTLE)
        handler.on_created(FileCreatedEvent(str(target)))
        time.sleep(SETTLE)
        assert calls == [1, 1]

    def test_other_files_ignored(self, target, tmp_path):
        """Changes to unrelated files in the same directory are ignored."""
        calls = []
        handler = ChangeHandler([target], lambda: calls.append(1), debounce=DEBOUNCE)
        handler.on_modified(FileModifiedEvent(str(tmp_path / "notes.txt")))
        time.sleep(SETTLE)
        assert calls == []

    def test_directory_events_ignored(self, target, tmp_path):
        """Directory modification events never trigger a re-check."""
        calls = []
        handler = ChangeHandler([target], lambda: calls.append(1), debounce=DEBOUNCE)
        handler.on_modified(DirModifiedEvent(str(tmp_path)))
        time.sleep(SETTLE)
        assert calls == []

    def test_rename_onto_watched_file(self, target, tmp_path):
        """An atomic save (temp file renamed over the target) counts as a change."""
        calls = []
        handler = ChangeHandler([target], lambda: calls.append(1), debounce=DEBOUNCE)
        handler.on_moved(FileMovedEvent(str(tmp_path / ".auth.ts.swp"), str(target)))
        time.sleep(SETTLE)
        assert calls == [1]

    def test_bytes_paths(self, target):
        """Byte-string event paths are decoded before matching."""
        calls = []
        handler = ChangeHandler([target], lambda: calls.append(1), debounce=DEBOUNCE)
        handler.on_modified(FileModifiedEvent(bytes(target)))
        time.sleep(SETTLE)
        assert calls == [1]

    def test_cancel_drops_pending_run(self, target):
        """Cancelling before the quiet period ends skips the re-check."""
        calls = []
        handler = ChangeHandler([target], lambda: calls.append(1), debounce=DEBOUNCE)
        handler.on_modified(FileModifiedEvent(str(target)))
        handler.cancel()
        time.sleep(SETTLE)
        assert calls == []


class TestWatch:
    """The observer loop."""

    def test_missing_file(self, target, tmp_path):
        """Watching a file that does not exist fails before any check runs."""
        calls = []
        with pytest.raises(InputError, match="not found"):
            watch(target, tmp_path / "missing.md", lambda: calls.append(1))
        assert calls == []

    def test_rechecks_after_change(self, target, write_file):
        """A check runs at start and again after the code file is edited."""
        docs = write_file("docs/api.md", "# API\n")
        seen = []
        changed = threading.Event()
        stop = threading.Event()

        def on_change():
            seen.append(target.read_text(encoding="utf-8"))
            if len(seen) > 1:
                changed.set()

        thread = threading.Thread(
            target=watch,
            args=(target, docs, on_change),
            kwargs={"debounce": DEBOUNCE, "stop": stop},
            daemon=True,
        )
        thread.start()
        try:
            # Edits made before the observer is running are missed, so retry
            for attempt in range(20):
                target.write_text(f"function logout{attempt}() {{}}\n", encoding="utf-8")
                if changed.wait(0.5):
                    break
        finally:
            stop.set()
            thread.join(timeout=5)

        assert changed.is_set()
        assert seen[0] == "function login() {}\n"
        assert seen[-1].startswith("function logout")
        assert not thread.is_alive()
