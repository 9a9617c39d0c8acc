"""Baseline snapshots of accepted findings.

A baseline records the errors and warnings that already exist so that
`check` only fails on regressions. Entries are keyed on severity, function
name, doc id and a coarse message fingerprint (the first six words), which
keeps matching stable across minor wording edits.

The snapshot is stored as YAML at <project root>/.docsguard/baseline.yaml:

    version: '1'
    generated_at: '2026-01-01T00:00:00+00:00'
    entries:
    - severity: Error
      function_name: login
      doc_id: auth-login
      message_fingerprint: Documentation id 'auth-login' not found in
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from docsguard.base import BaselineError
from docsguard.config import Settings
from docsguard.models import Severity, ValidationFinding

log = logging.getLogger(__name__)

BASELINE_VERSION = "1"
BASELINE_FILE = "baseline.yaml"
FINGERPRINT_WORDS = 6


def fingerprint(message: str) -> str:
    """First six whitespace-separated words of a message."""
    return " ".join(message.split()[:FINGERPRINT_WORDS])


class BaselineEntry(BaseModel):
    """A known finding. Equality and hashing cover all four fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    severity: str
    function_name: str | None = None
    doc_id: str | None = None
    message_fingerprint: str

    @classmethod
    def from_finding(cls, finding: ValidationFinding) -> BaselineEntry:
        return cls(
            severity=finding.severity.value,
            function_name=finding.function_name,
            doc_id=finding.doc_id,
            message_fingerprint=fingerprint(finding.message),
        )


class Baseline(BaseModel):
    """Persisted snapshot of accepted findings."""

    model_config = ConfigDict(extra="forbid")

    version: str = BASELINE_VERSION
    generated_at: str
    entries: list[BaselineEntry] = []

    @classmethod
    def from_findings(cls, findings: Iterable[ValidationFinding]) -> Baseline:
        """Build a snapshot of every non-info finding, duplicates collapsed."""
        entries: dict[BaselineEntry, None] = {}
        for finding in findings:
            if finding.severity is Severity.INFO:
                continue
            entries.setdefault(BaselineEntry.from_finding(finding))
        return cls(
            generated_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
            entries=list(entries),
        )

    def entry_set(self) -> frozenset[BaselineEntry]:
        return frozenset(self.entries)


def baseline_path(project_root: Path | str, settings: Settings | None = None) -> Path:
    settings = settings or Settings()
    return Path(project_root) / settings.baseline_dir / BASELINE_FILE


def load_baseline(
    project_root: Path | str, settings: Settings | None = None
) -> Baseline | None:
    """Load the project's baseline, or None if there is none.

    Raises:
        BaselineError: If the file is unreadable, corrupt, or has an
            unrecognized version. A bad snapshot is never ignored.
    """
    path = baseline_path(project_root, settings)
    if not path.exists():
        return None

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise BaselineError(f"Cannot read baseline: {path}: {e}", path) from e
    except yaml.YAMLError as e:
        raise BaselineError(f"Corrupt baseline (invalid YAML): {path}: {e}", path) from e

    if not isinstance(raw, dict):
        raise BaselineError(f"Corrupt baseline (expected a mapping): {path}", path)

    version = raw.get("version")
    if version != BASELINE_VERSION:
        raise BaselineError(
            f"Unsupported baseline version {version!r} (expected {BASELINE_VERSION!r}): {path}",
            path,
        )

    try:
        return Baseline.model_validate(raw)
    except ValidationError as e:
        raise BaselineError(f"Corrupt baseline: {path}: {e}", path) from e


def save_baseline(
    baseline: Baseline, project_root: Path | str, settings: Settings | None = None
) -> Path:
    """Write the baseline, creating its directory if needed.

    Returns:
        The path written
    """
    path = baseline_path(project_root, settings)
    content = yaml.safe_dump(
        baseline.model_dump(mode="json", exclude_none=True),
        sort_keys=False,
        allow_unicode=True,
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise BaselineError(f"Cannot write baseline: {path}: {e}", path) from e

    log.info("Baseline saved to %s (%d entries)", path, len(baseline.entries))
    return path


def filter_baseline(
    findings: Iterable[ValidationFinding], baseline: Baseline | None
) -> tuple[list[ValidationFinding], int]:
    """Drop findings already recorded in the baseline.

    Info findings always pass. Without a baseline nothing is filtered.

    Returns:
        (remaining findings in their original order, number suppressed)
    """
    findings = list(findings)
    if baseline is None:
        return findings, 0

    known = baseline.entry_set()
    remaining: list[ValidationFinding] = []
    suppressed = 0
    for finding in findings:
        if finding.severity is not Severity.INFO and BaselineEntry.from_finding(finding) in known:
            suppressed += 1
            continue
        remaining.append(finding)

    log.debug("%d known findings suppressed by baseline", suppressed)
    return remaining, suppressed
