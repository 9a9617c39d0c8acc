"""Plain-text rendering of findings and candidate links."""

from __future__ import annotations

from typing import Iterable

from docsguard.models import CandidateLink, Severity, ValidationFinding

_ICONS = {
    Severity.ERROR: "[X]",
    Severity.WARNING: "[!]",
    Severity.INFO: "[i]",
}


def format_finding(finding: ValidationFinding) -> str:
    """Render one finding as a header line followed by `->` detail lines."""
    header = f"{_ICONS[finding.severity]} {finding.severity}"
    if finding.function_name:
        header += f" in fn {finding.function_name}"
        if finding.location:
            header += f" ({finding.location})"
    elif finding.location:
        header += f" at {finding.location}"

    lines = [header, f"    -> {finding.message}"]
    if finding.doc_id:
        lines.append(f"    -> Linked id: '{finding.doc_id}'")
    if finding.hint:
        lines.append(f"    -> Hint: {finding.hint}")
    return "\n".join(lines)


def format_summary(findings: Iterable[ValidationFinding]) -> str:
    findings = list(findings)
    errors = sum(1 for f in findings if f.severity is Severity.ERROR)
    warnings = sum(1 for f in findings if f.severity is Severity.WARNING)
    return f"Summary: {errors} errors, {warnings} warnings, {len(findings)} total"


def format_candidate(candidate: CandidateLink, position: int, total: int) -> str:
    return "\n".join(
        [
            f"-- Suggestion {position}/{total} --",
            f"  Function:   {candidate.function_name} ({candidate.location})",
            f"  Section:    '{candidate.section_title}' [id: {candidate.section_id}]",
            f"  Confidence: {candidate.confidence:.0%}",
        ]
    )
