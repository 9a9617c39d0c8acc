"""docsguard command line.

Commands:
    docsguard check CODE DOC       - validate links, honoring the baseline
    docsguard baseline CODE DOC    - accept current errors/warnings as baseline
    docsguard scaffold CODE DOC    - suggest links and write accepted ones
    docsguard watch CODE DOC       - re-check on every change to either file
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Sequence

from docsguard.base import DocsguardError
from docsguard.baseline import Baseline, filter_baseline, load_baseline, save_baseline
from docsguard.config import Settings
from docsguard.extractors import extract_code, extract_docs
from docsguard.heuristic import find_candidates
from docsguard.models import CandidateLink, Severity
from docsguard.report import format_candidate, format_finding, format_summary
from docsguard.scaffold import apply_links
from docsguard.validators import has_errors, validate
from docsguard.watch import watch

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_FAILURE = 2


def _check(args: argparse.Namespace, settings: Settings) -> int:
    entities = extract_code(args.code_file, settings)
    sections = extract_docs(args.doc_file, settings)
    print("docsguard - checking code <-> documentation links\n")
    print(f"  Code: {args.code_file}")
    print(f"  Docs: {args.doc_file}")
    print(f"  Found {len(entities)} functions in code, {len(sections)} sections in docs.\n")

    findings = validate(entities, sections)
    findings, suppressed = filter_baseline(
        findings, load_baseline(args.project_root, settings)
    )
    if suppressed:
        print(f"  [baseline] {suppressed} known errors/warnings suppressed.\n")

    if not findings:
        if suppressed:
            print("  No new errors (baseline active).")
        else:
            print("  No functions or sections to validate.")
        return EXIT_OK

    for finding in findings:
        print(format_finding(finding))
    print("---")
    print(format_summary(findings))

    return EXIT_FINDINGS if has_errors(findings) else EXIT_OK


def _baseline(args: argparse.Namespace, settings: Settings) -> int:
    entities = extract_code(args.code_file, settings)
    sections = extract_docs(args.doc_file, settings)
    baseline = Baseline.from_findings(validate(entities, sections))
    path = save_baseline(baseline, args.project_root, settings)

    print(f"  {len(baseline.entries)} errors/warnings written to the baseline.")
    print(f"  File: {path}")
    print("\n  Only new regressions will fail `docsguard check` from now on.")
    return EXIT_OK


def _prompt(_: CandidateLink) -> str:
    while True:
        try:
            answer = input("Link this function to this section? [y]es/[n]o/[s]kip: ")
        except EOFError:
            return "skip"
        answer = answer.strip().lower()
        if answer in ("", "y", "yes"):
            return "accept"
        if answer in ("n", "no"):
            return "reject"
        if answer in ("s", "skip"):
            return "skip"


def _scaffold(
    args: argparse.Namespace,
    settings: Settings,
    prompt: Callable[[CandidateLink], str] = _prompt,
) -> int:
    entities = extract_code(args.code_file, settings)
    sections = extract_docs(args.doc_file, settings)
    candidates = find_candidates(entities, sections, settings.min_confidence)

    if args.dry_run:
        print("  [dry-run] No changes will be written.\n")
    if not candidates:
        print("  No link suggestions found.")
        return EXIT_OK

    print(
        f"  Found {len(candidates)} link suggestions "
        f"(confidence >= {settings.min_confidence:.0%}).\n"
    )
    accepted: list[CandidateLink] = []
    rejected = 0
    for position, candidate in enumerate(candidates, start=1):
        print(format_candidate(candidate, position, len(candidates)))
        decision = "accept" if args.force else prompt(candidate)
        if decision == "accept":
            accepted.append(candidate)
        elif decision == "reject":
            rejected += 1
        print(f"  -> {decision}\n")

    skipped = len(candidates) - len(accepted) - rejected
    print(f"Accepted: {len(accepted)}, rejected: {rejected}, skipped: {skipped}")
    if not accepted:
        return EXIT_OK

    if args.dry_run:
        print("\n  [dry-run] Changes that would be written:")
        for candidate in accepted:
            print(f"    {candidate.function_name} -> /// @docs: [{candidate.section_id}]")
        return EXIT_OK

    apply_links(args.code_file, entities, accepted)
    print(f"\n  {len(accepted)} links written to {args.code_file}.")
    return EXIT_OK


def _watch_report(args: argparse.Namespace, settings: Settings) -> None:
    # Clear the terminal
    print("\x1b[2J\x1b[1;1H", end="")
    started = time.perf_counter()
    print("docsguard watch - checking code <-> documentation links\n")
    print(f"  Code: {args.code_file}")
    print(f"  Docs: {args.doc_file}\n")

    try:
        findings = validate(
            extract_code(args.code_file, settings), extract_docs(args.doc_file, settings)
        )
    except DocsguardError as e:
        # Keep watching; the file may be mid-save
        print(f"error: {e}", file=sys.stderr)
    else:
        problems = [f for f in findings if f.severity is not Severity.INFO]
        for finding in problems:
            print(format_finding(finding))
        if not problems:
            print("  No errors or warnings.")
        elapsed = (time.perf_counter() - started) * 1000
        print(f"\n{format_summary(problems)} ({elapsed:.0f}ms)")

    print("\n  Watching for changes... (Ctrl+C to quit)")


def _watch(args: argparse.Namespace, settings: Settings) -> int:
    try:
        watch(args.code_file, args.doc_file, lambda: _watch_report(args, settings))
    except KeyboardInterrupt:
        print()
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsguard",
        description="Detect drift between source-code functions and their documentation.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_files(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("code_file", type=Path, help="Source file (TypeScript or Rust)")
        sub.add_argument("doc_file", type=Path, help="Markdown documentation file")

    check = subparsers.add_parser("check", help="Validate code <-> documentation links")
    add_files(check)
    check.add_argument(
        "--project-root", type=Path, default=Path("."), help="Directory holding the baseline"
    )
    check.set_defaults(handler=_check)

    baseline = subparsers.add_parser(
        "baseline", help="Accept the current errors/warnings as the baseline"
    )
    add_files(baseline)
    baseline.add_argument(
        "--project-root", type=Path, default=Path("."), help="Directory holding the baseline"
    )
    baseline.set_defaults(handler=_baseline)

    scaffold = subparsers.add_parser(
        "scaffold", help="Suggest links for unlinked functions and write accepted ones"
    )
    add_files(scaffold)
    scaffold.add_argument(
        "--dry-run", action="store_true", help="Only show what would be written"
    )
    scaffold.add_argument("--force", action="store_true", help="Accept every suggestion")
    scaffold.set_defaults(handler=_scaffold)

    watch_parser = subparsers.add_parser(
        "watch", help="Re-check whenever the code or documentation file changes"
    )
    add_files(watch_parser)
    watch_parser.set_defaults(handler=_watch)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env()
        return args.handler(args, settings)
    except DocsguardError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
