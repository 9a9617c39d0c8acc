"""Writing accepted candidate links back into a source file."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from docsguard.base import InputError
from docsguard.models import CandidateLink, CodeEntity


def annotate_source(
    source: str, entities: Sequence[CodeEntity], accepted: Sequence[CandidateLink]
) -> str:
    """Insert `/// @docs: [id]` above every accepted function.

    The annotation takes the indentation of the function's first line and
    the source keeps its trailing newline, if it had one.
    """
    annotations: dict[int, str] = {}
    for candidate in accepted:
        try:
            entity = entities[candidate.entity_index]
        except IndexError:
            raise ValueError(
                f"Invalid entity index {candidate.entity_index} "
                f"(only {len(entities)} entities)"
            ) from None
        annotations[entity.line - 1] = f"/// @docs: [{candidate.section_id}]"

    output: list[str] = []
    for i, line in enumerate(source.splitlines()):
        annotation = annotations.get(i)
        if annotation is not None:
            indent = line[: len(line) - len(line.lstrip())]
            output.append(indent + annotation)
        output.append(line)

    result = "\n".join(output)
    if source.endswith("\n"):
        result += "\n"
    return result


def apply_links(
    file_path: Path, entities: Sequence[CodeEntity], accepted: Sequence[CandidateLink]
) -> None:
    """Rewrite file_path with annotations for the accepted candidates."""
    try:
        source = file_path.read_text(encoding="utf-8")
        file_path.write_text(annotate_source(source, entities, accepted), encoding="utf-8")
    except OSError as e:
        raise InputError(f"Cannot rewrite {file_path}: {e}", file_path) from e
