"""Data models shared by the extractors, the validator and the matcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Severity(str, Enum):
    """Severity of a validation finding. Only ERROR fails a run."""

    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Argument:
    """An argument as declared in code or documented in markdown."""

    name: str
    type_name: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class CodeEntity:
    """A documentable function or method found in a source file."""

    name: str
    file_path: Path
    line: int  # 1-based line of the declaration
    args: tuple[Argument, ...] = field(default_factory=tuple)
    return_type: str | None = None
    doc_id: str | None = None  # From a `// @docs: id` annotation

    @property
    def location(self) -> str:
        return f"{self.file_path}:{self.line}"


@dataclass(frozen=True)
class DocSection:
    """A markdown section opened by a `<!-- @docs-id: id -->` marker."""

    id: str
    file_path: Path
    line: int  # 1-based line of the marker
    title: str | None = None  # First heading after the marker
    args: tuple[Argument, ...] = field(default_factory=tuple)

    @property
    def display_name(self) -> str:
        return self.title or self.id


@dataclass(frozen=True)
class ValidationFinding:
    """One result of cross-validating code against documentation."""

    severity: Severity
    message: str
    function_name: str | None = None
    location: str | None = None  # "file:line"
    doc_id: str | None = None
    hint: str | None = None


@dataclass(frozen=True)
class CandidateLink:
    """A suggested, unconfirmed link between an entity and a section."""

    entity_index: int  # Position of the entity in the extractor output
    function_name: str
    location: str
    section_id: str
    section_title: str
    confidence: float  # 0.0 - 1.0
