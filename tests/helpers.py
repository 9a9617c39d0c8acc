"""Builders for docsguard test data."""

from pathlib import Path

from docsguard.models import Argument, CodeEntity, DocSection, Severity, ValidationFinding


def arg(name: str, type_name: str | None = None, description: str | None = None) -> Argument:
    return Argument(name=name, type_name=type_name, description=description)


def entity(
    name: str,
    doc_id: str | None = None,
    args: list[Argument] | None = None,
    file_path: str = "src/auth.ts",
    line: int = 1,
) -> CodeEntity:
    return CodeEntity(
        name=name,
        file_path=Path(file_path),
        line=line,
        args=tuple(args or ()),
        doc_id=doc_id,
    )


def section(
    id: str,
    title: str | None = None,
    args: list[Argument] | None = None,
    file_path: str = "docs/api.md",
    line: int = 1,
) -> DocSection:
    return DocSection(
        id=id,
        file_path=Path(file_path),
        line=line,
        title=title,
        args=tuple(args or ()),
    )


def finding(
    severity: Severity,
    message: str,
    function_name: str | None = None,
    doc_id: str | None = None,
) -> ValidationFinding:
    return ValidationFinding(
        severity=severity,
        message=message,
        function_name=function_name,
        doc_id=doc_id,
    )
