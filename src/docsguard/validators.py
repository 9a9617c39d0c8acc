"""Cross-validation of code entities against documentation sections.

Checks, in this fixed order:
1. Functions without a @docs annotation (info)
2. Annotated functions whose doc id exists (info) or not (error), plus
   argument reconciliation for every verified link:
   - ghost arguments documented but absent from the signature (error)
   - documented types that disagree with the code (warning)
   - code arguments missing from the documentation (warning)
3. Sections no function links to (warning)

The output is a pure function of its inputs; the baseline engine relies
on identical inputs producing identical findings.
"""

from __future__ import annotations

from typing import Iterable

from docsguard.models import Argument, CodeEntity, DocSection, Severity, ValidationFinding

_STRING = "string"
_NUMBER = "number"
_BOOLEAN = "boolean"

# Common spellings of the same type across TypeScript, Rust and prose docs
_TYPE_ALIASES: dict[str, str] = {
    **dict.fromkeys(("string", "str", "&str", "text", "&string"), _STRING),
    **dict.fromkeys(
        (
            "number", "integer", "int", "float", "double",
            "i8", "i16", "i32", "i64", "i128", "isize",
            "u8", "u16", "u32", "u64", "u128", "usize",
            "f32", "f64",
        ),
        _NUMBER,
    ),
    **dict.fromkeys(("boolean", "bool"), _BOOLEAN),
    "uuid": _STRING,
}


def normalize_type(type_name: str) -> str:
    """Normalize a type for comparison: String/&str -> string, i32 -> number, ...

    Unknown types are compared lowercased.
    """
    cleaned = type_name.strip().lower()
    return _TYPE_ALIASES.get(cleaned, cleaned)


def validate(
    entities: Iterable[CodeEntity], sections: Iterable[DocSection]
) -> list[ValidationFinding]:
    """Validate code entities against documentation sections.

    Findings are always fully enumerated, whatever their severity.

    Args:
        entities: Functions extracted from source code
        sections: Sections extracted from markdown

    Returns:
        Findings in a deterministic order
    """
    entities = list(entities)
    sections = list(sections)
    findings: list[ValidationFinding] = []

    for entity in entities:
        if entity.doc_id is None:
            findings.append(
                ValidationFinding(
                    severity=Severity.INFO,
                    message="Function is not linked to documentation (no @docs annotation).",
                    function_name=entity.name,
                    location=entity.location,
                    hint="Add `/// @docs: [id]` above the function to link it.",
                )
            )

    by_id: dict[str, DocSection] = {}
    for section in sections:
        by_id.setdefault(section.id, section)

    for entity in entities:
        if entity.doc_id is None:
            continue
        section = by_id.get(entity.doc_id)
        if section is None:
            findings.append(
                ValidationFinding(
                    severity=Severity.ERROR,
                    message=f"Documentation id '{entity.doc_id}' not found in the docs file.",
                    function_name=entity.name,
                    location=entity.location,
                    doc_id=entity.doc_id,
                    hint=f"Add `<!-- @docs-id: {entity.doc_id} -->` to the documentation file.",
                )
            )
            continue

        findings.append(
            ValidationFinding(
                severity=Severity.INFO,
                message=f"Link verified: fn {entity.name} <-> section '{section.display_name}'.",
                function_name=entity.name,
                location=entity.location,
                doc_id=entity.doc_id,
            )
        )
        if entity.args or section.args:
            findings.extend(_reconcile_args(entity, section))

    linked = {entity.doc_id for entity in entities if entity.doc_id is not None}
    for section in sections:
        if section.id not in linked:
            findings.append(
                ValidationFinding(
                    severity=Severity.WARNING,
                    message=(
                        f"Orphan section: '{section.display_name}' is not linked "
                        "from any function."
                    ),
                    location=f"{section.file_path}:{section.line}",
                    doc_id=section.id,
                    hint=f"Add `/// @docs: [{section.id}]` above the matching function.",
                )
            )

    return findings


def _reconcile_args(entity: CodeEntity, section: DocSection) -> list[ValidationFinding]:
    findings: list[ValidationFinding] = []
    code_args = {}
    for arg in entity.args:
        code_args.setdefault(arg.name, arg)

    def finding(severity: Severity, message: str, hint: str) -> ValidationFinding:
        return ValidationFinding(
            severity=severity,
            message=message,
            function_name=entity.name,
            location=entity.location,
            doc_id=section.id,
            hint=hint,
        )

    for doc_arg in section.args:
        code_arg = code_args.get(doc_arg.name)
        if code_arg is None:
            findings.append(
                finding(
                    Severity.ERROR,
                    f"Ghost argument: '{doc_arg.name}' is documented but does not "
                    f"exist in fn {entity.name}.",
                    f"Remove '{doc_arg.name}' from the documentation or add it to "
                    "the function signature.",
                )
            )
        elif _types_differ(code_arg, doc_arg):
            findings.append(
                finding(
                    Severity.WARNING,
                    f"Type mismatch on argument '{code_arg.name}': code has "
                    f"'{code_arg.type_name}', docs say '{doc_arg.type_name}'.",
                    f"Update the type of '{code_arg.name}' in the documentation to "
                    f"'{code_arg.type_name}' (or check whether it is a valid alias).",
                )
            )

    documented = {arg.name for arg in section.args}
    for code_arg in entity.args:
        if code_arg.name not in documented:
            findings.append(
                finding(
                    Severity.WARNING,
                    f"Argument '{code_arg.name}' exists in code but is missing "
                    "in the docs.",
                    f"Document the argument '{code_arg.name}' in section '{section.id}'.",
                )
            )

    return findings


def _types_differ(code_arg: Argument, doc_arg: Argument) -> bool:
    # Untyped on either side means there is nothing to compare
    if not code_arg.type_name or not doc_arg.type_name:
        return False
    return normalize_type(code_arg.type_name) != normalize_type(doc_arg.type_name)


def has_errors(findings: Iterable[ValidationFinding]) -> bool:
    """Return True if any finding should fail the run."""
    return any(f.severity is Severity.ERROR for f in findings)
