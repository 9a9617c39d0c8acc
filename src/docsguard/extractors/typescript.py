"""TypeScript / JavaScript grammar binding."""

from __future__ import annotations

from typing import Iterator

import tree_sitter_typescript
from tree_sitter import Language, Node

from docsguard.extractors.grammar import (
    Declaration,
    Grammar,
    node_text,
    type_annotation_text,
)
from docsguard.models import Argument

_FUNCTION_KINDS = frozenset(
    {"function_declaration", "generator_function_declaration", "method_definition"}
)
_VARIABLE_KINDS = frozenset({"lexical_declaration", "variable_declaration"})
# "function" is the expression node name in older grammar releases
_FUNCTION_VALUE_KINDS = frozenset({"arrow_function", "function_expression", "function"})
_DEFAULT_EXPORT_KINDS = _FUNCTION_KINDS | {"class_declaration", "class"}
_PARAMETER_KINDS = frozenset({"required_parameter", "optional_parameter"})


def _load_language() -> Language:
    return Language(tree_sitter_typescript.language_typescript())


def _collect(node: Node, source: bytes) -> Iterator[Declaration]:
    for child in node.children:
        if child.type == "export_statement":
            declaration = child.child_by_field_name("declaration")
            if declaration is None:
                # `export default function f() {}` has no declaration field
                declaration = next(
                    (c for c in child.named_children if c.type in _DEFAULT_EXPORT_KINDS),
                    None,
                )
            if declaration is not None:
                yield from _declarations(declaration, child, source)
        else:
            yield from _declarations(child, child, source)


def _declarations(node: Node, anchor: Node, source: bytes) -> Iterator[Declaration]:
    if node.type in _FUNCTION_KINDS:
        name = node.child_by_field_name("name")
        yield Declaration(node, anchor, node_text(name, source) if name else None)
    elif node.type in _VARIABLE_KINDS:
        # const handler = (req: Request): Response => { ... }
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            value = declarator.child_by_field_name("value")
            if value is None or value.type not in _FUNCTION_VALUE_KINDS:
                continue
            name = declarator.child_by_field_name("name")
            if name is not None and name.type == "identifier":
                yield Declaration(value, anchor, node_text(name, source))
    else:
        yield from _collect(node, source)


def _extract_parameters(node: Node, source: bytes) -> list[Argument]:
    params = node.child_by_field_name("parameters")
    if params is None:
        # Arrow function with a single bare parameter: `x => x`
        single = node.child_by_field_name("parameter")
        return [Argument(name=node_text(single, source))] if single else []

    args: list[Argument] = []
    for child in params.children:
        if child.type not in _PARAMETER_KINDS:
            continue
        pattern = child.child_by_field_name("pattern")
        if pattern is None:
            continue
        name = node_text(pattern, source).removeprefix("...").strip()
        # `this` parameters only type the receiver
        if not name or name == "this":
            continue
        args.append(
            Argument(
                name=name,
                type_name=type_annotation_text(child.child_by_field_name("type"), source),
            )
        )
    return args


def _extract_return_type(node: Node, source: bytes) -> str | None:
    return type_annotation_text(node.child_by_field_name("return_type"), source)


TYPESCRIPT = Grammar(
    name="TypeScript",
    load_language=_load_language,
    comment_kinds=frozenset({"comment"}),
    collect_functions=_collect,
    extract_parameters=_extract_parameters,
    extract_return_type=_extract_return_type,
)
