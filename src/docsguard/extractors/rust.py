"""Rust grammar binding."""

from __future__ import annotations

from typing import Iterator

import tree_sitter_rust
from tree_sitter import Language, Node

from docsguard.extractors.grammar import Declaration, Grammar, node_text
from docsguard.models import Argument

_FUNCTION_KINDS = frozenset({"function_item", "function_signature_item"})
_CONTAINER_KINDS = frozenset({"mod_item", "impl_item", "trait_item"})


def _load_language() -> Language:
    return Language(tree_sitter_rust.language())


def _collect(node: Node, source: bytes) -> Iterator[Declaration]:
    for child in node.children:
        if child.type in _FUNCTION_KINDS:
            name = child.child_by_field_name("name")
            yield Declaration(child, child, node_text(name, source) if name else None)
        elif child.type in _CONTAINER_KINDS:
            body = child.child_by_field_name("body")
            if body is not None:
                yield from _collect(body, source)
        else:
            yield from _collect(child, source)


def _extract_parameters(node: Node, source: bytes) -> list[Argument]:
    params = node.child_by_field_name("parameters")
    if params is None:
        return []

    args: list[Argument] = []
    # self_parameter (`self`, `&self`, `&mut self`) is not a documentable argument
    for child in params.named_children:
        if child.type != "parameter":
            continue
        pattern = child.child_by_field_name("pattern")
        if pattern is None:
            continue
        name = node_text(pattern, source).removeprefix("mut ").strip()
        if not name:
            continue
        type_node = child.child_by_field_name("type")
        args.append(
            Argument(
                name=name,
                type_name=node_text(type_node, source) if type_node else None,
            )
        )
    return args


def _extract_return_type(node: Node, source: bytes) -> str | None:
    return_type = node.child_by_field_name("return_type")
    return node_text(return_type, source) if return_type else None


RUST = Grammar(
    name="Rust",
    load_language=_load_language,
    # Block comments end the annotation scan like any other node
    comment_kinds=frozenset({"line_comment"}),
    collect_functions=_collect,
    extract_parameters=_extract_parameters,
    extract_return_type=_extract_return_type,
)
