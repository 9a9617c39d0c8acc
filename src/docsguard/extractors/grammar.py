"""Grammar bindings shared by the source-code extractor.

A Grammar is a plain record of functions rather than a class hierarchy:
the set of supported languages is closed, and each binding only has to say
how to find function-like declarations, their parameters and return types
in its own syntax tree. Everything else (doc annotation lookup, entity
construction) is grammar-agnostic and lives in extractors.code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, NamedTuple

from tree_sitter import Language, Node

from docsguard.models import Argument


class Declaration(NamedTuple):
    """A function-like node found while walking a syntax tree."""

    node: Node  # Node carrying the name/parameters/return type fields
    anchor: Node  # Statement-level node whose preceding siblings are scanned
    name: str | None


class Sibling(NamedTuple):
    """A node preceding a declaration, as seen by the annotation scan."""

    is_comment: bool
    line: int  # 1-based start line
    text: str


@dataclass(frozen=True)
class Grammar:
    name: str
    load_language: Callable[[], Language]
    comment_kinds: frozenset[str]
    collect_functions: Callable[[Node, bytes], Iterator[Declaration]]
    extract_parameters: Callable[[Node, bytes], list[Argument]]
    extract_return_type: Callable[[Node, bytes], str | None]


def node_text(node: Node, source: bytes) -> str:
    """Return the source text spanned by a node."""
    return source[node.start_byte : node.end_byte].decode("utf-8")


def preceding_siblings(
    anchor: Node, source: bytes, comment_kinds: frozenset[str]
) -> Iterator[Sibling]:
    """Yield the siblings before anchor, nearest first."""
    node = anchor.prev_sibling
    while node is not None:
        is_comment = node.type in comment_kinds
        yield Sibling(
            is_comment=is_comment,
            line=node.start_point[0] + 1,
            text=node_text(node, source) if is_comment else "",
        )
        node = node.prev_sibling


def type_annotation_text(annotation: Node | None, source: bytes) -> str | None:
    """Return the type inside a `: Type` annotation node, without the colon."""
    if annotation is None:
        return None
    for child in annotation.children:
        if child.type != ":":
            return node_text(child, source)
    return None
