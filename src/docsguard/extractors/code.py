"""Source-code extractor.

Finds function-like declarations with tree-sitter and links each one to a
documentation section through a `// @docs: id` (or `/// @docs: [id]`)
comment placed directly above it.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable

from tree_sitter import Parser

from docsguard.base import ParseError, UnsupportedLanguageError
from docsguard.config import Settings
from docsguard.extractors.grammar import Grammar, Sibling, preceding_siblings
from docsguard.extractors.rust import RUST
from docsguard.extractors.source import read_source
from docsguard.extractors.typescript import TYPESCRIPT
from docsguard.models import CodeEntity

log = logging.getLogger(__name__)

_DOCS_ANNOTATION = "@docs:"


class SourceLanguage(Enum):
    TYPESCRIPT = "typescript"
    RUST = "rust"

    @classmethod
    def from_path(cls, path: Path) -> SourceLanguage:
        """Select the grammar for a file strictly by its extension.

        Raises:
            UnsupportedLanguageError: For unknown or missing extensions.
        """
        suffix = path.suffix.lower()
        if not suffix:
            raise UnsupportedLanguageError(
                f"File has no extension, cannot determine its language: {path}", path
            )
        language = _EXTENSIONS.get(suffix)
        if language is None:
            raise UnsupportedLanguageError(
                f"Unsupported extension '{suffix}': {path} "
                "(supported: TypeScript/JavaScript .ts/.tsx/.js/.jsx, Rust .rs)",
                path,
            )
        return language

    @property
    def grammar(self) -> Grammar:
        return TYPESCRIPT if self is SourceLanguage.TYPESCRIPT else RUST


_EXTENSIONS = {
    ".ts": SourceLanguage.TYPESCRIPT,
    ".tsx": SourceLanguage.TYPESCRIPT,
    ".mts": SourceLanguage.TYPESCRIPT,
    ".cts": SourceLanguage.TYPESCRIPT,
    ".js": SourceLanguage.TYPESCRIPT,
    ".jsx": SourceLanguage.TYPESCRIPT,
    ".mjs": SourceLanguage.TYPESCRIPT,
    ".cjs": SourceLanguage.TYPESCRIPT,
    ".rs": SourceLanguage.RUST,
}


def extract_docs_id_from_comment(comment: str) -> str | None:
    """Extract the id from a `/// @docs: [id]` or `// @docs: id` comment.

    Everything after the annotation is the id, so `@docs: [auth login]`
    yields "auth login". Surrounding brackets are dropped only as a pair.
    Returns None for block comments and for line comments that do not
    start with the annotation.
    """
    text = comment.strip()
    if text.startswith("///"):
        text = text[3:]
    elif text.startswith("//"):
        text = text[2:]
    else:
        return None

    text = text.strip()
    if not text.startswith(_DOCS_ANNOTATION):
        return None
    doc_id = text[len(_DOCS_ANNOTATION) :].strip()
    if doc_id.startswith("[") and doc_id.endswith("]"):
        doc_id = doc_id[1:-1]
    return doc_id.strip() or None


def find_docs_annotation(
    siblings: Iterable[Sibling], declaration_line: int, max_gap: int
) -> str | None:
    """Find the doc id annotating a declaration.

    Walks the nodes above the declaration, nearest first, through the
    contiguous block of comments. The walk stops at the first non-comment
    node, or when two consecutive candidates are more than max_gap lines
    apart (a blank-line separated block belongs to something else). The
    nearest matching comment wins.

    Args:
        siblings: Preceding siblings of the declaration, nearest first
        declaration_line: 1-based line of the declaration
        max_gap: Largest line distance between consecutive candidates

    Returns:
        The doc id, or None if the declaration is not annotated
    """
    previous_line = declaration_line
    for sibling in siblings:
        # Nodes sharing the declaration's line are not "above" it
        if sibling.line >= declaration_line:
            continue
        if previous_line - sibling.line > max_gap:
            break
        previous_line = sibling.line

        if not sibling.is_comment:
            break
        doc_id = extract_docs_id_from_comment(sibling.text)
        if doc_id:
            return doc_id
    return None


def extract_code_source(
    source: str, file_path: Path | str, settings: Settings | None = None
) -> list[CodeEntity]:
    """Extract function entities from source text.

    The language is selected from file_path's extension; the file itself
    is not read.

    Raises:
        UnsupportedLanguageError: If the extension maps to no grammar.
        ParseError: If the grammar fails to produce a syntax tree.
    """
    settings = settings or Settings()
    file_path = Path(file_path)
    grammar = SourceLanguage.from_path(file_path).grammar
    source_bytes = source.encode("utf-8")

    try:
        parser = Parser(grammar.load_language())
        tree = parser.parse(source_bytes)
    except Exception as e:
        raise ParseError(
            f"Failed to parse {file_path} as {grammar.name}: {e.__class__.__name__}: {e}",
            file_path,
        ) from e
    if tree is None:
        raise ParseError(f"Failed to parse {file_path} as {grammar.name}", file_path)

    if tree.root_node.has_error:
        log.warning("%s: syntax errors found, extraction may be incomplete", file_path)

    entities: list[CodeEntity] = []
    for declaration in grammar.collect_functions(tree.root_node, source_bytes):
        # Anonymous functions cannot be referenced from documentation
        if not declaration.name:
            continue

        line = declaration.anchor.start_point[0] + 1
        siblings = preceding_siblings(
            declaration.anchor, source_bytes, grammar.comment_kinds
        )
        entities.append(
            CodeEntity(
                name=declaration.name,
                file_path=file_path,
                line=line,
                args=tuple(grammar.extract_parameters(declaration.node, source_bytes)),
                return_type=grammar.extract_return_type(declaration.node, source_bytes),
                doc_id=find_docs_annotation(siblings, line, settings.max_comment_gap),
            )
        )

    log.debug(
        "%s: %d functions found (%s), %d linked",
        file_path,
        len(entities),
        grammar.name,
        sum(1 for e in entities if e.doc_id),
    )
    return entities


def extract_code(file_path: Path | str, settings: Settings | None = None) -> list[CodeEntity]:
    """Extract function entities from a source file.

    Extraction is all-or-nothing: any failure aborts the whole call.

    Raises:
        UnsupportedLanguageError: If the extension maps to no grammar.
        InputError: If the file is missing, unreadable or not UTF-8.
        FileTooLargeError: If the file exceeds the configured size ceiling.
        ParseError: If the grammar fails on the file.
    """
    settings = settings or Settings()
    file_path = Path(file_path)
    # Fail on the extension before touching the filesystem
    SourceLanguage.from_path(file_path)
    source = read_source(file_path, settings.max_file_size)
    return extract_code_source(source, file_path, settings)
