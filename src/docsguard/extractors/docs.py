"""Markdown documentation extractor.

Sections are opened by `<!-- @docs-id: id -->` comments and stay open until
the next marker or the end of the document. While a section is open, three
independent capture strategies turn list items, definition-style paragraph
lines and table rows into documented arguments:

    - `name` (`type`): description      list item
    - name: description                 list item

    `name` (`type`): description        paragraph line (definition)

    | Param | Type | Description |      table row
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple

from markdown_it import MarkdownIt
from markdown_it.token import Token

from docsguard.base import ParseError
from docsguard.config import Settings
from docsguard.extractors.source import read_source
from docsguard.models import Argument, DocSection

log = logging.getLogger(__name__)

_DOCS_ID = re.compile(r"<!--\s*@docs-id:\s*(?P<id>.*?)\s*-->", re.DOTALL)

_TEXT_KINDS = frozenset({"text", "text_special"})
_BREAK_KINDS = frozenset({"softbreak", "hardbreak"})
_EMPHASIS_KINDS = frozenset({"em_open", "strong_open"})

_NAME_HEADERS = ("name", "param", "arg")
_TYPE_HEADERS = ("type",)
_DESC_HEADERS = ("desc",)


class LineIndex:
    """Maps character offsets in a document to 1-based line numbers."""

    def __init__(self, source: str):
        self._starts = [0]
        self._starts.extend(i + 1 for i, ch in enumerate(source) if ch == "\n")

    def line_of(self, offset: int) -> int:
        return bisect_right(self._starts, offset)

    def offset_of(self, line: int) -> int:
        """Offset of the first character of a 0-based line."""
        return self._starts[min(max(line, 0), len(self._starts) - 1)]


class Event(NamedTuple):
    """One structural event: a block token or an inline child token."""

    kind: str
    content: str
    offset: int


def iter_events(tokens: Iterable[Token], source: str, index: LineIndex) -> Iterator[Event]:
    """Flatten markdown-it block tokens and their inline children.

    Block tokens carry a line range; inline children inherit the offset of
    their block, except HTML comments, which are located precisely.
    """
    block_offset = 0
    for token in tokens:
        if token.map is not None:
            block_offset = index.offset_of(token.map[0])

        if token.type == "inline":
            cursor = block_offset
            for child in token.children or ():
                offset = block_offset
                if child.type == "html_inline":
                    found = source.find(child.content, cursor)
                    if found >= 0:
                        offset = cursor = found
                yield Event(child.type, child.content, offset)
        elif token.type == "html_block":
            found = source.find(token.content.strip(), block_offset)
            yield Event(token.type, token.content, found if found >= 0 else block_offset)
        else:
            yield Event(token.type, token.content, block_offset)


def extract_docs_id_from_html(html: str) -> str | None:
    """Extract the id from a `<!-- @docs-id: id -->` comment."""
    match = _DOCS_ID.fullmatch(html.strip())
    if not match or not match.group("id"):
        return None
    return match.group("id")


def find_block_markers(html: str, source: str, offset: int) -> Iterator[tuple[str, int]]:
    """Yield (id, offset) for every marker comment inside an HTML block.

    A block such as `<div>` ... `</div>` can hold several markers on its
    own lines. Offsets are located in source starting from the block's
    offset; a marker that cannot be located reports the block's offset.
    """
    cursor = offset
    for match in _DOCS_ID.finditer(html):
        found = source.find(match.group(0), cursor)
        if found >= 0:
            cursor = found + len(match.group(0))
        if match.group("id"):
            yield match.group("id"), found if found >= 0 else offset


def _strip_separator(text: str) -> str:
    text = text.strip()
    for separator in (":", "—", "–", "-"):
        if text.startswith(separator):
            return text[len(separator) :].strip()
    return text


def _split_type(rest: str) -> tuple[str | None, str] | None:
    """Split `(type): description` into its parts.

    Returns None if rest opens a parenthesis that is never closed.
    """
    rest = rest.strip()
    if not rest.startswith("("):
        return None, rest
    close = rest.find(")")
    if close < 0:
        return None
    type_name = rest[1:close].strip().strip("`").strip()
    return type_name or None, rest[close + 1 :]


def parse_list_item(text: str) -> Argument | None:
    """Parse a bullet's text as a documented argument.

    Accepted forms: `` `name` (`type`): desc ``, `name: desc` and
    `name (type): desc`. Unquoted names must be a single token so prose
    bullets such as "See the guide: ..." are not mistaken for arguments.
    """
    text = text.strip()
    if not text:
        return None

    if text.startswith("`"):
        end = text.find("`", 1)
        if end < 0:
            return None
        name, rest = text[1:end].strip(), text[end + 1 :]
    else:
        colon = text.find(":")
        if colon < 0:
            return None
        head = text[:colon]
        paren = head.find("(")
        if paren >= 0:
            name, rest = head[:paren].strip(), text[paren:]
        else:
            name, rest = head.strip(), text[colon:]
        if " " in name:
            return None

    if not name:
        return None

    split = _split_type(rest)
    if split is None:
        return Argument(name=name, description=rest.strip() or None)
    type_name, description = split
    return Argument(
        name=name,
        type_name=type_name,
        description=_strip_separator(description) or None,
    )


def parse_definition(line: str) -> Argument | None:
    """Parse a paragraph line of the form `` `name` (`type`): description ``.

    Only lines that start with a backtick-quoted single-token name followed
    by an optional parenthesized type and a colon qualify; anything else is
    ordinary prose.
    """
    line = line.strip()
    if not line.startswith("`"):
        return None
    end = line.find("`", 1)
    if end < 0:
        return None
    name = line[1:end].strip()
    if not name or any(ch.isspace() for ch in name):
        return None

    split = _split_type(line[end + 1 :])
    if split is None:
        return None
    type_name, rest = split
    rest = rest.strip()
    if not rest.startswith(":"):
        return None
    return Argument(name=name, type_name=type_name, description=rest[1:].strip() or None)


def parse_table_row(headers: list[str], row: list[str]) -> Argument | None:
    """Map a table body row to an argument using its header texts."""
    if not row:
        return None

    def find_column(names: tuple[str, ...]) -> int | None:
        for i, header in enumerate(headers):
            lower = header.lower()
            if any(n in lower for n in names):
                return i
        return None

    def cell(column: int | None, code: bool = True) -> str | None:
        if column is None or column >= len(row):
            return None
        text = row[column].strip()
        if code:
            text = text.strip("`").strip()
        return text or None

    name_column = find_column(_NAME_HEADERS)
    name = cell(name_column if name_column is not None else 0)
    if not name:
        return None

    return Argument(
        name=name,
        type_name=cell(find_column(_TYPE_HEADERS)),
        description=cell(find_column(_DESC_HEADERS), code=False),
    )


@dataclass
class _ItemText:
    parts: list[str] = field(default_factory=list)
    rich: bool = False

    @property
    def empty(self) -> bool:
        return not "".join(self.parts).strip()


class _ListItemCapture:
    """Turns bullets into arguments. Nested items are captured on their own."""

    def __init__(self) -> None:
        self._items: list[_ItemText] = []

    def feed(self, event: Event) -> list[Argument]:
        if event.kind == "list_item_open":
            self._items.append(_ItemText())
            return []
        if not self._items:
            return []

        item = self._items[-1]
        if event.kind == "list_item_close":
            self._items.pop()
            # Bullets opening with emphasis are callouts, not arguments
            if item.rich:
                return []
            arg = parse_list_item("".join(item.parts))
            return [arg] if arg else []

        if event.kind in _TEXT_KINDS:
            item.parts.append(event.content)
        elif event.kind == "code_inline":
            item.parts.append(f"`{event.content}`")
        elif event.kind in _BREAK_KINDS or event.kind == "paragraph_close":
            item.parts.append(" ")
        elif event.kind in _EMPHASIS_KINDS and item.empty:
            item.rich = True
        return []


class _DefinitionCapture:
    """Turns definition-style lines of top-level paragraphs into arguments."""

    def __init__(self) -> None:
        self._list_depth = 0
        self._lines: list[str] | None = None

    def feed(self, event: Event) -> list[Argument]:
        if event.kind == "list_item_open":
            self._list_depth += 1
        elif event.kind == "list_item_close":
            self._list_depth -= 1
        elif event.kind == "paragraph_open" and self._list_depth == 0:
            self._lines = [""]
        elif self._lines is None:
            pass
        elif event.kind == "paragraph_close":
            lines, self._lines = self._lines, None
            return [arg for arg in map(parse_definition, lines) if arg]
        elif event.kind in _TEXT_KINDS:
            self._lines[-1] += event.content
        elif event.kind == "code_inline":
            self._lines[-1] += f"`{event.content}`"
        elif event.kind in _BREAK_KINDS:
            self._lines.append("")
        return []


class _TableCapture:
    """Turns table body rows into arguments, columns chosen by header text."""

    def __init__(self) -> None:
        self._headers: list[str] = []
        self._in_head = False
        self._row: list[str] = []
        self._cell: list[str] | None = None

    def feed(self, event: Event) -> list[Argument]:
        kind = event.kind
        if kind == "table_open":
            self._headers = []
        elif kind == "thead_open":
            self._in_head = True
        elif kind == "thead_close":
            self._in_head = False
        elif kind == "tr_open":
            self._row = []
        elif kind in ("th_open", "td_open"):
            self._cell = []
        elif kind in ("th_close", "td_close"):
            self._row.append("".join(self._cell or ()).strip())
            self._cell = None
        elif kind == "tr_close":
            if self._in_head:
                self._headers = self._row
            else:
                arg = parse_table_row(self._headers, self._row)
                return [arg] if arg else []
        elif self._cell is not None and (kind in _TEXT_KINDS or kind == "code_inline"):
            self._cell.append(event.content)
        return []


class _TitleCapture:
    """Collects heading text; returns it when the heading closes."""

    def __init__(self) -> None:
        self._parts: list[str] | None = None

    def feed(self, event: Event) -> str | None:
        if event.kind == "heading_open":
            self._parts = []
        elif self._parts is None:
            pass
        elif event.kind == "heading_close":
            parts, self._parts = self._parts, None
            return "".join(parts).strip()
        elif event.kind in _TEXT_KINDS or event.kind == "code_inline":
            self._parts.append(event.content)
        return None


@dataclass
class _OpenSection:
    id: str
    line: int
    title: str | None = None
    args: list[Argument] = field(default_factory=list)

    def close(self, file_path: Path) -> DocSection:
        return DocSection(
            id=self.id,
            file_path=file_path,
            line=self.line,
            title=self.title,
            args=tuple(self.args),
        )


def _markdown() -> MarkdownIt:
    # The commonmark preset keeps raw HTML, which carries the section markers
    return MarkdownIt("commonmark").enable("table")


def extract_docs_source(source: str, file_path: Path | str) -> list[DocSection]:
    """Extract documentation sections from markdown text.

    A new marker always closes the open section first, so sections never
    nest. A document without markers yields an empty list.

    Raises:
        ParseError: If the markdown parser fails.
    """
    file_path = Path(file_path)
    index = LineIndex(source)
    try:
        tokens = _markdown().parse(source)
    except Exception as e:
        raise ParseError(
            f"Failed to parse markdown {file_path}: {e.__class__.__name__}: {e}", file_path
        ) from e

    sections: list[DocSection] = []
    current: _OpenSection | None = None
    title = _TitleCapture()
    captures = (_ListItemCapture(), _DefinitionCapture(), _TableCapture())

    for event in iter_events(tokens, source, index):
        markers: list[tuple[str, int]] = []
        if event.kind == "html_block":
            markers = list(find_block_markers(event.content, source, event.offset))
        elif event.kind == "html_inline":
            doc_id = extract_docs_id_from_html(event.content)
            if doc_id:
                markers = [(doc_id, event.offset)]
        if markers:
            for doc_id, offset in markers:
                if current is not None:
                    sections.append(current.close(file_path))
                current = _OpenSection(id=doc_id, line=index.line_of(offset))
            continue

        heading = title.feed(event)
        if heading and current is not None and current.title is None:
            current.title = heading

        for capture in captures:
            args = capture.feed(event)
            if current is not None:
                current.args.extend(args)

    if current is not None:
        sections.append(current.close(file_path))

    log.debug("%s: %d documentation sections found", file_path, len(sections))
    return sections


def extract_docs(file_path: Path | str, settings: Settings | None = None) -> list[DocSection]:
    """Extract documentation sections from a markdown file.

    Raises:
        InputError: If the file is missing, unreadable or not UTF-8.
        FileTooLargeError: If the file exceeds the configured size ceiling.
        ParseError: If the markdown parser fails.
    """
    settings = settings or Settings()
    file_path = Path(file_path)
    source = read_source(file_path, settings.max_file_size)
    return extract_docs_source(source, file_path)
