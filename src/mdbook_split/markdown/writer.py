"""Event stream to markdown serialization.

The writer rebuilds the nesting implied by Start/End pairs and renders it as
CommonMark (with GFM tables and footnotes). Output is a faithful re-encoding
of the events, not a byte-for-byte copy of the original source: headings
become ATX headings, code blocks are fenced, list markers are normalised and
markdown metacharacters in text are backslash-escaped.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from mdbook_split.exceptions import SerializationError
from mdbook_split.markdown.events import (
    CONTAINER_KINDS,
    Alignment,
    Code,
    End,
    Event,
    FootnoteReference,
    HardBreak,
    Html,
    Rule,
    SoftBreak,
    Start,
    Tag,
    TagKind,
    TaskListMarker,
    Text,
)

INLINE_KINDS = frozenset(
    {
        TagKind.EMPHASIS,
        TagKind.STRONG,
        TagKind.STRIKETHROUGH,
        TagKind.LINK,
        TagKind.IMAGE,
    }
)

_DELIMITERS = {
    TagKind.EMPHASIS: "*",
    TagKind.STRONG: "**",
    TagKind.STRIKETHROUGH: "~~",
}

# Used right after a '*' so the two delimiter runs stay apart
_UNDERSCORE_DELIMITERS = {
    TagKind.EMPHASIS: "_",
    TagKind.STRONG: "__",
}

_ALIGNMENT_ROW = {
    Alignment.NONE: "---",
    Alignment.LEFT: ":--",
    Alignment.CENTER: ":-:",
    Alignment.RIGHT: "--:",
}

# Characters that could start inline markup anywhere in a line
_INLINE_SPECIAL_RE = re.compile(r"([\\`*_\[\]<~])")
_ENTITY_LIKE_RE = re.compile(r"&(?=#?[A-Za-z0-9]+;)")

# Line beginnings that would turn a paragraph line into another block
_LINE_START_RES = [
    (re.compile(r"^(#{1,6})(?=[ \t]|$)"), r"\\\1"),
    (re.compile(r"^>"), r"\\>"),
    (re.compile(r"^([-+])(?=[ \t]|$)"), r"\\\1"),
    (re.compile(r"^(\d{1,9})([.)])(?=[ \t]|$)"), r"\1\\\2"),
    (re.compile(r"^(=+)(?=[ \t]*$)"), r"\\\1"),
    (re.compile(r"^(-+)(?=[ \t]*$)"), r"\\\1"),
]

_CLOSING_HASHES_RE = re.compile(r"(^|[ \t])#(#*[ \t]*)$")
_BACKTICK_RUN_RE = re.compile(r"`+")
_FENCE_RUN_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})", re.MULTILINE)


@dataclass
class _Node:
    """A tagged construct with its nested children."""

    tag: Tag | None
    children: list[_Node | Event] = field(default_factory=list)

    @property
    def kind(self) -> TagKind | None:
        return self.tag.kind if self.tag else None


def to_markdown(events: Iterable[Event]) -> str:
    """Render events as markdown text.

    Args:
        events: A balanced event sequence.

    Returns:
        Markdown text ending in a single newline, or "" for no events.

    Raises:
        SerializationError: If Start/End events are unbalanced or mismatched,
            or an event appears where it cannot be rendered.
    """
    root = _build_tree(events)
    text = _render_blocks(root.children)
    return text + "\n" if text else ""


def _build_tree(events: Iterable[Event]) -> _Node:
    """Rebuild nesting from Start/End pairs.

    A run cut out of a longer document may open containers it never closes
    or close ones it never opened. Open containers are closed at the end,
    Ends of containers that are not open are dropped and an item without a
    list gets a bullet list around it. Any other imbalance is an error.
    """
    root = _Node(None)
    stack = [root]

    for event in events:
        if isinstance(event, Start):
            if event.tag.kind is TagKind.ITEM and stack[-1].kind is not TagKind.LIST:
                implicit = _Node(Tag(TagKind.LIST))
                stack[-1].children.append(implicit)
                stack.append(implicit)
            node = _Node(event.tag)
            stack[-1].children.append(node)
            stack.append(node)
        elif isinstance(event, End):
            kind = event.tag.kind
            if kind in CONTAINER_KINDS and all(node.kind is not kind for node in stack):
                continue
            if len(stack) == 1:
                raise SerializationError(
                    f"Unexpected end of {kind.value}",
                    details="No construct is open at this point",
                )
            open_kind = stack[-1].kind
            if open_kind is not kind:
                raise SerializationError(
                    f"Mismatched end of {kind.value}",
                    details=f"Innermost open construct is {open_kind.value}",
                )
            stack.pop()
        else:
            stack[-1].children.append(event)

    unclosed = [node.kind.value for node in stack[1:] if node.kind not in CONTAINER_KINDS]
    if unclosed:
        raise SerializationError(
            "Event sequence ends with unclosed constructs",
            details=f"Still open: {', '.join(unclosed)}",
        )
    return root


def _is_inline(child: _Node | Event) -> bool:
    if isinstance(child, _Node):
        return child.kind in INLINE_KINDS
    if isinstance(child, Html):
        return not child.block
    return not isinstance(child, Rule)


# --- Blocks ---


def _render_blocks(children: Sequence[_Node | Event], tight: bool = False) -> str:
    """Render a sequence of blocks, gathering loose inline runs as text.

    Adjacent lists take turns with their marker style, otherwise they would
    read back as one list.
    """
    parts: list[str] = []
    pending: list[_Node | Event] = []
    alternate = False
    previous_kind: TagKind | None = None

    for child in children:
        if _is_inline(child):
            pending.append(child)
            continue
        if pending:
            parts.append(_render_paragraph(pending))
            pending = []
            previous_kind = None

        kind = child.kind if isinstance(child, _Node) else None
        if kind is TagKind.LIST:
            alternate = previous_kind is TagKind.LIST and not alternate
            parts.append(_render_list(child, alternate=alternate))
        else:
            parts.append(_render_block(child))
        previous_kind = kind

    if pending:
        parts.append(_render_paragraph(pending))

    return ("\n" if tight else "\n\n").join(parts)


def _render_block(child: _Node | Event) -> str:
    if isinstance(child, Rule):
        return "***"
    if isinstance(child, Html):
        return child.text.rstrip("\n")

    kind = child.kind
    if kind is TagKind.PARAGRAPH:
        return _render_paragraph(child.children)
    if kind is TagKind.HEADING:
        return _render_heading(child)
    if kind is TagKind.BLOCK_QUOTE:
        return _prefix_lines(_render_blocks(child.children), "> ", ">")
    if kind is TagKind.CODE_BLOCK:
        return _render_code_block(child)
    if kind is TagKind.FOOTNOTE_DEFINITION:
        body = _render_blocks(child.children)
        return _hang(f"[^{child.tag.label}]:", body, "    ")
    if kind is TagKind.TABLE:
        return _render_table(child)

    raise SerializationError(f"Cannot render {kind.value} outside its parent construct")


def _render_paragraph(children: Sequence[_Node | Event]) -> str:
    lines = _render_inline(children).split("\n")
    return "\n".join(_escape_line_start(line) for line in lines)


def _render_heading(node: _Node) -> str:
    tag = node.tag
    text = _render_inline(node.children).replace("\n", " ").strip()
    # A trailing run of '#' would be read back as a closing sequence
    text = _CLOSING_HASHES_RE.sub(r"\1\\#\2", text)

    attributes = []
    if tag.id:
        attributes.append(f"#{tag.id}")
    attributes.extend(f".{name}" for name in tag.classes)
    if attributes:
        text = f"{text} {{{' '.join(attributes)}}}"

    marker = "#" * tag.level
    return f"{marker} {text}" if text else marker


def _render_code_block(node: _Node) -> str:
    content = "".join(child.text for child in node.children if isinstance(child, Text))
    info = node.tag.info or ""

    longest = max((len(run) for run in _FENCE_RUN_RE.findall(content)), default=0)
    fence_char = "~" if "`" in info else "`"
    fence = fence_char * max(3, longest + 1)

    if content and not content.endswith("\n"):
        content += "\n"
    return f"{fence}{info}\n{content}{fence}"


def _render_list(node: _Node, alternate: bool = False) -> str:
    items = [child for child in node.children if isinstance(child, _Node)]
    for item in items:
        if item.kind is not TagKind.ITEM:
            raise SerializationError(f"Cannot render {item.kind.value} directly inside a list")

    # Items of a tight list hold their text without paragraph wrappers
    tight = not any(
        isinstance(child, _Node) and child.kind is TagKind.PARAGRAPH
        for item in items
        for child in item.children
    )

    start = node.tag.start
    bullet, delimiter = ("-", ")") if alternate else ("*", ".")
    rendered = []
    for index, item in enumerate(items):
        marker = bullet if start is None else f"{start + index}{delimiter}"
        rendered.append(_render_item(item, marker, tight))
    return ("\n" if tight else "\n\n").join(rendered)


def _render_item(item: _Node, marker: str, tight: bool) -> str:
    children = list(item.children)
    checkbox = ""
    if children and isinstance(children[0], TaskListMarker):
        checkbox = "[x] " if children.pop(0).checked else "[ ] "

    body = checkbox + _render_blocks(children, tight=tight)
    return _hang(marker, body.rstrip(" "), " " * (len(marker) + 1))


def _render_table(node: _Node) -> str:
    head = [child for child in node.children if isinstance(child, _Node) and child.kind is TagKind.TABLE_HEAD]
    rows = [child for child in node.children if isinstance(child, _Node) and child.kind is TagKind.TABLE_ROW]
    if len(head) != 1:
        raise SerializationError("A table needs exactly one head row")

    header = _table_cells(head[0])
    alignments = list(node.tag.alignments) or [Alignment.NONE] * len(header)
    alignments += [Alignment.NONE] * (len(header) - len(alignments))

    lines = [
        _table_line(header),
        _table_line([_ALIGNMENT_ROW[alignment] for alignment in alignments]),
    ]
    lines.extend(_table_line(_table_cells(row)) for row in rows)
    return "\n".join(lines)


def _table_cells(row: _Node) -> list[str]:
    cells = []
    for cell in row.children:
        if not (isinstance(cell, _Node) and cell.kind is TagKind.TABLE_CELL):
            raise SerializationError("Table rows may only contain cells")
        cells.append(_render_inline(cell.children).replace("|", "\\|"))
    return cells


def _table_line(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def _prefix_lines(text: str, prefix: str, blank_prefix: str) -> str:
    return "\n".join(prefix + line if line else blank_prefix for line in text.split("\n"))


def _hang(marker: str, body: str, indent: str) -> str:
    """Put ``marker`` before the first line and indent the rest."""
    if not body:
        return marker
    first, *rest = body.split("\n")
    lines = [f"{marker} {first}" if first else marker]
    lines.extend(indent + line if line else "" for line in rest)
    return "\n".join(lines)


# --- Inlines ---


def _render_inline(children: Sequence[_Node | Event]) -> str:
    rendered = ""
    for child in children:
        rendered += _render_inline_child(child, after_star=rendered.endswith("*"))
    return rendered


def _render_inline_child(child: _Node | Event, after_star: bool = False) -> str:
    if isinstance(child, Text):
        return _escape_text(child.text)
    if isinstance(child, Code):
        return _code_span(child.text)
    if isinstance(child, Html):
        return child.text
    if isinstance(child, SoftBreak):
        return "\n"
    if isinstance(child, HardBreak):
        return "\\\n"
    if isinstance(child, FootnoteReference):
        return f"[^{child.label}]"
    if isinstance(child, TaskListMarker):
        return "[x] " if child.checked else "[ ] "
    if not isinstance(child, _Node):
        raise SerializationError(f"Cannot render {type(child).__name__} inside text")

    kind = child.kind
    if kind in _DELIMITERS:
        delimiter = _DELIMITERS[kind]
        if after_star:
            delimiter = _UNDERSCORE_DELIMITERS.get(kind, delimiter)
        return f"{delimiter}{_render_inline(child.children)}{delimiter}"
    if kind is TagKind.LINK:
        if child.tag.autolink:
            raw = "".join(c.text for c in child.children if isinstance(c, Text))
            return f"<{raw or child.tag.dest}>"
        return f"[{_render_inline(child.children)}]({_link_target(child.tag)})"
    if kind is TagKind.IMAGE:
        return f"![{_render_inline(child.children)}]({_link_target(child.tag)})"

    raise SerializationError(f"Cannot render {kind.value} inside text")


def _escape_text(text: str) -> str:
    text = _INLINE_SPECIAL_RE.sub(r"\\\1", text)
    return _ENTITY_LIKE_RE.sub(r"\\&", text)


def _escape_line_start(line: str) -> str:
    for pattern, replacement in _LINE_START_RES:
        escaped, count = pattern.subn(replacement, line, count=1)
        if count:
            return escaped
    return line


def _code_span(text: str) -> str:
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(text)), default=0)
    fence = "`" * (longest + 1)
    # One space each side is stripped when parsed, so pad when needed
    if text.startswith("`") or text.endswith("`") or (
        text.startswith(" ") and text.endswith(" ") and text.strip()
    ):
        text = f" {text} "
    return f"{fence}{text}{fence}"


def _link_target(tag: Tag) -> str:
    dest = tag.dest
    if not dest or any(char in dest for char in " <>\n") or dest.count("(") != dest.count(")"):
        dest = "<" + dest.replace("<", "\\<").replace(">", "\\>") + ">"
    if tag.title:
        title = tag.title.replace("\\", "\\\\").replace('"', '\\"')
        return f'{dest} "{title}"'
    return dest
