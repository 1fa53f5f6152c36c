"""Structural markdown events.

A document is represented as a flat, ordered sequence of events: block and
inline constructs open with a :class:`Start` and close with a matching
:class:`End`, and leaf content (text, code spans, breaks, rules) appears as
single events in between. This is the shape the splitter partitions and the
writer turns back into markdown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TagKind(str, Enum):
    """Kinds of constructs that open and close around other events."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCK_QUOTE = "block_quote"
    CODE_BLOCK = "code_block"
    LIST = "list"
    ITEM = "item"
    FOOTNOTE_DEFINITION = "footnote_definition"
    TABLE = "table"
    TABLE_HEAD = "table_head"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    STRIKETHROUGH = "strikethrough"
    LINK = "link"
    IMAGE = "image"


# Blocks that can hold other blocks (and therefore headings)
CONTAINER_KINDS = frozenset(
    {
        TagKind.BLOCK_QUOTE,
        TagKind.LIST,
        TagKind.ITEM,
        TagKind.FOOTNOTE_DEFINITION,
    }
)


class Alignment(str, Enum):
    """Table column alignment."""

    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class Tag:
    """A construct kind plus the payload that kind carries.

    Only the fields relevant to ``kind`` are set; the rest keep their
    defaults.
    """

    kind: TagKind
    level: int = 0  # heading level 1-6
    id: str | None = None  # heading id
    classes: tuple[str, ...] = ()  # heading classes
    info: str | None = None  # code block info string, None when indented
    start: int | None = None  # ordered list start, None for bullet lists
    dest: str = ""  # link/image destination
    title: str = ""  # link/image title
    autolink: bool = False
    label: str = ""  # footnote definition label
    alignments: tuple[Alignment, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Start:
    """Opening of a tagged construct."""

    tag: Tag


@dataclass(frozen=True)
class End:
    """Closing of a tagged construct."""

    tag: Tag


@dataclass(frozen=True)
class Text:
    """A run of literal text."""

    text: str


@dataclass(frozen=True)
class Code:
    """An inline code span."""

    text: str


@dataclass(frozen=True)
class Html:
    """Raw HTML, either a whole block or an inline fragment."""

    text: str
    block: bool = False


@dataclass(frozen=True)
class FootnoteReference:
    """A ``[^label]`` reference."""

    label: str


@dataclass(frozen=True)
class SoftBreak:
    """A line ending inside a paragraph."""


@dataclass(frozen=True)
class HardBreak:
    """A forced line break."""


@dataclass(frozen=True)
class Rule:
    """A thematic break."""


@dataclass(frozen=True)
class TaskListMarker:
    """The ``[ ]``/``[x]`` checkbox opening a task list item."""

    checked: bool


Event = (
    Start
    | End
    | Text
    | Code
    | Html
    | FootnoteReference
    | SoftBreak
    | HardBreak
    | Rule
    | TaskListMarker
)


def heading(level: int) -> Tag:
    """Build a heading tag of the given level."""
    return Tag(TagKind.HEADING, level=level)


def is_heading_start(event: Event, level: int = 1) -> bool:
    """Check whether an event opens a heading of exactly ``level``."""
    return (
        isinstance(event, Start)
        and event.tag.kind is TagKind.HEADING
        and event.tag.level == level
    )
