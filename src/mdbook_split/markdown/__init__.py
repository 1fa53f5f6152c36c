"""Markdown parsing and writing on a flat event stream."""

from mdbook_split.markdown.events import (
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
from mdbook_split.markdown.parser import parse_events
from mdbook_split.markdown.writer import to_markdown

__all__ = [
    "Event",
    "Start",
    "End",
    "Text",
    "Code",
    "Html",
    "FootnoteReference",
    "SoftBreak",
    "HardBreak",
    "Rule",
    "TaskListMarker",
    "Tag",
    "TagKind",
    "parse_events",
    "to_markdown",
]
