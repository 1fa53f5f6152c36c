"""Markdown to event stream conversion.

Parsing is delegated to markdown-it-py (CommonMark) with mdit-py-plugins for
footnotes. Smart punctuation is markdown-it's `smartquotes` plus the dash
and ellipsis rule from :mod:`mdbook_split.markdown.typography`. The token
stream is translated into the flat event sequence defined in
:mod:`mdbook_split.markdown.events`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from functools import lru_cache

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin

from mdbook_split.config.settings import DEFAULT_EXTENSIONS
from mdbook_split.exceptions import UnknownExtensionError
from mdbook_split.markdown.events import (
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
from mdbook_split.markdown.typography import smart_dashes_plugin

logger = logging.getLogger(__name__)

KNOWN_EXTENSIONS = (
    "footnotes",
    "smart_punctuation",
    "tables",
    "strikethrough",
    "tasklists",
)

# Token types that map one-to-one onto a tag kind
_SIMPLE_TAGS = {
    "blockquote": TagKind.BLOCK_QUOTE,
    "em": TagKind.EMPHASIS,
    "strong": TagKind.STRONG,
    "s": TagKind.STRIKETHROUGH,
}


@lru_cache(maxsize=16)
def _build_parser(extensions: frozenset[str]) -> MarkdownIt:
    """Create a markdown-it instance for a set of extensions.

    Args:
        extensions: Extension names, all members of KNOWN_EXTENSIONS.

    Returns:
        Configured MarkdownIt instance (cached per extension set).

    Raises:
        UnknownExtensionError: If an extension name is not recognised.
    """
    unknown = sorted(extensions - set(KNOWN_EXTENSIONS))
    if unknown:
        raise UnknownExtensionError(f"Unknown markdown extension: {', '.join(unknown)}")

    options = {}
    if "smart_punctuation" in extensions:
        options["typographer"] = True
    if "tasklists" in extensions:
        options["tasklists"] = True

    md = MarkdownIt("commonmark", options)
    if "tables" in extensions:
        md.enable("table")
    if "strikethrough" in extensions:
        md.enable("strikethrough")
    if "smart_punctuation" in extensions:
        md.enable("smartquotes")
        md.use(smart_dashes_plugin)
    if "footnotes" in extensions:
        # Definitions stay in place so they follow their chapter
        md.use(footnote_plugin, inline=False, move_to_end=False)

    logger.debug(f"Built markdown parser with extensions: {sorted(extensions)}")
    return md


def parse_events(text: str, extensions: Iterable[str] | None = None) -> list[Event]:
    """Parse markdown text into a list of events.

    Args:
        text: Markdown source.
        extensions: Extension names to enable (default: footnotes,
            smart_punctuation, tables).

    Returns:
        The document's events in source order.

    Raises:
        UnknownExtensionError: If an extension name is not recognised.
    """
    names = DEFAULT_EXTENSIONS if extensions is None else extensions
    md = _build_parser(frozenset(names))
    tokens = md.parse(text, {})
    return _EventConverter().convert(tokens)


def _alignment(token: Token) -> Alignment:
    style = str(token.attrGet("style") or "")
    if style.startswith("text-align:"):
        return Alignment(style.removeprefix("text-align:"))
    return Alignment.NONE


class _EventConverter:
    """Translate markdown-it tokens into events.

    Open tags are kept on a stack so every End carries the same Tag as its
    Start.
    """

    def __init__(self) -> None:
        self.events: list[Event] = []
        self._open: list[Tag] = []
        self._in_table_head = False

    def convert(self, tokens: Sequence[Token]) -> list[Event]:
        for index, token in enumerate(tokens):
            self._block(tokens, index, token)
        return self.events

    def _start(self, tag: Tag) -> None:
        self._open.append(tag)
        self.events.append(Start(tag))

    def _end(self) -> None:
        self.events.append(End(self._open.pop()))

    def _leaf(self, tag: Tag, text: str) -> None:
        self._start(tag)
        if text:
            self.events.append(Text(text))
        self._end()

    def _block(self, tokens: Sequence[Token], index: int, token: Token) -> None:
        kind, _, edge = token.type.rpartition("_")
        if edge not in ("open", "close"):
            kind = token.type

        if edge == "close" and kind in (
            "blockquote",
            "bullet_list",
            "ordered_list",
            "list_item",
            "heading",
            "table",
            "th",
            "td",
            "footnote_reference",
        ):
            self._end()
            return

        if kind == "paragraph":
            # Tight list items carry hidden paragraphs; their text sits
            # directly in the item
            if token.hidden:
                return
            if edge == "open":
                self._start(Tag(TagKind.PARAGRAPH))
            else:
                self._end()
        elif kind == "heading":
            classes = str(token.attrGet("class") or "").split()
            heading_id = token.attrGet("id")
            self._start(
                Tag(
                    TagKind.HEADING,
                    level=int(token.tag[1:]),
                    id=str(heading_id) if heading_id is not None else None,
                    classes=tuple(classes),
                )
            )
        elif kind in _SIMPLE_TAGS:
            self._start(Tag(_SIMPLE_TAGS[kind]))
        elif kind == "bullet_list":
            self._start(Tag(TagKind.LIST))
        elif kind == "ordered_list":
            start = token.attrGet("start")
            self._start(Tag(TagKind.LIST, start=1 if start is None else int(start)))
        elif kind == "list_item":
            self._start(Tag(TagKind.ITEM))
            if token.meta and "checked" in token.meta:
                self.events.append(TaskListMarker(bool(token.meta["checked"])))
        elif kind == "footnote_reference":
            self._start(Tag(TagKind.FOOTNOTE_DEFINITION, label=token.meta["label"]))
        elif kind == "table":
            self._start(Tag(TagKind.TABLE, alignments=self._table_alignments(tokens, index)))
        elif kind == "thead":
            self._in_table_head = edge == "open"
            if edge == "open":
                self._start(Tag(TagKind.TABLE_HEAD))
            else:
                self._end()
        elif kind == "tbody":
            return
        elif kind == "tr":
            # Header cells sit directly in the table head
            if self._in_table_head:
                return
            if edge == "open":
                self._start(Tag(TagKind.TABLE_ROW))
            else:
                self._end()
        elif kind in ("th", "td"):
            self._start(Tag(TagKind.TABLE_CELL))
        elif kind == "inline":
            self._inline(token.children or [])
        elif kind == "fence":
            self._leaf(Tag(TagKind.CODE_BLOCK, info=token.info.strip()), token.content)
        elif kind == "code_block":
            self._leaf(Tag(TagKind.CODE_BLOCK), token.content)
        elif kind == "html_block":
            self.events.append(Html(token.content, block=True))
        elif kind == "hr":
            self.events.append(Rule())
        else:
            logger.debug(f"Ignoring unsupported block token: {token.type}")

    def _table_alignments(self, tokens: Sequence[Token], index: int) -> tuple[Alignment, ...]:
        alignments = []
        for token in tokens[index + 1 :]:
            if token.type == "thead_close":
                break
            if token.type == "th_open":
                alignments.append(_alignment(token))
        return tuple(alignments)

    def _inline(self, children: Sequence[Token]) -> None:
        for token in children:
            kind, _, edge = token.type.rpartition("_")
            if edge not in ("open", "close"):
                kind = token.type

            if edge == "close":
                self._end()
            elif kind in _SIMPLE_TAGS:
                self._start(Tag(_SIMPLE_TAGS[kind]))
            elif kind == "link":
                self._start(
                    Tag(
                        TagKind.LINK,
                        dest=str(token.attrGet("href") or ""),
                        title=str(token.attrGet("title") or ""),
                        autolink=token.markup == "autolink",
                    )
                )
            elif kind == "image":
                self._start(
                    Tag(
                        TagKind.IMAGE,
                        dest=str(token.attrGet("src") or ""),
                        title=str(token.attrGet("title") or ""),
                    )
                )
                self._inline(token.children or [])
                self._end()
            elif kind in ("text", "text_special"):
                if token.content:
                    self.events.append(Text(token.content))
            elif kind == "code_inline":
                self.events.append(Code(token.content))
            elif kind == "softbreak":
                self.events.append(SoftBreak())
            elif kind == "hardbreak":
                self.events.append(HardBreak())
            elif kind == "html_inline":
                self.events.append(Html(token.content))
            elif kind == "footnote_ref":
                self.events.append(FootnoteReference(token.meta["label"]))
            else:
                logger.debug(f"Ignoring unsupported inline token: {token.type}")
