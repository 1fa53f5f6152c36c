"""Tests for markdown to event parsing."""

import pytest

from mdbook_split.exceptions import ConfigError, UnknownExtensionError
from mdbook_split.markdown.events import (
    Alignment,
    Code,
    End,
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
    heading,
    is_heading_start,
)
from mdbook_split.markdown.parser import _build_parser, parse_events

PARAGRAPH = Tag(TagKind.PARAGRAPH)


def _kinds(events):
    return [e.tag.kind for e in events if isinstance(e, Start)]


class TestBlocks:
    """Block-level constructs."""

    def test_atx_heading(self):
        """A heading opens, holds its text, and closes with the same tag."""
        h1 = heading(1)

        assert parse_events("# Chapter 1\n") == [Start(h1), Text("Chapter 1"), End(h1)]

    def test_heading_levels(self):
        """Heading level comes from the marker."""
        events = parse_events("## Two\n\n###### Six\n")

        levels = [e.tag.level for e in events if isinstance(e, Start)]
        assert levels == [2, 6]

    def test_paragraph_with_inlines(self):
        """Emphasis nests inside the paragraph."""
        em = Tag(TagKind.EMPHASIS)

        assert parse_events("Hello *world*\n") == [
            Start(PARAGRAPH),
            Text("Hello "),
            Start(em),
            Text("world"),
            End(em),
            End(PARAGRAPH),
        ]

    def test_soft_and_hard_breaks(self):
        """Line endings become soft breaks, two trailing spaces hard ones."""
        events = parse_events("one\ntwo  \nthree\n")

        assert SoftBreak() in events
        assert HardBreak() in events

    def test_tight_list_has_no_paragraphs(self):
        """Items of a tight list hold their text directly."""
        bullets = Tag(TagKind.LIST)
        item = Tag(TagKind.ITEM)

        assert parse_events("- a\n- b\n") == [
            Start(bullets),
            Start(item),
            Text("a"),
            End(item),
            Start(item),
            Text("b"),
            End(item),
            End(bullets),
        ]

    def test_loose_list_keeps_paragraphs(self):
        """Items of a loose list wrap their text in paragraphs."""
        events = parse_events("- a\n\n- b\n")

        assert _kinds(events).count(TagKind.PARAGRAPH) == 2

    def test_ordered_list_start(self):
        """Ordered lists remember their first number."""
        events = parse_events("3. three\n4. four\n")

        assert events[0] == Start(Tag(TagKind.LIST, start=3))

    def test_ordered_list_starting_at_zero(self):
        """A start of zero is kept as zero."""
        events = parse_events("0. zero\n")

        assert events[0].tag.start == 0

    def test_fenced_code_block(self):
        """Fenced code keeps its info string and raw content."""
        code = Tag(TagKind.CODE_BLOCK, info="rust")

        assert parse_events("```rust\nfn main() {}\n```\n") == [
            Start(code),
            Text("fn main() {}\n"),
            End(code),
        ]

    def test_indented_code_block_has_no_info(self):
        """Indented code has no info string."""
        events = parse_events("    let x = 1;\n")

        assert events[0] == Start(Tag(TagKind.CODE_BLOCK))
        assert events[1] == Text("let x = 1;\n")

    def test_block_quote(self):
        """Quotes are containers around paragraphs."""
        assert _kinds(parse_events("> quoted\n")) == [TagKind.BLOCK_QUOTE, TagKind.PARAGRAPH]

    def test_rule(self):
        """Thematic breaks are single events."""
        assert parse_events("***\n") == [Rule()]

    def test_html_block(self):
        """Block HTML is kept verbatim."""
        assert parse_events("<div>\nhi\n</div>\n") == [Html("<div>\nhi\n</div>\n", block=True)]

    def test_empty_document(self):
        """Empty input gives no events."""
        assert parse_events("") == []


class TestInlines:
    """Inline constructs."""

    def test_code_span(self):
        """Code spans are single events."""
        events = parse_events("Use `mdbook build`.\n")

        assert Code("mdbook build") in events

    def test_link(self):
        """Links carry destination and title."""
        events = parse_events('[mdBook](https://example.com/book "Docs")\n')

        assert events[1] == Start(Tag(TagKind.LINK, dest="https://example.com/book", title="Docs"))
        assert events[2] == Text("mdBook")

    def test_autolink(self):
        """Autolinks are flagged."""
        events = parse_events("<https://example.com>\n")

        link = events[1]
        assert link.tag.autolink
        assert link.tag.dest == "https://example.com"

    def test_reference_link_resolves_inline(self):
        """Reference links resolve to their destination."""
        events = parse_events("[docs][d]\n\n[d]: https://example.com\n")

        assert events[1].tag.dest == "https://example.com"

    def test_image(self):
        """Images wrap their alt text."""
        events = parse_events("![alt text](img.png)\n")

        assert events[1] == Start(Tag(TagKind.IMAGE, dest="img.png"))
        assert events[2] == Text("alt text")
        assert events[3] == End(Tag(TagKind.IMAGE, dest="img.png"))

    def test_inline_html(self):
        """Inline HTML stays inline."""
        events = parse_events("a <kbd>b</kbd>\n")

        assert Html("<kbd>") in events

    def test_escaped_text_is_one_event(self):
        """Backslash escapes merge into the surrounding text."""
        events = parse_events("\\# not a heading\n")

        assert events == [Start(PARAGRAPH), Text("# not a heading"), End(PARAGRAPH)]


class TestExtensions:
    """Optional markdown extensions."""

    def test_table_with_alignment(self):
        """Tables record one alignment per column."""
        events = parse_events("| a | b | c |\n|:--|:-:|---|\n| 1 | 2 | 3 |\n")

        assert events[0].tag.kind is TagKind.TABLE
        assert events[0].tag.alignments == (Alignment.LEFT, Alignment.CENTER, Alignment.NONE)
        kinds = _kinds(events)
        assert kinds.count(TagKind.TABLE_HEAD) == 1
        assert kinds.count(TagKind.TABLE_ROW) == 1
        assert kinds.count(TagKind.TABLE_CELL) == 6

    def test_tables_disabled(self):
        """Without the extension a table is a paragraph."""
        events = parse_events("| a |\n|---|\n", extensions=[])

        assert _kinds(events) == [TagKind.PARAGRAPH]

    def test_footnotes(self):
        """References and definitions stay where they are written."""
        events = parse_events("Text[^1]\n\n[^1]: Note\n\nAfter.\n")

        assert FootnoteReference("1") in events
        definition = Tag(TagKind.FOOTNOTE_DEFINITION, label="1")
        start = events.index(Start(definition))
        end = events.index(End(definition))
        assert Text("Note") in events[start:end]
        assert Text("After.") in events[end:]

    def test_smart_punctuation(self):
        """Quotes and dashes are made typographic."""
        events = parse_events('"Hi" -- there\n')

        assert events[1] == Text("“Hi” – there")

    def test_smart_punctuation_dashes_and_ellipsis(self):
        """Hyphen runs become dashes and three dots an ellipsis."""
        events = parse_events("a---b ----c wait...\n")

        assert events[1] == Text("a—b ––c wait…")

    def test_smart_punctuation_leaves_other_symbols(self):
        """Copyright marks, plus-minus and repeated marks stay as typed."""
        events = parse_events("(c) (tm) +- what?..... no!!!!\n")

        assert events[1] == Text("(c) (tm) +- what?….. no!!!!")

    def test_smart_punctuation_skips_autolinks(self):
        """Autolink text keeps its hyphens."""
        events = parse_events("<https://example.com/a--b>\n")

        assert Text("https://example.com/a--b") in events

    def test_smart_punctuation_disabled(self):
        """Plain quotes stay plain without the extension."""
        events = parse_events('"Hi"\n', extensions=["tables"])

        assert events[1] == Text('"Hi"')

    def test_strikethrough(self):
        """Strikethrough only parses when enabled."""
        enabled = parse_events("~~gone~~\n", extensions=["strikethrough"])
        disabled = parse_events("~~gone~~\n")

        assert TagKind.STRIKETHROUGH in _kinds(enabled)
        assert TagKind.STRIKETHROUGH not in _kinds(disabled)

    def test_tasklists(self):
        """Task list items open with their checkbox state."""
        events = parse_events("- [x] done\n- [ ] todo\n", extensions=["tasklists"])

        assert events[2] == TaskListMarker(True)
        assert events[3] == Text("done")
        assert TaskListMarker(False) in events

    def test_unknown_extension(self):
        """Unknown names fail before parsing."""
        with pytest.raises(UnknownExtensionError) as exc:
            parse_events("text", extensions=["footnotes", "mermaid"])

        assert isinstance(exc.value, ConfigError)
        assert "mermaid" in exc.value.message
        assert exc.value.exit_code == 31

    def test_parser_is_cached_per_extension_set(self):
        """The same extension set reuses one parser."""
        first = _build_parser(frozenset({"tables", "footnotes"}))
        second = _build_parser(frozenset({"footnotes", "tables"}))

        assert first is second


class TestHeadingHelpers:
    """Tests for heading predicates."""

    def test_is_heading_start(self):
        """Only Start events of the exact level match."""
        assert is_heading_start(Start(heading(1)))
        assert is_heading_start(Start(heading(2)), level=2)
        assert not is_heading_start(Start(heading(2)))
        assert not is_heading_start(End(heading(1)))
        assert not is_heading_start(Text("# no"))
