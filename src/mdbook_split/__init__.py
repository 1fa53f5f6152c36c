"""mdbook-split: one mdBook chapter per top-level heading.

This module provides a Python API for:
- Parsing markdown into a flat event stream
- Splitting the stream at top-level headings
- Building chapters with hash-derived paths
- Rewriting an mdBook book as a preprocessor

Simple API:
    >>> from mdbook_split import SplitPreprocessor, Chapter
    >>>
    >>> records = SplitPreprocessor().split_chapter(
    ...     Chapter(name="notes", content="# One\\n\\n# Two\\n")
    ... )
    >>> [record.title for record in records]
    ['One', 'Two']

Lower level:
    >>> from mdbook_split import parse_events, split, build_chapter
    >>>
    >>> runs = split(parse_events("Intro\\n\\n# Chapter 1\\n"))
    >>> build_chapter(runs[1]).title
    'Chapter 1'
"""

__version__ = "0.1.0"

# Host document tree
from mdbook_split.book import (
    Book,
    BookItem,
    Chapter,
    PartTitle,
    PreprocessorContext,
    Separator,
    parse_input,
)

# Configuration
from mdbook_split.config.settings import Settings, get_settings

# Splitting
from mdbook_split.core.chapter import ChapterRecord, build_chapter, chapter_path, extract_title
from mdbook_split.core.splitter import split

# Exceptions
from mdbook_split.exceptions import (
    ConfigError,
    InvalidInputError,
    MdbookSplitError,
    ProtocolError,
    SerializationError,
    UnknownExtensionError,
)

# Markdown events
from mdbook_split.markdown import Event, parse_events, to_markdown

# Preprocessor
from mdbook_split.preprocessor import SplitPreprocessor

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "MdbookSplitError",
    "ProtocolError",
    "InvalidInputError",
    "SerializationError",
    "ConfigError",
    "UnknownExtensionError",
    # Book
    "Book",
    "BookItem",
    "Chapter",
    "Separator",
    "PartTitle",
    "PreprocessorContext",
    "parse_input",
    # Markdown
    "Event",
    "parse_events",
    "to_markdown",
    # Splitting
    "split",
    "ChapterRecord",
    "build_chapter",
    "chapter_path",
    "extract_title",
    # Preprocessor
    "SplitPreprocessor",
    # Configuration
    "Settings",
    "get_settings",
]
