"""Turning event runs into chapter records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import pairwise

from mdbook_split.book import Chapter
from mdbook_split.core.splitter import EventRun, is_boundary
from mdbook_split.markdown.events import Text
from mdbook_split.markdown.writer import to_markdown
from mdbook_split.utils.hashing import string_hash

logger = logging.getLogger(__name__)


@dataclass
class ChapterRecord:
    """One chapter produced by splitting a document."""

    title: str  # may be empty
    content: str  # markdown
    path: str  # hash of the title

    def to_book_chapter(self) -> Chapter:
        """Build the host chapter for this record.

        Only name, content and path are set. Every other field keeps its
        default: no number, no sub items, no source path, no parent names.
        """
        return Chapter(name=self.title, content=self.content, path=self.path)


def extract_title(run: EventRun) -> str:
    """Get the text right after the first level-1 heading start.

    Returns "" when the run has no level-1 heading or the heading does not
    begin with plain text (for example a code span or emphasis).
    """
    for event, following in pairwise(run):
        if is_boundary(event):
            return following.text if isinstance(following, Text) else ""
    return ""


def chapter_path(title: str) -> str:
    """Derive the chapter path from its title.

    Depends on the title alone, so equal titles give equal paths.
    """
    return string_hash(title)


def build_chapter(run: EventRun) -> ChapterRecord:
    """Build a chapter record from one run of events.

    Args:
        run: Events of a single chapter.

    Returns:
        The chapter's title, markdown content and path.

    Raises:
        SerializationError: If the events cannot be written as markdown.
    """
    title = extract_title(run)
    content = to_markdown(run)
    path = chapter_path(title)
    logger.debug(f"Built chapter {title!r} ({len(content)} chars) at {path[:12]}")
    return ChapterRecord(title=title, content=content, path=path)
