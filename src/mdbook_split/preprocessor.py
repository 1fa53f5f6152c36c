"""The split preprocessor: one chapter per top-level heading."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from mdbook_split.book import Book, BookItem, Chapter, PreprocessorContext
from mdbook_split.config.settings import Settings, get_settings
from mdbook_split.core.chapter import ChapterRecord, build_chapter
from mdbook_split.core.splitter import split
from mdbook_split.markdown.parser import parse_events

logger = logging.getLogger(__name__)

# mdBook release the book schema was written against
MDBOOK_VERSION = "0.4.21"


def _major_minor(version: str) -> tuple[str, ...]:
    return tuple(version.lstrip("v").split(".")[:2])


def check_mdbook_version(version: str) -> bool:
    """Warn when mdbook's version differs from the one we were built against.

    Only major and minor are compared. A mismatch is never fatal.

    Returns:
        True if the versions are compatible.
    """
    if _major_minor(version) == _major_minor(MDBOOK_VERSION):
        return True
    logger.warning(
        f"The split preprocessor was built against mdbook {MDBOOK_VERSION}, "
        f"but is being called from mdbook {version}"
    )
    return False


class SplitPreprocessor:
    """Split every chapter of a book at its top-level headings.

    Chapters are rewritten in place: each one is replaced by the chapters
    produced from its content, in order. Separators and part titles are
    copied through untouched.

    Nested chapters (``sub_items``) are not split and do not appear in the
    output.
    """

    name = "split"

    def __init__(self, settings: Settings | None = None):
        """Initialize the preprocessor.

        Args:
            settings: Settings to use (default: environment settings).
        """
        self.settings = settings or get_settings()

    def supports_renderer(self, renderer: str) -> bool:
        """Every renderer is supported."""
        return True

    def run(self, ctx: PreprocessorContext, book: Book) -> Book:
        """Rewrite a book.

        Args:
            ctx: Build context; only its ``[preprocessor.split]`` options
                are read.
            book: The book to rewrite.

        Returns:
            A new book with the split chapters.

        Raises:
            ConfigError: If the preprocessor options are invalid.
            SerializationError: If any chapter cannot be written back;
                nothing is returned in that case.
        """
        check_mdbook_version(ctx.mdbook_version)
        settings = self.settings.merged_with(ctx.preprocessor_options(self.name))

        sections = list(self.rewrite(book.sections, settings.extensions))
        logger.info(
            f"Split {len(book.sections)} book item(s) into {len(sections)} "
            f"for the {ctx.renderer} renderer"
        )
        return Book(sections=sections)

    def rewrite(
        self,
        items: Iterable[BookItem],
        extensions: Iterable[str] | None = None,
    ) -> Iterable[BookItem]:
        """Replace each chapter by its split chapters, keeping item order."""
        for item in items:
            if isinstance(item, Chapter):
                for record in self.split_chapter(item, extensions):
                    yield record.to_book_chapter()
            else:
                yield item

    def split_chapter(
        self,
        chapter: Chapter,
        extensions: Iterable[str] | None = None,
    ) -> list[ChapterRecord]:
        """Split one chapter's content into chapter records.

        Args:
            chapter: The chapter to split.
            extensions: Markdown extensions (default: from settings).

        Returns:
            Records in document order; empty for empty content.
        """
        if chapter.sub_items:
            logger.debug(f"Dropping {len(chapter.sub_items)} nested item(s) of {chapter.name!r}")

        names = self.settings.extensions if extensions is None else list(extensions)
        events = parse_events(chapter.content, names)
        records = [build_chapter(run) for run in split(events)]
        logger.debug(f"Chapter {chapter.name!r} split into {len(records)} chapter(s)")
        return records
