"""Chapters command for previewing how a file is split."""

from pathlib import Path

import typer

from mdbook_split.cli.utils import is_silent
from mdbook_split.output import get_formatter


def chapters(
    md_path: Path = typer.Argument(..., help="Path to a markdown file"),
    extensions: list[str] | None = typer.Option(
        None,
        "--extension",
        "-e",
        help="Markdown extension to enable (repeatable; default from settings)",
    ),
    use_json: bool = typer.Option(
        False,
        "--json",
        help="Force JSON output",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Force pretty output",
    ),
):
    """Show the chapters a markdown file would be split into.

    Runs the same splitting mdbook does, without a book.

    Examples:

        mdbook-split chapters src/chapter_1.md

        mdbook-split chapters notes.md -e footnotes -e tables --json
    """
    from mdbook_split.book import Chapter
    from mdbook_split.preprocessor import SplitPreprocessor

    content = md_path.read_text(encoding="utf-8")
    preprocessor = SplitPreprocessor()
    names = extensions or preprocessor.settings.extensions
    records = preprocessor.split_chapter(Chapter(name=md_path.stem, content=content), names)

    formatter = get_formatter(json_flag=use_json, pretty_flag=pretty, quiet=is_silent())
    formatter.output(
        {
            "success": True,
            "file": str(md_path),
            "extensions": list(names),
            "count": len(records),
            "chapters": [
                {"id": i, "title": r.title, "path": r.path, "content": r.content}
                for i, r in enumerate(records, 1)
            ],
        }
    )
