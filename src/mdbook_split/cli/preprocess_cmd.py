"""Preprocessor protocol commands."""

import typer

from mdbook_split.book import parse_input
from mdbook_split.preprocessor import SplitPreprocessor


def preprocess():
    """Read [context, book] from stdin and write the split book to stdout."""
    data = typer.get_binary_stream("stdin").read()
    ctx, book = parse_input(data)

    new_book = SplitPreprocessor().run(ctx, book)
    typer.echo(new_book.to_json())


def supports(
    renderer: str = typer.Argument(..., help="Renderer name, e.g. html"),
):
    """Check whether a renderer is supported.

    Exits with status 0 when supported, 1 otherwise. mdbook calls this
    before running the preprocessor.

    Example:

        mdbook-split supports html
    """
    if not SplitPreprocessor().supports_renderer(renderer):
        raise typer.Exit(1)
