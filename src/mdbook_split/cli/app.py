"""Main Typer application for the mdbook-split CLI."""

import typer
from rich.console import Console

from mdbook_split import __version__
from mdbook_split.cli.utils import handle_errors, set_context, setup_logging

# Default console for output
console = Console(stderr=True)

app = typer.Typer(
    name="mdbook-split",
    help="""mdBook preprocessor that splits chapters at every top-level heading.

    Run without a command, mdbook-split reads the [context, book] JSON pair
    from stdin and writes the rewritten book to stdout.

    [bold]Commands:[/bold]
    supports    Tell mdbook whether a renderer is supported
    chapters    Show how a markdown file would be split
    """,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"mdbook-split version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logs and full tracebacks.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress warnings; still shows errors.",
    ),
    silent: bool = typer.Option(
        False,
        "--silent",
        help="Completely silent (exit code only).",
    ),
):
    """mdbook-split: one chapter per top-level heading."""
    quiet_level = 2 if silent else 1 if quiet else 0
    set_context(verbose=verbose, quiet=quiet_level)
    setup_logging()

    # mdbook runs the preprocessor with no arguments
    if ctx.invoked_subcommand is None:
        from mdbook_split.cli.preprocess_cmd import preprocess

        handle_errors(preprocess)()


def _setup_commands():
    """Set up all commands after imports are resolved."""
    from mdbook_split.cli import chapters_cmd, preprocess_cmd

    app.command("supports")(handle_errors(preprocess_cmd.supports))
    app.command("chapters")(handle_errors(chapters_cmd.chapters))


_setup_commands()


if __name__ == "__main__":
    app()
