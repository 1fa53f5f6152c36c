"""Chapter listings for the terminal or for scripts."""

import io
import json
import sys
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Characters of content shown per chapter in the pretty listing
PREVIEW_CHARS = 40


@dataclass
class OutputFormatter:
    """Write command results as JSON or as rich tables.

    Without ``--json`` or ``--pretty`` the choice follows stdout: a terminal
    gets tables, a pipe gets JSON.
    """

    force_json: bool = False
    force_pretty: bool = False
    quiet: bool = False
    _console: Console | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self._console is None:
            self._console = Console(file=io.StringIO()) if self.quiet else Console()

    @property
    def console(self) -> Console:
        assert self._console is not None
        return self._console

    @property
    def use_json(self) -> bool:
        if self.force_json or self.force_pretty:
            return self.force_json
        return not sys.stdout.isatty()

    def output(self, data: dict[str, Any]) -> None:
        """Write a result dictionary.

        Args:
            data: Result with a ``chapters`` list, or any JSON-able mapping.
        """
        if self.quiet:
            return
        if self.use_json:
            print(json.dumps(data, indent=2, ensure_ascii=False))
        elif "chapters" in data:
            self._print_chapters(data)
        else:
            self.console.print_json(data=data)

    def _print_chapters(self, data: dict[str, Any]) -> None:
        chapters = data["chapters"]
        extensions = ", ".join(data.get("extensions") or []) or "none"

        self.console.print(f"\n[bold]{escape(data.get('file', ''))}[/bold]")
        self.console.print(f"[dim]Extensions: {extensions}[/dim]\n")
        self.console.print(f"[bold]Chapters ({len(chapters)}):[/bold]")

        table = Table(show_header=True, header_style="bold")
        table.add_column("#", style="cyan", justify="right", width=3)
        table.add_column("Title")
        table.add_column("Path", style="dim", width=14)
        table.add_column("Chars", justify="right", width=7)
        table.add_column("Starts with", style="dim", overflow="ellipsis", no_wrap=True)

        for chapter in chapters:
            content = chapter.get("content", "")
            table.add_row(
                str(chapter.get("id", "")),
                escape(chapter.get("title", "")) or "[dim](untitled)[/dim]",
                chapter.get("path", "")[:12],
                f"{len(content):,}",
                escape(_preview(content)),
            )

        self.console.print(table)


def _preview(content: str) -> str:
    first = next((line for line in content.splitlines() if line.strip()), "")
    return first if len(first) <= PREVIEW_CHARS else first[: PREVIEW_CHARS - 1] + "…"


def get_formatter(
    json_flag: bool = False,
    pretty_flag: bool = False,
    quiet: bool = False,
) -> OutputFormatter:
    """Get an output formatter with the specified flags.

    Args:
        json_flag: Force JSON output.
        pretty_flag: Force pretty output.
        quiet: Suppress all output.
    """
    return OutputFormatter(force_json=json_flag, force_pretty=pretty_flag, quiet=quiet)
