"""Shared state and error handling for CLI commands.

stdout belongs to mdbook (it reads the rewritten book from it), so every
message, log record and error goes to stderr.
"""

import functools
import io
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from mdbook_split.exceptions import MdbookSplitError

F = TypeVar("F", bound=Callable[..., Any])

# Global flags set by the app callback
_context: dict[str, Any] = {"verbose": False, "quiet": 0}


def set_context(verbose: bool = False, quiet: int = 0) -> None:
    """Record the global flags (quiet: 0 normal, 1 -q, 2 --silent)."""
    _context["verbose"] = verbose
    _context["quiet"] = quiet


def get_context_value(key: str, default: Any = None) -> Any:
    return _context.get(key, default)


def is_quiet() -> bool:
    return bool(get_context_value("quiet", 0) >= 1)


def is_silent() -> bool:
    """True with --silent: nothing but the exit code."""
    return bool(get_context_value("quiet", 0) >= 2)


def is_verbose() -> bool:
    return bool(get_context_value("verbose", False))


def get_console() -> Console:
    """Get the stderr console, or a discarding one when silent."""
    if is_silent():
        return Console(file=io.StringIO(), stderr=True)
    return Console(stderr=True)


def setup_logging() -> None:
    """Route package logs to stderr through rich.

    Level follows the flags: DEBUG with -v, ERROR with -q, CRITICAL with
    --silent and WARNING otherwise.
    """
    if is_verbose():
        level = logging.DEBUG
    elif is_silent():
        level = logging.CRITICAL
    elif is_quiet():
        level = logging.ERROR
    else:
        level = logging.WARNING

    package_logger = logging.getLogger("mdbook_split")
    for old in [h for h in package_logger.handlers if isinstance(h, RichHandler)]:
        package_logger.removeHandler(old)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=is_verbose(),
        markup=False,
    )
    handler.setLevel(level)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def _report(console: Console, title: str, lines: list[str | None]) -> None:
    if is_verbose():
        console.print_exception()
        return
    console.print(title)
    for line in lines:
        if line:
            console.print(f"[dim]{escape(line)}[/dim]")


def handle_errors(func: F) -> F:
    """Turn exceptions raised by a command into messages and exit codes.

    mdbook-split errors exit with their own code, a missing file with 1,
    Ctrl-C with 130 and anything unexpected with 1. With --verbose the
    traceback is shown instead of the message.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        console = get_console()

        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except MdbookSplitError as e:
            hint = f"Hint: {e.hint}" if e.hint else None
            _report(console, f"[red]Error:[/red] {escape(e.message)}", [e.details, hint])
            raise typer.Exit(e.exit_code) from e
        except FileNotFoundError as e:
            filename = str(e.filename or e)
            _report(console, f"[red]File not found:[/red] {escape(filename)}", [])
            raise typer.Exit(1) from e
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted[/yellow]")
            raise typer.Exit(130)
        except Exception as e:
            _report(console, f"[red]Unexpected error:[/red] {type(e).__name__}: {escape(str(e))}", [])
            raise typer.Exit(1) from e

    return wrapper  # type: ignore[return-value]
