"""Output formatting for mdbook-split."""

from mdbook_split.output.formatter import OutputFormatter, get_formatter

__all__ = ["OutputFormatter", "get_formatter"]
