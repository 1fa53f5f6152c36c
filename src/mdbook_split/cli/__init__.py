"""Command-line interface for mdbook-split."""
