"""Pytest fixtures for mdbook-split tests."""

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mdbook_split.config.settings import get_settings


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Keep MDBOOK_SPLIT_* variables and the settings cache out of tests."""
    monkeypatch.delenv("MDBOOK_SPLIT_EXTENSIONS", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_chapter(name: str, content: str, **fields) -> dict:
    """Build a chapter book item as mdbook serializes it."""
    chapter = {
        "name": name,
        "content": content,
        "number": None,
        "sub_items": [],
        "path": f"{name.lower().replace(' ', '_')}.md",
        "source_path": f"{name.lower().replace(' ', '_')}.md",
        "parent_names": [],
    }
    chapter.update(fields)
    return {"Chapter": chapter}


@pytest.fixture
def sample_context() -> dict:
    """Preprocessor context as mdbook 0.4.21 sends it."""
    return {
        "root": "/home/user/book",
        "config": {
            "book": {"authors": ["Jane"], "language": "en", "src": "src", "title": "Sample"},
            "preprocessor": {"split": {"command": "mdbook-split"}},
        },
        "renderer": "html",
        "mdbook_version": "0.4.21",
    }


@pytest.fixture
def sample_book() -> dict:
    """A book with two chapters around a separator and a part title."""
    return {
        "sections": [
            make_chapter("Intro", "Welcome.\n\n# Chapter 1\n\nFirst.\n\n# Chapter 2\n\nSecond.\n", number=[1]),
            "Separator",
            {"PartTitle": "Reference"},
            make_chapter("Appendix", "# Appendix\n\nLast words.\n", number=[2]),
        ],
        "__non_exhaustive": None,
    }


@pytest.fixture
def sample_input(sample_context, sample_book) -> str:
    """The [context, book] JSON pair mdbook writes to stdin."""
    return json.dumps([sample_context, sample_book])


@pytest.fixture
def markdown_file(tmp_path) -> Path:
    """A markdown file with leading content and two top-level headings."""
    path = tmp_path / "notes.md"
    path.write_text("Some intro.\n\n# First\n\nBody one.\n\n# Second\n\nBody two.\n", encoding="utf-8")
    return path


@pytest.fixture
def chapter_item():
    """Factory for chapter book items."""
    return make_chapter


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo the handler and level the CLI installs on the package logger."""
    logger = logging.getLogger("mdbook_split")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
