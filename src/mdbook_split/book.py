"""mdBook preprocessor protocol: context and book models."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from mdbook_split.exceptions import InvalidInputError, ProtocolError

logger = logging.getLogger(__name__)


# --- Data Models ---


class Chapter(BaseModel):
    """A chapter of the book, with its markdown content."""

    name: str
    content: str
    number: list[int] | None = None  # section number, e.g. [1, 2]
    sub_items: list[BookItem] = []
    path: str | None = None  # output path relative to the source dir
    source_path: str | None = None
    parent_names: list[str] = []

    @field_validator("sub_items", mode="before")
    @classmethod
    def _parse_sub_items(cls, value: Any) -> Any:
        return _parse_items(value)

    @field_serializer("sub_items")
    def _dump_sub_items(self, items: list[BookItem]) -> list[Any]:
        return [_item_to_json(item) for item in items]


class Separator(BaseModel):
    """A separator line in the table of contents."""


class PartTitle(BaseModel):
    """A part heading grouping the chapters after it."""

    text: str


BookItem = Chapter | Separator | PartTitle


class Book(BaseModel):
    """The ordered collection of book items."""

    model_config = ConfigDict(populate_by_name=True)

    sections: list[BookItem] = []
    non_exhaustive: None = Field(default=None, alias="__non_exhaustive")

    @field_validator("sections", mode="before")
    @classmethod
    def _parse_sections(cls, value: Any) -> Any:
        return _parse_items(value)

    @field_serializer("sections")
    def _dump_sections(self, items: list[BookItem]) -> list[Any]:
        return [_item_to_json(item) for item in items]

    def to_json(self) -> str:
        """Serialize in the shape mdBook expects back on stdout."""
        return self.model_dump_json(by_alias=True)


class PreprocessorContext(BaseModel):
    """Build context passed to every preprocessor.

    Apart from the preprocessor's own options table, everything here is
    passed through untouched.
    """

    model_config = ConfigDict(extra="allow")

    root: str
    config: dict[str, Any] = {}
    renderer: str
    mdbook_version: str

    def preprocessor_options(self, name: str) -> dict[str, Any]:
        """Get the ``[preprocessor.<name>]`` table from book.toml."""
        preprocessors = self.config.get("preprocessor") or {}
        options = preprocessors.get(name) if isinstance(preprocessors, dict) else None
        return options if isinstance(options, dict) else {}


Chapter.model_rebuild()
Book.model_rebuild()


# --- JSON shape ---
#
# Book items are externally tagged: {"Chapter": {...}}, "Separator" or
# {"PartTitle": "..."}.


def _parse_items(value: Any) -> Any:
    if not isinstance(value, list):
        return value
    return [
        item if isinstance(item, (Chapter, Separator, PartTitle)) else _item_from_json(item)
        for item in value
    ]


def _item_from_json(value: Any) -> BookItem:
    if value == "Separator":
        return Separator()
    if isinstance(value, dict) and len(value) == 1:
        key, payload = next(iter(value.items()))
        if key == "Chapter":
            return Chapter.model_validate(payload)
        if key == "PartTitle" and isinstance(payload, str):
            return PartTitle(text=payload)
    raise ValueError(f"Unrecognised book item: {json.dumps(value)[:80]}")


def _item_to_json(item: BookItem) -> Any:
    if isinstance(item, Chapter):
        return {"Chapter": item.model_dump(mode="json")}
    if isinstance(item, PartTitle):
        return {"PartTitle": item.text}
    return "Separator"


# --- Protocol I/O ---


def parse_input(data: str | bytes) -> tuple[PreprocessorContext, Book]:
    """Parse the ``[context, book]`` pair mdBook writes to stdin.

    Args:
        data: Raw JSON text.

    Returns:
        Tuple of (context, book).

    Raises:
        InvalidInputError: If the data is not JSON.
        ProtocolError: If the JSON does not match the mdBook schema.
    """
    try:
        payload = json.loads(data)
    except ValueError as e:
        raise InvalidInputError("Preprocessor input is not valid JSON", details=str(e)) from e

    if not (isinstance(payload, list) and len(payload) == 2):
        raise ProtocolError(
            "Expected a [context, book] pair",
            details=f"Got {type(payload).__name__}"
            + (f" of length {len(payload)}" if isinstance(payload, list) else ""),
        )

    try:
        ctx = PreprocessorContext.model_validate(payload[0])
        book = Book.model_validate(payload[1])
    except ValidationError as e:
        raise ProtocolError(
            "Preprocessor input does not match the mdBook schema",
            details=str(e),
        ) from e

    logger.debug(
        f"Received {len(book.sections)} book item(s) for renderer {ctx.renderer!r} "
        f"from mdbook {ctx.mdbook_version}"
    )
    return ctx, book
