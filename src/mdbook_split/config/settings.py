"""Pydantic settings for mdbook-split configuration."""

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mdbook_split.exceptions import ConfigError

# Extensions the parser always had before they became configurable
DEFAULT_EXTENSIONS = ["footnotes", "smart_punctuation", "tables"]


class Settings(BaseSettings):
    """Main settings model for mdbook-split."""

    model_config = SettingsConfigDict(
        env_prefix="MDBOOK_SPLIT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))

    @field_validator("extensions", mode="before")
    @classmethod
    def _split_comma_list(cls, value: Any) -> Any:
        # book.toml may give "footnotes,tables"; env vars must be JSON lists
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    def merged_with(self, options: Mapping[str, Any] | None) -> "Settings":
        """Return settings overridden by a ``[preprocessor.split]`` table.

        Args:
            options: The preprocessor table from the book configuration.
                Keys mdBook itself uses (``command``, ``renderers``, ...)
                are ignored.

        Returns:
            A new Settings instance.

        Raises:
            ConfigError: If the table holds values of the wrong type.
        """
        if not options:
            return self

        overrides = {key: value for key, value in options.items() if key in type(self).model_fields}
        if not overrides:
            return self

        try:
            return type(self).model_validate({**self.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigError(
                "Invalid [preprocessor.split] configuration",
                details=str(e),
            ) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from (in order of priority, highest first):
    1. Environment variables (MDBOOK_SPLIT_* prefix)
    2. Default values

    The ``[preprocessor.split]`` table of book.toml is applied on top of
    these per run, see :meth:`Settings.merged_with`.
    """
    return Settings()
