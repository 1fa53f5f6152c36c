"""Tests for settings and the exception hierarchy."""

import pytest

from mdbook_split.config.settings import DEFAULT_EXTENSIONS, Settings, get_settings
from mdbook_split.exceptions import (
    ConfigError,
    InvalidInputError,
    MdbookSplitError,
    ProtocolError,
    SerializationError,
    UnknownExtensionError,
)


class TestSettings:
    """Tests for loading settings."""

    def test_defaults(self):
        """Footnotes, smart punctuation and tables are on by default."""
        assert Settings().extensions == DEFAULT_EXTENSIONS

    def test_defaults_are_not_shared(self):
        """Each instance gets its own list."""
        first = Settings()
        first.extensions.append("tasklists")

        assert Settings().extensions == DEFAULT_EXTENSIONS

    def test_environment(self, monkeypatch):
        """MDBOOK_SPLIT_EXTENSIONS takes a JSON list."""
        monkeypatch.setenv("MDBOOK_SPLIT_EXTENSIONS", '["tables", "strikethrough"]')

        assert Settings().extensions == ["tables", "strikethrough"]

    def test_comma_separated_string(self):
        """Comma separated names are split."""
        assert Settings(extensions="footnotes, tables").extensions == ["footnotes", "tables"]

    def test_get_settings_is_cached(self):
        """The same instance is returned until the cache is cleared."""
        assert get_settings() is get_settings()


class TestMergedWith:
    """Tests for book.toml overrides."""

    def test_overrides_extensions(self):
        """The preprocessor table wins."""
        merged = Settings().merged_with({"extensions": ["tasklists"]})

        assert merged.extensions == ["tasklists"]

    def test_table_beats_environment(self, monkeypatch):
        """book.toml has the highest priority."""
        monkeypatch.setenv("MDBOOK_SPLIT_EXTENSIONS", '["tables"]')

        merged = Settings().merged_with({"extensions": "footnotes"})

        assert merged.extensions == ["footnotes"]

    def test_ignores_mdbook_keys(self):
        """Keys mdbook uses itself are not settings."""
        settings = Settings()

        merged = settings.merged_with({"command": "mdbook-split", "renderers": ["html"], "before": []})

        assert merged is settings

    @pytest.mark.parametrize("options", [None, {}])
    def test_empty_options(self, options):
        """No table means no change."""
        settings = Settings()

        assert settings.merged_with(options) is settings

    def test_original_is_unchanged(self):
        """Merging returns a new instance."""
        settings = Settings()

        settings.merged_with({"extensions": []})

        assert settings.extensions == DEFAULT_EXTENSIONS

    def test_invalid_value(self):
        """Wrong types raise a configuration error."""
        with pytest.raises(ConfigError) as exc:
            Settings().merged_with({"extensions": {"footnotes": True}})

        assert exc.value.exit_code == 30
        assert "preprocessor.split" in exc.value.message


class TestExceptions:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "error_cls, code",
        [
            (MdbookSplitError, 1),
            (ProtocolError, 10),
            (InvalidInputError, 11),
            (SerializationError, 20),
            (ConfigError, 30),
            (UnknownExtensionError, 31),
        ],
    )
    def test_exit_codes(self, error_cls, code):
        """Each error maps to its own exit code."""
        assert error_cls("boom").exit_code == code

    def test_message_details_and_hint(self):
        """Errors carry a message, details and a hint."""
        error = SerializationError("bad", details="more", hint="try this")

        assert str(error) == "bad"
        assert error.details == "more"
        assert error.hint == "try this"

    def test_default_hint(self):
        """Some errors come with a default hint."""
        assert "stdin" in InvalidInputError("bad").hint
        assert SerializationError("bad").hint is None

    def test_hierarchy(self):
        """Errors group by concern."""
        assert issubclass(InvalidInputError, ProtocolError)
        assert issubclass(UnknownExtensionError, ConfigError)
        assert issubclass(SerializationError, MdbookSplitError)
