"""Tests for application configuration."""
import pytest
from pydantic import ValidationError

from core.config import Settings


class TestDefaults:
    """Default values without any environment."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults match the simulated backend and the documented chords."""
        for name in ("NOTE_STORE_LATENCY_SECONDS", "CATALOG_LATENCY_SECONDS"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.note_store_latency_seconds == 0.3
        assert settings.catalog_latency_seconds == 0.2
        assert settings.highlight_shortcut == "ctrl+shift+h"
        assert settings.remove_highlight_shortcut == "ctrl+shift+x"
        assert settings.default_highlight_color == "yellow"
        assert settings.current_user_id == "user1"


class TestEnvironmentAliases:
    """Tests for environment variable names."""

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings are read from their environment variables."""
        monkeypatch.setenv("NOTE_STORE_FAILURE_RATE", "0.25")
        monkeypatch.setenv("MAX_NOTE_CONTENT_LENGTH", "500")
        monkeypatch.setenv("DEFAULT_HIGHLIGHT_COLOR", "  Green ")
        settings = Settings(_env_file=None)
        assert settings.note_store_failure_rate == 0.25
        assert settings.max_content_length == 500
        assert settings.default_highlight_color == "green"


class TestValidation:
    """Tests for rejected configuration."""

    def test_negative_latency_rejected(self) -> None:
        """Latency cannot be negative."""
        with pytest.raises(ValidationError, match="Latency cannot be negative"):
            Settings(_env_file=None, NOTE_STORE_LATENCY_SECONDS=-1)

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_failure_rate_out_of_range_rejected(self, rate: float) -> None:
        """Failure rate must be a probability."""
        with pytest.raises(ValidationError, match="between 0 and 1"):
            Settings(_env_file=None, NOTE_STORE_FAILURE_RATE=rate)

    def test_history_size_rejected(self) -> None:
        """At least one notification is retained."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, NOTIFICATION_HISTORY_SIZE=0)

    @pytest.mark.parametrize("color", ["custom", "purple"])
    def test_default_color_must_be_palette(self, color: str) -> None:
        """The default color needs no custom value."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, DEFAULT_HIGHLIGHT_COLOR=color)

    def test_colliding_shortcuts_rejected(self) -> None:
        """Both editor operations must stay reachable from the keyboard."""
        with pytest.raises(ValidationError, match="must differ"):
            Settings(
                _env_file=None,
                HIGHLIGHT_SHORTCUT="ctrl+shift+h",
                REMOVE_HIGHLIGHT_SHORTCUT="Control+Shift+H",
            )

    def test_invalid_shortcut_rejected(self) -> None:
        """Shortcuts must parse as key chords."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, HIGHLIGHT_SHORTCUT="h")
