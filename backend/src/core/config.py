"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Simulated round trips - the stores are in memory but callers treat them as remote
    note_store_latency_seconds: float = Field(
        default=0.3, validation_alias="NOTE_STORE_LATENCY_SECONDS",
    )
    note_store_failure_rate: float = Field(
        default=0.0, validation_alias="NOTE_STORE_FAILURE_RATE",
    )
    catalog_latency_seconds: float = Field(
        default=0.2, validation_alias="CATALOG_LATENCY_SECONDS",
    )

    # Field length limits
    max_content_length: int = Field(
        default=100_000, validation_alias="MAX_NOTE_CONTENT_LENGTH",
    )

    # Editor keyboard surface
    highlight_shortcut: str = Field(
        default="ctrl+shift+h", validation_alias="HIGHLIGHT_SHORTCUT",
    )
    remove_highlight_shortcut: str = Field(
        default="ctrl+shift+x", validation_alias="REMOVE_HIGHLIGHT_SHORTCUT",
    )
    default_highlight_color: str = Field(
        default="yellow", validation_alias="DEFAULT_HIGHLIGHT_COLOR",
    )

    notification_history_size: int = Field(
        default=20, validation_alias="NOTIFICATION_HISTORY_SIZE",
    )

    # Simulated signed-in user (there is no authentication)
    current_user_id: str = Field(default="user1", validation_alias="CURRENT_USER_ID")
    current_user_name: str = Field(default="John Doe", validation_alias="CURRENT_USER_NAME")
    current_user_email: str = Field(
        default="john.doe@example.com", validation_alias="CURRENT_USER_EMAIL",
    )

    @field_validator("note_store_latency_seconds", "catalog_latency_seconds")
    @classmethod
    def check_latency_non_negative(cls, v: float) -> float:
        """Validate simulated latency is not negative."""
        if v < 0:
            raise ValueError("Latency cannot be negative")
        return v

    @field_validator("note_store_failure_rate")
    @classmethod
    def check_failure_rate(cls, v: float) -> float:
        """Validate failure rate is a probability."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("Failure rate must be between 0 and 1")
        return v

    @field_validator("notification_history_size")
    @classmethod
    def check_history_size(cls, v: int) -> int:
        """Validate at least one notification is retained."""
        if v < 1:
            raise ValueError("Notification history size must be at least 1")
        return v

    @field_validator("default_highlight_color")
    @classmethod
    def check_default_color(cls, v: str) -> str:
        """Validate the default color is a palette token (custom needs a value)."""
        from schemas.highlight import PALETTE, HighlightColor

        try:
            color = HighlightColor(v.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown highlight color: '{v}'") from None
        if color not in PALETTE:
            raise ValueError("Default highlight color must be a palette color")
        return color.value

    @model_validator(mode="after")
    def validate_shortcuts(self) -> "Settings":
        """
        Both shortcuts must parse as key chords and must not collide.

        A collision would make one of the two editor operations unreachable
        from the keyboard.
        """
        from services.shortcuts import KeyChord

        highlight = KeyChord.parse(self.highlight_shortcut)
        remove = KeyChord.parse(self.remove_highlight_shortcut)
        if highlight == remove:
            raise ValueError(
                f"Highlight and remove-highlight shortcuts must differ "
                f"(both are '{highlight}').",
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
