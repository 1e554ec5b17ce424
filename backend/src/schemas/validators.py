"""
Shared validation functions for Pydantic schemas.

This module contains validators used across note and highlight schemas.
"""
import re

from core.config import get_settings

# Custom highlight colors end up inside a style attribute, so only plain color
# syntax is accepted: no quotes, semicolons, colons or url(...) payloads.
HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
FUNCTIONAL_COLOR_PATTERN = re.compile(
    r"^(?:rgba?|hsla?)\(\s*[\d.%\s,/+-]+(?:deg)?[\d.%\s,/+-]*\)$",
)
NAMED_COLOR_PATTERN = re.compile(r"^[a-zA-Z]{3,30}$")


def normalize_preview(value: str | None) -> str | None:
    """Collapse newlines, tabs, and runs of whitespace in a content preview."""
    if value is None:
        return None
    return re.sub(r"\s+", " ", value).strip()


def is_valid_color_value(value: str) -> bool:
    """Return True if value is a CSS color safe to embed in a style attribute."""
    return bool(
        HEX_COLOR_PATTERN.match(value)
        or FUNCTIONAL_COLOR_PATTERN.match(value)
        or NAMED_COLOR_PATTERN.match(value),
    )


def validate_color_value(value: str) -> str:
    """
    Validate a custom highlight color value.

    Args:
        value: A CSS color such as '#ffcc00', 'rgb(255, 204, 0)' or 'gold'.

    Returns:
        The trimmed color value.

    Raises:
        ValueError: If the value is empty or not a recognised color syntax.
    """
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Custom highlight color cannot be empty")
    if not is_valid_color_value(trimmed):
        raise ValueError(
            f"Invalid highlight color: '{trimmed}'. "
            "Use a hex color (e.g., '#ffcc00'), rgb()/hsl() notation, or a color name.",
        )
    return trimmed


def validate_content_length(content: str | None) -> str | None:
    """Validate that content doesn't exceed maximum length."""
    settings = get_settings()
    if content is not None and len(content) > settings.max_content_length:
        raise ValueError(
            f"Content exceeds maximum length of {settings.max_content_length:,} characters "
            f"(got {len(content):,} characters).",
        )
    return content


def validate_content_not_blank(content: str) -> str:
    """Validate that note content has something other than whitespace."""
    if not content or not content.strip():
        raise ValueError("Note content cannot be empty")
    return content
