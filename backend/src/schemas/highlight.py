"""Pydantic schemas and value types for note highlighting."""
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

from schemas.validators import validate_color_value

# Class prefix used in stored markup, e.g. <span class="highlight-yellow">
HIGHLIGHT_CLASS_PREFIX = "highlight-"


class HighlightColor(StrEnum):
    """Color token of a highlight span."""

    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PINK = "pink"
    ORANGE = "orange"
    CUSTOM = "custom"


# Fixed palette: token -> display color. CUSTOM is intentionally absent.
PALETTE: dict[HighlightColor, str] = {
    HighlightColor.YELLOW: "#fef08a",
    HighlightColor.GREEN: "#bbf7d0",
    HighlightColor.BLUE: "#bfdbfe",
    HighlightColor.PINK: "#fbcfe8",
    HighlightColor.ORANGE: "#fed7aa",
}

HIGHLIGHT_CLASSES: dict[str, HighlightColor] = {
    f"{HIGHLIGHT_CLASS_PREFIX}{color.value}": color for color in PALETTE
}


@dataclass(frozen=True)
class HighlightStyle:
    """
    Resolved style of a highlight span.

    Palette colors carry no value; custom colors always carry one. Instances
    are hashable so adjacent runs with equal styles can be merged.
    """

    color: HighlightColor
    value: str | None = None

    @classmethod
    def resolve(cls, color: HighlightColor | str, value: str | None = None) -> "HighlightStyle":
        """
        Build a style from a color token and optional custom value.

        Raises:
            ValueError: If the token is unknown, a custom color has no valid
                value, or a palette color is given a value.
        """
        color = HighlightColor(color)
        if color is HighlightColor.CUSTOM:
            if value is None:
                raise ValueError("Custom highlight requires a color value")
            return cls(color=color, value=validate_color_value(value))
        if value is not None:
            raise ValueError(f"Palette color '{color}' does not take a custom value")
        return cls(color=color)

    @property
    def css_class(self) -> str | None:
        """Class name for palette colors, None for custom colors."""
        if self.color is HighlightColor.CUSTOM:
            return None
        return f"{HIGHLIGHT_CLASS_PREFIX}{self.color.value}"

    @property
    def css_style(self) -> str | None:
        """Inline style for custom colors, None for palette colors."""
        if self.value is None:
            return None
        return f"background-color: {self.value}"

    @property
    def display_color(self) -> str:
        """Concrete color shown for this highlight."""
        if self.value is not None:
            return self.value
        return PALETTE[self.color]


class HighlightSpan(BaseModel):
    """A highlighted range of a note, in rendered-text offsets."""

    color: HighlightColor
    color_value: str | None = None
    text: str
    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def check_range(self) -> "HighlightSpan":
        """Validate the span covers exactly its text."""
        if self.end - self.start != len(self.text):
            raise ValueError("Span range does not match its text length")
        if self.color is HighlightColor.CUSTOM and self.color_value is None:
            raise ValueError("Custom highlight span requires a color value")
        return self


def highlight_stylesheet() -> str:
    """Return CSS rules mapping palette classes to their display colors."""
    rules = [
        f".{HIGHLIGHT_CLASS_PREFIX}{color.value} {{ background-color: {hex_value}; }}"
        for color, hex_value in PALETTE.items()
    ]
    return "\n".join(rules)
