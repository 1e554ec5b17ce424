"""Tests for highlight schemas and styles."""
import pytest
from pydantic import ValidationError

from schemas.highlight import (
    HIGHLIGHT_CLASSES,
    PALETTE,
    HighlightColor,
    HighlightSpan,
    HighlightStyle,
    highlight_stylesheet,
)
from schemas.validators import validate_color_value


class TestHighlightStyle:
    """Resolving color tokens into span styles."""

    def test__resolve__palette_color(self) -> None:
        style = HighlightStyle.resolve("green")
        assert style.css_class == "highlight-green"
        assert style.css_style is None
        assert style.display_color == PALETTE[HighlightColor.GREEN]

    def test__resolve__custom_color(self) -> None:
        style = HighlightStyle.resolve(HighlightColor.CUSTOM, "rgb(255, 0, 0)")
        assert style.css_class is None
        assert style.css_style == "background-color: rgb(255, 0, 0)"
        assert style.display_color == "rgb(255, 0, 0)"

    @pytest.mark.parametrize(
        ("color", "value"),
        [("teal", None), ("custom", None), ("custom", "  "), ("yellow", "#fff")],
    )
    def test__resolve__rejects_invalid(self, color: str, value: str | None) -> None:
        with pytest.raises(ValueError):  # noqa: PT011
            HighlightStyle.resolve(color, value)

    def test__palette__custom_has_no_class(self) -> None:
        assert HighlightColor.CUSTOM not in PALETTE
        assert set(HIGHLIGHT_CLASSES.values()) == set(PALETTE)


class TestColorValues:
    """Custom color syntax accepted inside a style attribute."""

    @pytest.mark.parametrize(
        "value",
        [
            "#fff",
            "#ffcc00",
            "#ffcc0080",
            "rgb(1, 2, 3)",
            "rgba(1,2,3,0.5)",
            "hsl(120 50% 50%)",
            "gold",
        ],
    )
    def test__validate_color_value__accepts(self, value: str) -> None:
        assert validate_color_value(value) == value

    @pytest.mark.parametrize(
        "value",
        ["#ggg", "red;", "expression(alert(1))", "url(x)", "red blue", '"gold"', "#12345"],
    )
    def test__validate_color_value__rejects(self, value: str) -> None:
        with pytest.raises(ValueError, match="Invalid highlight color"):
            validate_color_value(value)


class TestHighlightSpan:
    """HighlightSpan model validation."""

    def test__highlight_span__range_must_match_text(self) -> None:
        with pytest.raises(ValidationError):
            HighlightSpan(color=HighlightColor.YELLOW, text="abc", start=0, end=2)

    def test__highlight_span__custom_requires_value(self) -> None:
        with pytest.raises(ValidationError):
            HighlightSpan(color=HighlightColor.CUSTOM, text="a", start=0, end=1)


def test__highlight_stylesheet__rule_per_palette_color() -> None:
    css = highlight_stylesheet()
    assert ".highlight-yellow { background-color: #fef08a; }" in css
    assert len(css.splitlines()) == len(PALETTE)
