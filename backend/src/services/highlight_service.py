"""
Highlight engine for note buffers.

Applies and removes highlight spans over ranges of a note buffer:
1. Parse the (sanitized) buffer into a flat list of runs - a piece of text or a
   line break, plus the highlight style covering it (or none)
2. Restyle the runs covered by the selection
3. Serialize back to stored markup, one span per group of runs that came from
   the same span

Every run remembers which span it belongs to, and a highlight gives the runs it
restyles a new span of their own. Spans therefore never nest and never overlap
no matter how often a region is highlighted again, and a new highlight never
fuses with an older one of the same color.

Offsets index the rendered text of the buffer: entities decoded and each <br>
counted as a single "\\n". For a buffer without markup this is the plain
string index.
"""
import logging
from dataclasses import dataclass, replace
from itertools import count, groupby

from bs4 import BeautifulSoup, NavigableString, Tag

from schemas.highlight import HighlightColor, HighlightSpan, HighlightStyle
from services.content_sanitizer import (
    apply_span_style,
    parse_fragment,
    sanitize,
    serialize,
    span_style,
)
from services.exceptions import (
    HighlightNotFoundError,
    InvalidHighlightColorError,
    InvalidSelectionError,
    NoActiveSelectionError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """A non-empty range of rendered-text offsets, start < end."""

    start: int
    end: int

    @property
    def length(self) -> int:
        """Number of selected characters."""
        return self.end - self.start


@dataclass
class _Run:
    """A piece of text or a single line break with its highlight style."""

    text: str
    style: HighlightStyle | None
    line_break: bool = False
    # Runs with the same span_id serialize into one span; None for plain text
    span_id: int | None = None


def _parse_runs(buffer: str) -> list[_Run]:
    """
    Parse buffer markup into runs. Sanitizing first flattens nested spans.

    Each span in the markup gets its own span_id, numbered in document order.
    """
    soup = parse_fragment(sanitize(buffer))
    runs: list[_Run] = []
    span_ids = count(1)
    for node in soup.children:
        if isinstance(node, Tag) and node.name == "span":
            style = span_style(node)
            span_id = next(span_ids)
            for child in node.children:
                runs.append(_to_run(child, style, span_id))
        else:
            runs.append(_to_run(node, None, None))
    return [run for run in runs if run.text]


def _to_run(
    node: Tag | NavigableString,
    style: HighlightStyle | None,
    span_id: int | None,
) -> _Run:
    if isinstance(node, Tag):
        # Only <br> survives sanitization besides spans
        return _Run(text="\n", style=style, line_break=True, span_id=span_id)
    return _Run(text=str(node), style=style, span_id=span_id)


def _span_key(run: _Run) -> tuple[HighlightStyle | None, int | None]:
    return run.style, run.span_id


def _serialize_runs(runs: list[_Run]) -> str:
    """Serialize runs to stored markup, one span per group of runs sharing a span_id."""
    soup = BeautifulSoup("", "html.parser")
    for (style, _), group in groupby(runs, key=_span_key):
        container: BeautifulSoup | Tag = soup
        if style is not None:
            container = soup.new_tag("span")
            apply_span_style(container, style)
            soup.append(container)
        for run in group:
            if run.line_break:
                container.append(soup.new_tag("br"))
            else:
                container.append(NavigableString(run.text))
    return serialize(soup)


def _split_at(runs: list[_Run], offset: int) -> int:
    """
    Make offset fall on a run boundary, splitting a text run if needed.

    Returns:
        Index of the first run that starts at or after offset.
    """
    position = 0
    for index, run in enumerate(runs):
        if position == offset:
            return index
        run_end = position + len(run.text)
        if offset < run_end:
            cut = offset - position
            runs[index : index + 1] = [
                replace(run, text=run.text[:cut]),
                replace(run, text=run.text[cut:]),
            ]
            return index + 1
        position = run_end
    return len(runs)


def _restyle(
    runs: list[_Run],
    start: int,
    end: int,
    style: HighlightStyle | None,
) -> list[_Run]:
    """
    Return runs with the [start, end) range set to style (None removes highlighting).

    A highlighted range becomes a new span, separate from any neighbouring span
    even when the colors match.
    """
    runs = [replace(run) for run in runs]
    new_span_id = None
    if style is not None:
        new_span_id = max((run.span_id or 0 for run in runs), default=0) + 1
    first = _split_at(runs, start)
    last = _split_at(runs, end)
    for run in runs[first:last]:
        run.style = style
        run.span_id = new_span_id
    return runs


def _span_ranges(runs: list[_Run]) -> list[tuple[int, int, HighlightStyle, str]]:
    """Return (start, end, style, text) for every highlight span the runs serialize to."""
    spans = []
    position = 0
    for (style, _), group in groupby(runs, key=_span_key):
        text = "".join(run.text for run in group)
        if style is not None:
            spans.append((position, position + len(text), style, text))
        position += len(text)
    return spans


class HighlightEngine:
    """
    Highlight state for one editing buffer.

    Holds the buffer, the current selection (if any), and the selected color.
    Highlight and remove operations require a non-empty selection and clear it
    once they succeed.
    """

    def __init__(
        self,
        buffer: str = "",
        color: HighlightColor | str = HighlightColor.YELLOW,
        custom_color: str | None = None,
    ) -> None:
        self._buffer = buffer
        self._selection: Selection | None = None
        self._style = self._resolve(color, custom_color)

    @property
    def buffer(self) -> str:
        """Current buffer markup."""
        return self._buffer

    @property
    def text(self) -> str:
        """Rendered text of the buffer; selection offsets index into this."""
        return "".join(run.text for run in _parse_runs(self._buffer))

    @property
    def selection(self) -> Selection | None:
        """The active selection, or None."""
        return self._selection

    @property
    def has_selection(self) -> bool:
        """Whether highlight operations are currently enabled."""
        return self._selection is not None

    @property
    def selected_text(self) -> str:
        """Text covered by the active selection ("" without one)."""
        if self._selection is None:
            return ""
        return self.text[self._selection.start : self._selection.end]

    @property
    def color(self) -> HighlightColor:
        """Currently selected color token."""
        return self._style.color

    @property
    def custom_color(self) -> str | None:
        """Custom color value when the selected token is custom."""
        return self._style.value

    def set_buffer(self, buffer: str) -> None:
        """Replace the buffer (the user typed); any selection is dropped."""
        self._buffer = buffer
        self._selection = None

    def select_color(self, color: HighlightColor | str, value: str | None = None) -> None:
        """
        Choose the color used by apply_highlight when none is given.

        Raises:
            InvalidHighlightColorError: If the token is unknown or a custom
                color has no valid value.
        """
        self._style = self._resolve(color, value)

    def capture_selection(self, start: int, end: int) -> Selection | None:
        """
        Record the active selection.

        A collapsed selection (start == end) clears selection state. A
        backwards selection is normalised.

        Returns:
            The recorded selection, or None if it was collapsed.

        Raises:
            InvalidSelectionError: If an offset is outside the rendered text.
        """
        start, end = sorted((start, end))
        length = len(self.text)
        if start < 0 or end > length:
            raise InvalidSelectionError(start, end, length)
        if start == end:
            self.clear_selection()
            return None
        self._selection = Selection(start=start, end=end)
        logger.debug("selection_captured", extra={"start": start, "end": end})
        return self._selection

    def clear_selection(self) -> None:
        """Forget the active selection."""
        self._selection = None

    def apply_highlight(
        self,
        color: HighlightColor | str | None = None,
        value: str | None = None,
    ) -> str:
        """
        Highlight exactly the selected text.

        Args:
            color: Palette token or CUSTOM. Defaults to the selected color.
            value: Concrete color, required when color is CUSTOM.

        Returns:
            The new buffer, ready to persist.

        Raises:
            NoActiveSelectionError: If there is no non-empty selection.
            InvalidHighlightColorError: If the color cannot be resolved.
        """
        if self._selection is None:
            raise NoActiveSelectionError()
        style = self._style if color is None else self._resolve(color, value)
        runs = _restyle(
            _parse_runs(self._buffer), self._selection.start, self._selection.end, style,
        )
        self._buffer = _serialize_runs(runs)
        logger.debug(
            "highlight_applied",
            extra={"color": style.color.value, "length": self._selection.length},
        )
        self._selection = None
        return self._buffer

    def remove_highlight(self) -> str:
        """
        Unwrap the highlight span containing the selection.

        The whole span returns to plain text, even when only part of it is
        selected.

        Returns:
            The new buffer, ready to persist.

        Raises:
            NoActiveSelectionError: If there is no non-empty selection.
            HighlightNotFoundError: If the selection is not inside a single
                highlight span. Buffer and selection are left unchanged.
        """
        if self._selection is None:
            raise NoActiveSelectionError()
        runs = _parse_runs(self._buffer)
        selection = self._selection
        target = next(
            (
                (start, end)
                for start, end, _, _ in _span_ranges(runs)
                if start <= selection.start and selection.end <= end
            ),
            None,
        )
        if target is None:
            raise HighlightNotFoundError()
        self._buffer = _serialize_runs(_restyle(runs, target[0], target[1], None))
        logger.debug("highlight_removed", extra={"start": target[0], "end": target[1]})
        self._selection = None
        return self._buffer

    def highlights(self) -> list[HighlightSpan]:
        """List the highlight spans of the buffer in document order."""
        return [
            HighlightSpan(
                color=style.color,
                color_value=style.value,
                text=text,
                start=start,
                end=end,
            )
            for start, end, style, text in _span_ranges(_parse_runs(self._buffer))
        ]

    @staticmethod
    def _resolve(color: HighlightColor | str, value: str | None) -> HighlightStyle:
        try:
            return HighlightStyle.resolve(color, value)
        except ValueError as e:
            raise InvalidHighlightColorError(str(e)) from e
