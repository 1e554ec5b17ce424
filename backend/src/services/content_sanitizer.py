"""
Content sanitizer for note rich text.

Restricts note content to the stored markup subset:
1. Text (entities decoded on parse; `&`, `<`, `>` and non-breaking spaces
   escaped on output, quotes written as literal characters)
2. `<br>` line breaks
3. Highlight spans - `<span class="highlight-{color}">` for palette colors or
   `<span style="background-color: {value}">` for custom colors

Script-like elements are removed together with their content. Every other
element is unwrapped so its text survives. The sanitizer never raises: if the
markup cannot be parsed it degrades to escaped plain text.

Two input modes are supported. HTML is rich markup where `<br>` is kept.
EDITABLE is the markup a contentEditable surface produces, where `<div>`/`<p>`
blocks and `<br>` become newlines and non-breaking spaces become spaces.

Pure function with no I/O. Uses BeautifulSoup for parsing.
"""
import html
import logging
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.element import PreformattedString
from bs4.formatter import HTMLFormatter

from schemas.highlight import HIGHLIGHT_CLASSES, HighlightColor, HighlightStyle
from schemas.note import ContentFormat
from schemas.validators import is_valid_color_value

logger = logging.getLogger(__name__)

# Removed with everything inside them
REMOVED_ELEMENTS = frozenset(
    {"script", "object", "embed", "iframe", "style", "noscript", "template", "applet"},
)
# contentEditable wraps each new line in one of these
BLOCK_ELEMENTS = frozenset({"div", "p"})

BACKGROUND_COLOR_PATTERN = re.compile(
    r"(?:^|;)\s*background-color\s*:\s*([^;]+?)\s*(?:;|$)",
    re.IGNORECASE,
)

# Used only by the plain-text fallback when parsing fails
_REMOVED_BLOCK_PATTERN = re.compile(
    r"<(" + "|".join(sorted(REMOVED_ELEMENTS)) + r")\b.*?(?:</\1\s*>|$)",
    re.IGNORECASE | re.DOTALL,
)
_TAG_PATTERN = re.compile(r"<[^>]*>?")

def substitute_entities(text: str) -> str:
    """Escape `&`, `<` and `>`, and write non-breaking spaces back as `&nbsp;`."""
    return EntitySubstitution.substitute_xml(text).replace("\xa0", "&nbsp;")


# Minimal escaping and HTML5 void elements (<br>, not <br/>), so clean content
# serializes back to exactly the same string.
FORMATTER = HTMLFormatter(
    entity_substitution=substitute_entities,
    void_element_close_prefix=None,
)


@dataclass
class SanitizeResult:
    """
    Outcome of sanitizing one piece of content.

    `degraded` is True when anything beyond formatting was dropped; saving
    still proceeds with `content`.
    """

    content: str
    removed_elements: list[str] = field(default_factory=list)
    unwrapped_elements: list[str] = field(default_factory=list)
    parse_failed: bool = False

    @property
    def degraded(self) -> bool:
        """Whether disallowed content or markup was dropped."""
        return bool(self.removed_elements or self.unwrapped_elements or self.parse_failed)


def parse_fragment(content: str) -> BeautifulSoup:
    """Parse an HTML fragment without adding <html>/<body> wrappers."""
    return BeautifulSoup(content, "html.parser")


def serialize(soup: BeautifulSoup | Tag) -> str:
    """Serialize a parsed fragment with the stored-markup formatter."""
    return soup.decode(formatter=FORMATTER)


def span_style(tag: Tag) -> HighlightStyle | None:
    """
    Return the highlight style a span carries, or None if it is not a highlight.

    A palette class wins over an inline style. A custom highlight needs a
    background-color declaration whose value passes color validation.
    """
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    for css_class in classes:
        if css_class in HIGHLIGHT_CLASSES:
            return HighlightStyle(color=HIGHLIGHT_CLASSES[css_class])

    style = tag.get("style")
    if not style:
        return None
    match = BACKGROUND_COLOR_PATTERN.search(style)
    if match is None:
        return None
    value = match.group(1).strip()
    if not is_valid_color_value(value):
        return None
    return HighlightStyle(color=HighlightColor.CUSTOM, value=value)


def apply_span_style(tag: Tag, style: HighlightStyle) -> None:
    """Replace a span's attributes with the canonical ones for its style."""
    if style.css_class is not None:
        tag.attrs = {"class": style.css_class}
    else:
        tag.attrs = {"style": style.css_style}


def sanitize(raw_html: str | None, mode: ContentFormat = ContentFormat.HTML) -> str:
    """
    Restrict content to text, line breaks and highlight spans.

    Args:
        raw_html: Content from a rich editor or programmatic highlight insertion.
        mode: Which editing surface produced the content.

    Returns:
        Content containing only the allowed markup. Never raises.
    """
    return sanitize_with_report(raw_html, mode).content


def sanitize_with_report(
    raw_html: str | None,
    mode: ContentFormat = ContentFormat.HTML,
) -> SanitizeResult:
    """
    Sanitize content and report what was dropped.

    Args:
        raw_html: Content to sanitize. None is treated as empty.
        mode: Which editing surface produced the content.

    Returns:
        SanitizeResult with the clean content and what was removed/unwrapped.
    """
    if not raw_html:
        return SanitizeResult(content="")

    result = SanitizeResult(content="")
    try:
        soup = parse_fragment(raw_html)
        _clean_tree(soup, mode, result)
        result.content = serialize(soup)
    except Exception:
        # html.parser is lenient, but markup it rejects must not block a save
        logger.warning("sanitize_parse_failed", exc_info=True)
        result.parse_failed = True
        result.content = _degrade_to_text(raw_html)
        return result

    if result.removed_elements:
        logger.warning(
            "sanitize_removed_content",
            extra={"removed_elements": result.removed_elements},
        )
    elif result.unwrapped_elements:
        logger.debug(
            "sanitize_unwrapped_markup",
            extra={"unwrapped_elements": result.unwrapped_elements},
        )
    return result


def _clean_tree(soup: BeautifulSoup, mode: ContentFormat, result: SanitizeResult) -> None:
    """Mutate a parsed fragment in place so it holds only allowed markup."""
    # Comments, doctypes, CDATA and processing instructions
    for node in soup.find_all(string=lambda s: isinstance(s, PreformattedString)):
        node.extract()

    for tag in soup.find_all(list(REMOVED_ELEMENTS)):
        result.removed_elements.append(tag.name)
        tag.extract()

    kept_spans: set[int] = set()
    for tag in soup.find_all(True):
        name = tag.name
        if name == "br":
            if mode is ContentFormat.EDITABLE:
                tag.replace_with("\n")
            else:
                tag.attrs = {}
        elif name in BLOCK_ELEMENTS:
            _collapse_block(soup, tag, mode)
        elif name == "span":
            style = span_style(tag)
            inside_highlight = any(id(parent) in kept_spans for parent in tag.parents)
            if style is None or inside_highlight:
                result.unwrapped_elements.append(name)
                tag.unwrap()
            else:
                apply_span_style(tag, style)
                kept_spans.add(id(tag))
        else:
            result.unwrapped_elements.append(name)
            tag.unwrap()

    if mode is ContentFormat.EDITABLE:
        for text in soup.find_all(string=True):
            if "\xa0" in text:
                text.replace_with(NavigableString(text.replace("\xa0", " ")))


def _collapse_block(soup: BeautifulSoup, tag: Tag, mode: ContentFormat) -> None:
    """
    Turn a block wrapper into a line break followed by its contents.

    contentEditable starts every line after the first with a <div>, so each
    block opens a new line. In HTML mode a block at the very start of the
    content needs no break.
    """
    if mode is ContentFormat.EDITABLE:
        tag.insert_before("\n")
    elif tag.previous_sibling is not None:
        tag.insert_before(soup.new_tag("br"))
    tag.unwrap()


def _degrade_to_text(raw_html: str) -> str:
    """Fallback when parsing fails: drop all markup and escape the text."""
    text = _REMOVED_BLOCK_PATTERN.sub("", raw_html)
    text = _TAG_PATTERN.sub("", text)
    return substitute_entities(html.unescape(text))


def extract_text(content: str | None) -> str:
    """
    Return the rendered text of stored content.

    Entities are decoded and each <br> becomes a newline; this is the text
    a reader sees, and the coordinate space for selection offsets.
    """
    if not content:
        return ""
    soup = parse_fragment(sanitize(content))
    for br in soup.find_all("br"):
        br.replace_with("\n")
    return soup.get_text()


def render_note_html(content: str | None) -> str:
    """
    Render stored content for display.

    Newlines stored by the editable surface become <br> so line structure
    survives in HTML, and highlight spans are reduced to canonical attributes.
    """
    return sanitize(content).replace("\n", "<br>")
