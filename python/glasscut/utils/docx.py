"""
Low-level utilities for scanning raw WordprocessingML (word/document.xml).

Everything here works on the raw string with regular expressions instead of an XML tree.
Tree parsers normalise text nodes and may drop the leading/trailing spaces of <w:t>
elements that lack xml:space="preserve", which glues words from adjacent runs together
("for her belief" -> "herbelief"). Matching the raw markup keeps every character.
"""

import re
from typing import Iterator, NamedTuple, Optional
from xml.sax.saxutils import escape, unescape

import structlog

from glasscut.models import RunFormatting

logger = structlog.get_logger(__name__)


# --- Types ---
class RunFragment(NamedTuple):
    text: str  # plain text, tabs and soft breaks included
    markup: str  # escaped and wrapped, trailing <br> included
    formatting: RunFormatting
    soft_break: bool = False


# --- Patterns ---
# \b keeps <w:delText> and <w:delInstrText> out; both forms of an empty deletion are covered.
DELETION_RE = re.compile(r"<w:del\b[^>]*/>|<w:del\b[^>]*>[\s\S]*?</w:del>")

# [ >] keeps <w:pPr>, <w:proofErr>, <w:rPr>, <w:rStyle> etc. from opening a block.
PARAGRAPH_RE = re.compile(r"<w:p[ >][\s\S]*?</w:p>")
RUN_RE = re.compile(r"<w:r[ >][\s\S]*?</w:r>")

RUN_PROPERTIES_RE = re.compile(r"<w:rPr>([\s\S]*?)</w:rPr>")

# (?!C) excludes the complex-script toggles <w:bCs>/<w:iCs>.
BOLD_ON_RE = re.compile(r"<w:b(?!C)(?:\s[^>]*)?/>|<w:b(?!C)>")
BOLD_OFF_RE = re.compile(r'<w:b(?!C)[^>]+w:val="(?:0|false)"')
ITALIC_ON_RE = re.compile(r"<w:i(?!C)(?:\s[^>]*)?/>|<w:i(?!C)>")
ITALIC_OFF_RE = re.compile(r'<w:i(?!C)[^>]+w:val="(?:0|false)"')
UNDERLINE_RE = re.compile(r'<w:u\s+w:val="([^"]*)"')
UNDERLINE_OFF_VALUES = frozenset({"none", "0", "false"})

# Content leaves of a run, in document order: text, tab, break, carriage return.
# The text opener must not accept <w:tab/> as "<w:t" + "ab/", nor an empty <w:t .../>.
LEAF_RE = re.compile(r"<w:t(?:\s[^>]*)?(?<!/)>([\s\S]*?)</w:t>|(<w:tab\s*/>)|<w:br(\s[^>]*)?/>|(<w:cr\s*/>)")
BREAK_TYPE_RE = re.compile(r'w:type="([^"]*)"')
SOFT_BREAK_TYPES = ("", "textWrapping")

_XML_ENTITIES = {"&quot;": '"', "&apos;": "'"}
_HTML_ENTITIES = {'"': "&quot;"}


def xml_unescape(text: str) -> str:
    """
    Converts the five predefined XML entities back to characters.
    Regex captures still carry the raw entity text, so "&amp;" must become "&" before use.
    Single pass: "&amp;lt;" becomes "&lt;", not "<".
    """
    return unescape(text, _XML_ENTITIES)


def html_escape(text: str) -> str:
    """Escapes & < > and double quotes for innerHTML. Apostrophes are left alone."""
    return escape(text, _HTML_ENTITIES)


def strip_deletions(xml: str) -> str:
    """
    Removes every tracked deletion (<w:del>) from the whole part.
    Runs on the full string, not per paragraph, so a deletion whose tags straddle a
    paragraph boundary is removed from both sides.
    """
    return DELETION_RE.sub("", xml)


def iter_paragraph_blocks(xml: str) -> Iterator[str]:
    """
    Yields each <w:p>...</w:p> block in document order.
    A paragraph whose closing tag never arrives simply produces no match.
    """
    for match in PARAGRAPH_RE.finditer(xml):
        yield match.group(0)


def iter_run_blocks(paragraph_xml: str) -> Iterator[str]:
    """Yields each <w:r>...</w:r> block of one paragraph in document order."""
    for match in RUN_RE.finditer(paragraph_xml):
        yield match.group(0)


def _is_toggle_on(rpr: str, on_re: re.Pattern, off_re: re.Pattern) -> bool:
    return bool(on_re.search(rpr)) and not off_re.search(rpr)


def get_run_formatting(run_xml: str) -> RunFormatting:
    """
    Reads bold/italic/underline from the run's own <w:rPr>.
    Paragraph marks, styles and document defaults are not consulted: a run without a
    property block is plain.
    """
    rpr_match = RUN_PROPERTIES_RE.search(run_xml)
    if rpr_match is None:
        return RunFormatting()
    rpr = rpr_match.group(1)

    # <w:u> always carries w:val; a bare tag is treated as off.
    u_match = UNDERLINE_RE.search(rpr)
    is_underline = u_match is not None and u_match.group(1) not in UNDERLINE_OFF_VALUES

    return RunFormatting(
        bold=_is_toggle_on(rpr, BOLD_ON_RE, BOLD_OFF_RE),
        italic=_is_toggle_on(rpr, ITALIC_ON_RE, ITALIC_OFF_RE),
        underline=is_underline,
    )


def _is_soft_break(br_attrs: Optional[str]) -> bool:
    # No type means textWrapping; page and column breaks do not separate lines.
    type_match = BREAK_TYPE_RE.search(br_attrs or "")
    return type_match is None or type_match.group(1) in SOFT_BREAK_TYPES


def get_run_text(run_xml: str) -> tuple[str, bool]:
    """
    Walks the content leaves of a run in document order.
    <w:t> content is taken exactly as stored (no whitespace normalisation) and
    entity-unescaped; each <w:tab/> becomes '\\t' and each soft break (<w:br/>, <w:cr/>)
    becomes '\\n'.

    Returns the text and whether any soft break was seen.
    """
    text = ""
    soft_break = False
    for match in LEAF_RE.finditer(run_xml):
        content, tab, br_attrs, cr = match.groups()
        if content is not None:
            text += xml_unescape(content)
        elif tab:
            text += "\t"
        elif cr or _is_soft_break(br_attrs):
            text += "\n"
            soft_break = True

    return text, soft_break


def wrap_formatting(markup: str, formatting: RunFormatting) -> str:
    """
    Wraps escaped run text in inline tags.
    Nesting order: underline innermost, bold outermost -> <strong><em><u>text</u></em></strong>.
    Surrounding spaces stay inside the tags; browsers render them correctly there.
    """
    if formatting.underline:
        markup = f"<u>{markup}</u>"
    if formatting.italic:
        markup = f"<em>{markup}</em>"
    if formatting.bold:
        markup = f"<strong>{markup}</strong>"
    return markup


def extract_run_fragment(run_xml: str, formatting: Optional[RunFormatting] = None) -> Optional[RunFragment]:
    """
    Builds the text and markup of one run.
    The whole run text is escaped and wrapped once; if the run held any soft break, a
    single <br> follows the closing tags. Returns None when the run contributes no
    characters (only properties, a field code, a page break).
    """
    if formatting is None:
        formatting = get_run_formatting(run_xml)

    text, soft_break = get_run_text(run_xml)
    if not text:
        logger.debug("Skipping empty run", formatting=formatting._asdict())
        return None

    markup = wrap_formatting(html_escape(text), formatting)
    if soft_break:
        markup += "<br>"

    return RunFragment(text, markup, formatting, soft_break)
