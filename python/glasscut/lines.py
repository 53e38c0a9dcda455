"""
Pure transformations over extracted lines: cut payloads and HTML rendering.
"""

from typing import Sequence

import structlog

from glasscut.models import CutPayload, ParagraphRecord

logger = structlog.get_logger(__name__)

EMPTY_DOCUMENT_HTML = '<div class="empty">No content found in document</div>'


def build_cut_payload(records: Sequence[ParagraphRecord], start: int, count: int = 1) -> CutPayload:
    """
    Collects `count` consecutive lines starting at `start` (0-based) for the clipboard.
    The range is clamped at the end of the document; `payload.end` is where the next cut starts.

    Plain text lines are joined with newlines, markup lines with <br>.
    """
    if not records:
        raise ValueError("No document loaded.")
    if start < 0 or start >= len(records):
        raise ValueError(f"Line index {start} out of range (0-{len(records) - 1}).")
    if count < 1:
        raise ValueError(f"Line count must be at least 1, got {count}.")

    end = min(start + count, len(records))
    selected = records[start:end]

    if end - start < count:
        logger.debug("Cut clamped at end of document", requested=count, returned=end - start)

    return CutPayload(
        start=start,
        end=end,
        text="\n".join(r.text for r in selected),
        html="<br>".join(r.markup for r in selected),
    )


def render_lines_html(records: Sequence[ParagraphRecord]) -> str:
    """
    Renders lines as indexed <div class="line"> elements.
    Markup is already escaped, so it is inserted verbatim.
    """
    if not records:
        return EMPTY_DOCUMENT_HTML

    return "".join(
        f'<div class="line" data-index="{i}"><span>{record.markup}</span></div>' for i, record in enumerate(records)
    )


def truncate(text: str, limit: int = 40) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def describe_cut(payload: CutPayload, records: Sequence[ParagraphRecord]) -> str:
    """Human readable status line for a cut, using 1-based line numbers."""
    if payload.count == 1:
        return f'Copied line {payload.start + 1}: "{truncate(records[payload.start].text)}"'
    return f"Copied lines {payload.start + 1}-{payload.end} ({payload.count} lines)"
