import io
from typing import List, Optional
from zipfile import BadZipFile, ZipFile

import structlog

from glasscut.models import ParagraphRecord
from glasscut.utils.docx import (
    extract_run_fragment,
    get_run_formatting,
    iter_paragraph_blocks,
    iter_run_blocks,
    strip_deletions,
)

logger = structlog.get_logger(__name__)

MAIN_DOCUMENT_PART = "word/document.xml"


def extract_lines_from_stream(file_stream: io.BytesIO, filename: str = "document.docx") -> List[ParagraphRecord]:
    """
    Extracts the visible lines (paragraphs) of a DOCX file stream.

    Only a missing or unreadable main document part is an error. Content problems
    (malformed paragraphs, empty runs) never abort the extraction; they are dropped.
    """
    try:
        raw_xml = read_main_document_xml(file_stream)
    except Exception as e:
        logger.error(f"Line extraction failed: {e}", filename=filename, exc_info=True)
        raise ValueError(f"Could not extract lines: {str(e)}") from e

    return parse_document_xml(raw_xml)


def read_main_document_xml(file_stream: io.BytesIO) -> str:
    """
    Returns word/document.xml as text, untouched by any XML parser.

    Raises:
        BadZipFile: the stream is not a zip container.
        KeyError: the container has no main document part.
        UnicodeDecodeError: the part is not UTF-8.
    """
    # Ensure stream is at start
    file_stream.seek(0)
    try:
        with ZipFile(file_stream) as zf:
            data = zf.read(MAIN_DOCUMENT_PART)
    except KeyError:
        raise KeyError(f"'{MAIN_DOCUMENT_PART}' not found in archive") from None
    except BadZipFile as e:
        raise BadZipFile(f"Not a DOCX (zip) container: {e}") from e

    # utf-8-sig drops a leading BOM, which some generators emit.
    return data.decode("utf-8-sig")


def parse_document_xml(raw_xml: str) -> List[ParagraphRecord]:
    """
    Parses raw word/document.xml into ordered paragraph records.

    Pure function of its input: deletions are stripped from the whole string first,
    then every paragraph block is assembled independently.
    """
    clean_xml = strip_deletions(raw_xml)

    records = []
    skipped = 0
    for paragraph_xml in iter_paragraph_blocks(clean_xml):
        record = assemble_paragraph(paragraph_xml)
        if record is None:
            logger.debug("Dropping empty paragraph", index=len(records) + skipped)
            skipped += 1
            continue
        records.append(record)

    logger.debug("Parsed document", paragraphs=len(records), skipped_empty=skipped)
    return records


def assemble_paragraph(paragraph_xml: str) -> Optional[ParagraphRecord]:
    """
    Concatenates the runs of one paragraph block.
    Returns None when the trimmed text is empty (blank line, lone soft break, only
    deleted content).
    """
    text_parts = []
    markup_parts = []

    for run_xml in iter_run_blocks(paragraph_xml):
        formatting = get_run_formatting(run_xml)
        fragment = extract_run_fragment(run_xml, formatting)
        if fragment is None:
            continue
        text_parts.append(fragment.text)
        markup_parts.append(fragment.markup)

    # Trim only the plain text: soft breaks at either end become stray newlines.
    # The markup keeps its spaces, which may sit right next to a tag.
    text = "".join(text_parts).strip()
    if not text:
        return None

    return ParagraphRecord(text=text, markup="".join(markup_parts))
