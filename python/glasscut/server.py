import json
import logging
import sys
from io import BytesIO
from pathlib import Path

import structlog
from mcp.server.fastmcp import FastMCP

from glasscut.ingest import extract_lines_from_stream
from glasscut.lines import build_cut_payload

# --- LOGGING CONFIGURATION ---
# MCP communicates over stdio.
# CRITICAL: All logs must go to stderr. Any print to stdout will break the JSON-RPC protocol.
logging.basicConfig(stream=sys.stderr, level=logging.INFO, force=True)

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

mcp = FastMCP("Glasscut Line Service")


def _read_file_bytes(path: str) -> BytesIO:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(p, "rb") as f:
        return BytesIO(f.read())


@mcp.tool()
def read_docx_lines(file_path: str, include_markup: bool = False) -> str:
    """
    Reads a DOCX file and returns its visible lines (one per non-empty paragraph).

    Args:
        file_path: Absolute path to the DOCX file.
        include_markup: If False (default), returns the plain text, one line per paragraph.
                        If True, returns a JSON list of {"text", "markup"} objects where markup
                        keeps bold/italic/underline as <strong>/<em>/<u> and soft breaks as <br>.
    """
    try:
        stream = _read_file_bytes(file_path)
        records = extract_lines_from_stream(stream, filename=Path(file_path).name)
        if include_markup:
            return json.dumps([r.model_dump() for r in records], ensure_ascii=False)
        return "\n".join(r.text for r in records)
    except Exception as e:
        return f"Error reading file: {str(e)}"


@mcp.tool()
def cut_docx_lines(file_path: str, start: int, count: int = 1) -> str:
    """
    Returns the clipboard payload for `count` consecutive lines of a DOCX file.

    Args:
        file_path: Absolute path to the DOCX file.
        start: 0-based index of the first line, as listed by read_docx_lines.
        count: Number of lines. Clamped at the end of the document.

    Returns:
        JSON object {"start", "end", "text", "html"}. `end` is the index of the next uncut line.
    """
    try:
        stream = _read_file_bytes(file_path)
        records = extract_lines_from_stream(stream, filename=Path(file_path).name)
        payload = build_cut_payload(records, start, count)
        return payload.model_dump_json()
    except Exception as e:
        return f"Error cutting lines: {str(e)}"


def main():
    mcp.run()


if __name__ == "__main__":
    main()
