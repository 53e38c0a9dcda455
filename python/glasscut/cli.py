import argparse
import json
import logging
import sys
from io import BytesIO
from pathlib import Path
from typing import List

import structlog

from glasscut import __version__
from glasscut.ingest import extract_lines_from_stream
from glasscut.lines import build_cut_payload, describe_cut, render_lines_html
from glasscut.models import ParagraphRecord


def _configure_logging(verbose: bool):
    # stdout carries the extracted text; logs go to stderr.
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _read_docx_lines(path: Path) -> List[ParagraphRecord]:
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, "rb") as f:
        stream = BytesIO(f.read())
    try:
        return extract_lines_from_stream(stream, filename=path.name)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _format_lines(records: List[ParagraphRecord], fmt: str) -> str:
    if fmt == "html":
        return render_lines_html(records)
    if fmt == "json":
        return json.dumps([r.model_dump() for r in records], indent=2, ensure_ascii=False)
    return "\n".join(r.text for r in records)


def handle_extract(args):
    records = _read_docx_lines(args.input)
    output = _format_lines(records, args.format)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"Extracted {len(records)} lines to {args.output}", file=sys.stderr)
    else:
        print(output)


def handle_cut(args):
    """Handler for the 'cut' subcommand. START is 1-based, like the line counter."""
    records = _read_docx_lines(args.input)

    try:
        payload = build_cut_payload(records, args.start - 1, args.count)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(payload.model_dump(), indent=2, ensure_ascii=False))
    else:
        print(payload.text)

    print(describe_cut(payload, records), file=sys.stderr)
    if payload.end >= len(records):
        print("All lines processed!", file=sys.stderr)


def main():
    parser = argparse.ArgumentParser(prog="glasscut", description="Glasscut: line-by-line text extraction from DOCX")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    p_extract = subparsers.add_parser("extract", help="Extract the lines of a DOCX file")
    p_extract.add_argument("input", type=Path, help="Input DOCX file")
    p_extract.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p_extract.add_argument(
        "-f",
        "--format",
        choices=["text", "html", "json"],
        default="text",
        help="text: one line per paragraph; html: rendered lines; json: text and markup per line",
    )
    p_extract.set_defaults(func=handle_extract)

    p_cut = subparsers.add_parser("cut", help="Print one or more consecutive lines, as copied to the clipboard")
    p_cut.add_argument("input", type=Path, help="Input DOCX file")
    p_cut.add_argument("start", type=int, help="First line to cut (1-based)")
    p_cut.add_argument("-n", "--count", type=int, default=1, help="Number of lines to cut (default: 1)")
    p_cut.add_argument("--json", action="store_true", help="Output both text and HTML flavours as JSON")
    p_cut.set_defaults(func=handle_cut)

    args = parser.parse_args()
    _configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
