from importlib.metadata import PackageNotFoundError, version

from glasscut.ingest import extract_lines_from_stream, parse_document_xml
from glasscut.lines import build_cut_payload, render_lines_html
from glasscut.models import CutPayload, ParagraphRecord

try:
    __version__ = version("glasscut")
except PackageNotFoundError:
    # Package is imported straight from the source tree (not installed).
    __version__ = "0.0.0-dev"

__all__ = [
    "ParagraphRecord",
    "CutPayload",
    "extract_lines_from_stream",
    "parse_document_xml",
    "build_cut_payload",
    "render_lines_html",
    "__version__",
]
