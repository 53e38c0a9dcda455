from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class RunFormatting(NamedTuple):
    """Direct formatting toggles read from a single run's <w:rPr>."""

    bold: bool = False
    italic: bool = False
    underline: bool = False


class ParagraphRecord(BaseModel):
    """
    One visible line of the document.
    Records are frozen: the parser hands them over and never touches them again.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(
        ...,
        description="Plain text of the paragraph. Trimmed; tabs and soft breaks kept as '\\t' and '\\n'.",
    )

    markup: str = Field(
        ...,
        description=(
            "HTML-escaped paragraph text wrapped in <strong>/<em>/<u> per run, with <br> for soft breaks. "
            "Not trimmed: whitespace next to a tag boundary is significant."
        ),
    )


class CutPayload(BaseModel):
    """
    The clipboard content for a cut of one or more consecutive lines.
    Carries both flavours so the receiving application can pick plain text or HTML.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., description="0-based index of the first line in the cut.")
    end: int = Field(..., description="0-based index one past the last line; also the next line to cut.")
    text: str = Field(..., description="Line texts joined with newlines (text/plain flavour).")
    html: str = Field(..., description="Line markup joined with <br> (text/html flavour).")

    @property
    def count(self) -> int:
        return self.end - self.start
