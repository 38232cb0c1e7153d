"""Line and column addressing for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from readme_examples.parsing.errors import SourceSyntaxError


@dataclass(frozen=True)
class LineInfo:
    """
    One physical line of a source document.

    Attributes:
        line: Raw line bytes, without the trailing newline
        file_name: Name of the document the line came from
        number: 1-based line number
    """
    line: bytes = b""
    file_name: str = ""
    number: int = 0

    def position(self, col: int) -> "Position":
        """Address a 1-based byte column on this line."""
        return Position(
            line=self.line,
            file_name=self.file_name,
            line_number=self.number,
            col=col,
        )


@dataclass(frozen=True)
class Position:
    """A 1-based byte column on a line of a document."""
    line: bytes = b""
    file_name: str = ""
    line_number: int = 0
    col: int = 0

    def line_info(self) -> LineInfo:
        return LineInfo(
            line=self.line,
            file_name=self.file_name,
            number=self.line_number,
        )

    def error(self, message: str | BaseException, col_end: int = 0) -> "SourceSyntaxError":
        """Build a diagnostic pointing at this position."""
        from readme_examples.parsing.errors import SourceSyntaxError

        return SourceSyntaxError.at(self.line_info(), self.col, col_end, message)
