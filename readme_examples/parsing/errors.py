"""
Syntax diagnostics with a caret-annotated excerpt of the offending line.

Rendered form:

    syntax at README.md:3:7-11: unexpected word

    	hello world
    	      ^^^^^
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from readme_examples.parsing.bytes import decode_char

if TYPE_CHECKING:
    from readme_examples.parsing.position import LineInfo

TAB_WIDTH = 8


class WrappedError(Exception):
    """A message prefixed onto an underlying error, which stays the cause."""

    def __init__(self, context: str, cause: BaseException):
        super().__init__(f"{context}: {cause}")
        self.context = context
        self.__cause__ = cause


@dataclass(eq=True)
class SourceSyntaxError(Exception):
    """
    A hard parse error at a span of byte columns on one line.

    Attributes:
        line: The source line
        file_name: Document name
        line_no: 1-based line number
        col_start: First 1-based byte column of the span
        col_end: Last byte column of the span; equals col_start for a point
        err: The underlying cause
    """
    line: bytes = b""
    file_name: str = ""
    line_no: int = 0
    col_start: int = 0
    col_end: int = 0
    err: BaseException | None = None

    def __post_init__(self) -> None:
        if self.col_end == 0:
            self.col_end = self.col_start
        super().__init__(self.err)
        if self.err is not None:
            self.__cause__ = self.err

    @classmethod
    def at(
        cls,
        line: "LineInfo",
        col: int,
        col_end: int,
        err: str | BaseException,
    ) -> "SourceSyntaxError":
        """Build an error at [col, col_end] of line. col_end of 0 marks a point."""
        if isinstance(err, str):
            err = Exception(err)
        return cls(
            line=line.line,
            file_name=line.file_name,
            line_no=line.number,
            col_start=col,
            col_end=col_end,
            err=err,
        )

    @property
    def message(self) -> str:
        return str(self.err) if self.err is not None else "<nil>"

    def with_context(self, context: str) -> "SourceSyntaxError":
        """Copy of this error whose message is prefixed with context."""
        cause = self.err if self.err is not None else Exception("<nil>")
        return replace(self, err=WrappedError(context, cause))

    def excerpt(self) -> tuple[str, str]:
        """Return the tab-expanded line and its marker line."""
        marked: list[str] = []
        marker: list[str] = []
        vis_col = 0
        pos = 0
        while pos < len(self.line):
            char, size = decode_char(self.line, pos)
            if char is None:
                char = "�"
            first_col, last_col = pos + 1, pos + size
            in_span = self.col_start <= last_col and first_col <= self.col_end
            mark = "^" if in_span else " "

            if char == "\t":
                stop = TAB_WIDTH - vis_col % TAB_WIDTH
                marked.append(" " * stop)
                marker.append(mark * stop)
                vis_col += stop
            else:
                marked.append(char)
                marker.append(mark)
                vis_col += 1
            pos += size

        # Spans may point past the end of the line, e.g. at a missing char.
        for col in range(len(self.line) + 1, self.col_end + 1):
            marker.append("^" if col >= self.col_start else " ")

        return "".join(marked), "".join(marker)

    def __str__(self) -> str:
        end = ""
        if self.col_end > 0 and self.col_end != self.col_start:
            end = f"-{self.col_end}"
        marked_line, marker_line = self.excerpt()
        return (
            f"syntax at {self.file_name}:{self.line_no}:{self.col_start}{end}: "
            f"{self.message}\n\n\t{marked_line}\n\t{marker_line}"
        )

    def __hash__(self) -> int:
        return hash((self.line, self.file_name, self.line_no, self.col_start, self.col_end))
