"""
Markdown 围栏代码块解析器 - Fenced code block recognizer

A streaming, line-at-a-time recognizer for fenced code blocks
(https://spec.commonmark.org/0.31.2/#fenced-code-blocks). Only fences
matter here; the rest of the document is treated as opaque prose.

Usage:

    block, col, warns, status = open_fence(line_info)
    while status is FenceStatus.OPEN:
        col, warns, status = block.feed_line(next_line_info)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from readme_examples.markdown.trim import trim_repeating, trim_space
from readme_examples.parsing import LineInfo, Position, SourceSyntaxError
from readme_examples.warning import Warnings

FENCE_CHARS = b"`~"
MAX_INDENT = 3
MIN_FENCE_LENGTH = 3


class FenceStatus(Enum):
    """Outcome of feeding a line to the recognizer."""
    NO_MATCH = "no_match"
    OPEN = "open"
    CLOSED = "closed"


def is_fence_char(b: int) -> bool:
    return b in FENCE_CHARS


def _go_quote(buf: bytes) -> str:
    return '"' + buf.decode("utf-8", errors="replace").replace('"', '\\"') + '"'


@dataclass
class FencedBlock:
    """
    A fenced code block.

    Attributes:
        start_line: 1-based line number of the opening fence
        end_line: Line number of the closing fence, 0 while open
        info: Text after the opening fence on its line
        indent: Spaces before the opening fence (at most 3). Matching
            prefixes of it are removed from inner lines.
        terminator: The opening fence run, e.g. ``` or ~~~~. A line
            holding it (or a longer run) closes the block.
        lines: Inner lines, de-indented
    """
    start_line: int = 0
    end_line: int = 0
    info: bytes = b""
    indent: bytes = b""
    terminator: bytes = b""
    lines: list[bytes] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"FencedBlock<[{self.start_line} {self.end_line}] "
            f"Info:{_go_quote(self.info)} "
            f"Indent:{_go_quote(self.indent)} "
            f"Terminator:{_go_quote(self.terminator)} "
            f"Lines[{len(self.lines)}]>"
        )

    @property
    def is_open(self) -> bool:
        return self.end_line == 0

    def content(self) -> bytes:
        return b"\n".join(self.lines)

    def _append_inner_line(self, line: bytes) -> None:
        # Strip only the part of the line that agrees with the indent.
        strip = 0
        for want, got in zip(self.indent, line):
            if want != got:
                break
            strip += 1
        self.lines.append(line[strip:])

    def feed_line(self, line: LineInfo, col: int = 1) -> tuple[int, Warnings, FenceStatus]:
        """
        Consume line from col onward.

        On the opening line the text becomes the info string; on later
        lines it becomes content, until the terminator is found.

        Returns:
            (next_col, warnings, status) where status is OPEN or CLOSED.
        """
        if col <= 0:
            col = 1
        start_col = col
        rest = line.line[col - 1:]
        orig = rest
        warns = Warnings()
        is_start_line = self.start_line == line.number

        # ~~~ fences cannot end on their own line, so everything is info.
        if is_start_line and self.terminator[:1] != b"`":
            self.info = rest
            return col + len(rest), warns, FenceStatus.OPEN

        idx = rest.find(self.terminator)
        if idx < 0:
            if is_start_line:
                self.info = rest
            else:
                self._append_inner_line(rest)
            return col + len(rest), warns, FenceStatus.OPEN

        self.end_line = line.number

        if is_start_line:
            self.info = rest[:idx]
            warns.append(SourceSyntaxError.at(
                line, col, 0,
                "possible fenced code block begins and ends on the same line, "
                "try splitting the line here",
            ))
            return start_col, warns, FenceStatus.CLOSED

        inner_line = rest[:idx]
        col += idx
        rest = rest[idx:]

        # Longer closing runs are allowed, but flagged.
        defenced, run_length = trim_repeating(rest)
        if run_length != len(self.terminator):
            warns.append(SourceSyntaxError.at(
                line, col, col + run_length - 1,
                "length of the ending fence does not match the starting fence "
                f"({_go_quote(self.terminator)}, on line {self.start_line})",
            ))
        col += run_length
        rest = defenced

        trimmed = trim_space(rest)
        if trimmed:
            warns.append(SourceSyntaxError.at(
                line, col + len(rest) - len(trimmed) - 1, 0,
                "text after the end fence mark, try splitting the line here. "
                "If you want to include this line in the block, add marks to "
                "the start and end fences, or flip between backticks ` and tildes ~.",
            ))
            # Not a terminator after all: keep the whole line as content.
            self.end_line = 0
            self._append_inner_line(orig)
            return start_col + len(orig), warns, FenceStatus.OPEN

        self._append_inner_line(inner_line)
        return col + len(rest), warns, FenceStatus.CLOSED


def open_fence(
    line: LineInfo,
    col: int = 1,
) -> tuple[FencedBlock | None, int, Warnings, FenceStatus]:
    """
    Detect an opening fence on line at col.

    Returns:
        (block, next_col, warnings, status). status is OPEN with a new
        block, or NO_MATCH with block None and col unchanged.
    """
    if col <= 0:
        col = 1
    start_col = col
    warns = Warnings()
    no_match = (None, start_col, warns, FenceStatus.NO_MATCH)
    block = FencedBlock(start_line=line.number)

    rest = line.line[start_col - 1:]
    # Indent only counts at the start of the line.
    if start_col == 1:
        rest = rest.lstrip(b" ")
        indent_len = len(line.line) - len(rest)
        if indent_len > MAX_INDENT:
            return no_match
        block.indent = line.line[:indent_len]
        col += indent_len

    if not rest or not is_fence_char(rest[0]):
        return no_match

    defenced, fence_len = trim_repeating(rest)
    if fence_len < MIN_FENCE_LENGTH:
        if fence_len == 2:
            warns.append(SourceSyntaxError.at(
                line, col, col + fence_len - 1,
                "code fences should be at least 3 chars long",
            ))
        return no_match

    if line.line[:col - 1] != block.indent:
        warns.append(SourceSyntaxError.at(
            line, col, 0,
            "code fence interrupts a line, try breaking the line here",
        ))
        return no_match

    block.terminator = rest[:fence_len]
    col += fence_len

    col, sub_warns, status = block.feed_line(line, col)
    warns.extend(sub_warns)
    if status is FenceStatus.CLOSED:
        # ```x``` on one line is an inline code span, not a block.
        return no_match
    return block, col, warns, FenceStatus.OPEN


@dataclass
class QuotedFile:
    """A fenced block presented as the contents of a named project file."""
    name: str
    name_position: Position
    block: FencedBlock
    data: bytes
    syntax: str

    def __str__(self) -> str:
        return f"QuotedFile<{self.name}, type {self.syntax}, size {len(self.data)}>"
