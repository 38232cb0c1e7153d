"""
Outcome of a token parser: matched, no match, or a hard error.

Parsers never raise for malformed input. Every call returns exactly one of
Matched, NoMatch or Failed, and callers branch on the type:

    result = parse_identifier(li, pos)
    if isinstance(result, Failed):
        return result
    if isinstance(result, NoMatch):
        ...  # nothing was consumed, try another rule
    else:
        pos = result.pos

A NoMatch never consumes input, which is what lets concatenation and
repetition loops terminate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from readme_examples.parsing.errors import SourceSyntaxError
from readme_examples.parsing.position import LineInfo

T = TypeVar("T")


@dataclass(frozen=True)
class Matched(Generic[T]):
    """A successful parse; pos is the byte offset just past the match."""
    value: T
    pos: int


@dataclass(frozen=True)
class NoMatch:
    """The input at the cursor does not start this construct."""


@dataclass(frozen=True)
class Failed:
    """The input starts this construct but is malformed."""
    error: SourceSyntaxError

    def with_context(self, context: str) -> "Failed":
        return Failed(self.error.with_context(context))


ParseResult = Union[Matched[T], NoMatch, Failed]


def fail_at(line: LineInfo, pos: int, span: int, message: str | BaseException) -> Failed:
    """
    Build a Failed pointing at byte offset pos of line.

    A span of 0 marks a single column; otherwise the error covers
    span columns starting at pos.
    """
    col = pos + 1
    col_end = col + span - 1 if span > 0 else 0
    return Failed(SourceSyntaxError.at(line, col, col_end, message))


def skip_blanks(buf: bytes, pos: int) -> int:
    """Advance pos past spaces and tabs."""
    while pos < len(buf) and buf[pos] in b" \t":
        pos += 1
    return pos
