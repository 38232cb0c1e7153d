"""
Parsing Layer - 解析基础层

Line addressing, byte-cursor helpers, syntax diagnostics and the
three-way parse outcome shared by the markdown and shell parsers.
"""

from readme_examples.parsing.asciiset import ASCIISet
from readme_examples.parsing.bytes import contains_byte, decode_char
from readme_examples.parsing.errors import SourceSyntaxError, WrappedError
from readme_examples.parsing.position import LineInfo, Position
from readme_examples.parsing.results import (
    Failed,
    Matched,
    NoMatch,
    ParseResult,
    fail_at,
    skip_blanks,
)

__all__ = [
    # position
    "LineInfo",
    "Position",
    # errors
    "SourceSyntaxError",
    "WrappedError",
    # bytes
    "decode_char",
    "contains_byte",
    # asciiset
    "ASCIISet",
    # results
    "Matched",
    "NoMatch",
    "Failed",
    "ParseResult",
    "fail_at",
    "skip_blanks",
]
