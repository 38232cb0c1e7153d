"""Variable names, KEY=VALUE assignments and variable maps."""

from readme_examples.parsing import (
    Failed,
    LineInfo,
    Matched,
    NoMatch,
    ParseResult,
    decode_char,
    fail_at,
)
from readme_examples.shell.strings import format_string, parse_shell_string


def is_alpha_or_underscore(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or c == "_"


def is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def parse_identifier(line: LineInfo, pos: int) -> ParseResult[str]:
    """Parse a name matching [A-Za-z_][A-Za-z_0-9]* at pos."""
    buf = line.line
    if pos >= len(buf):
        return NoMatch()

    char, size = decode_char(buf, pos)
    if char is None:
        return fail_at(line, pos, size, "invalid unicode")
    if not is_alpha_or_underscore(char):
        return NoMatch()

    end = pos + size
    while end < len(buf):
        char, size = decode_char(buf, end)
        if char is None:
            return fail_at(line, end, size, "invalid unicode")
        if not is_alpha_or_underscore(char) and not is_digit(char):
            break
        end += size

    return Matched(buf[pos:end].decode("ascii"), end)


def parse_assignment(line: LineInfo, pos: int) -> ParseResult[tuple[str, str]]:
    """
    Parse KEY=VALUE at pos. The value may be empty, as in `TZ= date`.

    An identifier without a following '=' is a no-match, leaving the
    bytes to be read again as something else, e.g. a command name.
    """
    key = parse_identifier(line, pos)
    if not isinstance(key, Matched):
        return key

    if not line.line.startswith(b"=", key.pos):
        return NoMatch()

    value = parse_shell_string(line, key.pos + 1)
    if isinstance(value, NoMatch):
        return Matched((key.value, ""), key.pos + 1)
    if isinstance(value, Failed):
        return value
    return Matched((key.value, value.value), value.pos)


def format_assignment(key: str, value: str) -> str:
    return f"{key}={format_string(value)}"


class Vars(dict):
    """Shell variables, rendered in key order."""

    def pair_strings(self) -> list[str]:
        return [format_assignment(key, self[key]) for key in sorted(self)]

    def __str__(self) -> str:
        return " ".join(self.pair_strings())

    def lines(self) -> str:
        return "\n".join(self.pair_strings())

    def copy(self) -> "Vars":
        return Vars(self)
