"""
Shell string tokens: double-quoted, single-quoted and raw words.

Only the quoting rules needed for documented examples are supported.
Expansions ($VAR, $(...), backticks, globs, history) are not: their
characters end a raw word and the caller sees a no-match there.
"""

from readme_examples.parsing import (
    ASCIISet,
    Failed,
    LineInfo,
    Matched,
    NoMatch,
    ParseResult,
    decode_char,
    fail_at,
)

# Characters that interrupt a double-quoted string unless escaped.
DQUOTE_SPECIAL_CHARS = "$\r\n\t\"`"

# Characters whose escaped form is not their literal value, e.g. \n.
DQUOTE_NONLITERAL_CHARS = "\r\n\t"

# Characters that interrupt a raw word unless quoted or escaped.
SPECIAL_CHARS = DQUOTE_SPECIAL_CHARS + "!()[]{}<>|&*? ;#'\\"

_DQUOTE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_FORMAT_ESCAPES: dict[str, str] = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\\": "\\\\",
    "\"": "\\\"",
    "$": "\\$",
    "`": "\\`",
}

SPECIAL_SET, _ = ASCIISet.make(SPECIAL_CHARS)


def parse_dquote(line: LineInfo, pos: int) -> ParseResult[str]:
    """Parse a double-quoted string at pos."""
    buf = line.line
    if not buf.startswith(b'"', pos):
        return NoMatch()

    out: list[str] = []
    pos += 1
    # Start of the text not yet known to be properly quoted.
    span_start = pos
    while pos < len(buf):
        char, size = decode_char(buf, pos)
        if char is None:
            return fail_at(line, pos, size, "invalid unicode")
        if char == '"':
            return Matched("".join(out), pos + 1)
        if char != "\\":
            out.append(char)
            pos += size
            continue

        pos += 1  # the backslash
        if pos >= len(buf):
            return fail_at(line, pos, 0, "unexpected end after escape char")
        char, size = decode_char(buf, pos)
        if char is None:
            return fail_at(line, pos, size, "invalid unicode")
        out.append(_DQUOTE_ESCAPES.get(char, char))
        pos += size
        span_start = pos

    if span_start >= len(buf):
        return fail_at(line, pos, 0, "expected ending '\"' for double-quoted shell string")
    return fail_at(line, span_start, len(buf) - span_start + 1, "expected ending '\"' in this span")


def parse_squote(line: LineInfo, pos: int) -> ParseResult[str]:
    """Parse a single-quoted string at pos. No escapes are processed."""
    buf = line.line
    if not buf.startswith(b"'", pos):
        return NoMatch()

    start = pos + 1
    end = buf.find(b"'", start)
    if end < 0:
        return fail_at(line, start, len(buf) - start + 1, "expected ending `'` in this span")

    try:
        value = buf[start:end].decode("utf-8")
    except UnicodeDecodeError as e:
        return fail_at(line, start + e.start, e.end - e.start, "invalid unicode")
    return Matched(value, end + 1)


def parse_raw(line: LineInfo, pos: int) -> ParseResult[str]:
    """Parse an unquoted word at pos, honouring backslash escapes."""
    buf = line.line
    out: list[str] = []
    while pos < len(buf):
        char, size = decode_char(buf, pos)
        if char is None:
            return fail_at(line, pos, 0, "invalid unicode in raw string")
        # Multibyte characters are never special.
        if size != 1 or not SPECIAL_SET.contains_byte(buf[pos]):
            out.append(char)
            pos += size
            continue

        if char != "\\":
            break

        pos += 1
        if pos >= len(buf):
            return fail_at(line, pos, 0, "unexpected end of raw string after escape")
        char, size = decode_char(buf, pos)
        if char is None:
            return fail_at(line, pos, 0, "invalid unicode after escape in raw string")
        out.append(char)
        pos += size

    if not out:
        return NoMatch()
    return Matched("".join(out), pos)


def parse_shell_string(line: LineInfo, pos: int) -> ParseResult[str]:
    """
    Parse one shell word made of adjacent quoted and raw segments.

    `a"b c"'d'` is the single value `ab cd`. An explicitly quoted
    empty string such as "" is a match with an empty value; otherwise
    consuming nothing is a no-match.
    """
    buf = line.line
    out: list[str] = []
    explicit = False
    while pos < len(buf):
        lead = buf[pos:pos + 1]
        if lead == b'"':
            result = parse_dquote(line, pos)
            explicit = True
        elif lead == b"'":
            result = parse_squote(line, pos)
            explicit = True
        elif lead == b" ":
            break
        else:
            result = parse_raw(line, pos)
            if isinstance(result, NoMatch):
                break

        if isinstance(result, Failed):
            return result
        assert isinstance(result, Matched)
        out.append(result.value)
        pos = result.pos

    if not out and not explicit:
        return NoMatch()
    return Matched("".join(out), pos)


def dquote_string(value: str) -> str:
    """Render value as a double-quoted string that parses back to value."""
    escaped = "".join(_FORMAT_ESCAPES.get(c, c) for c in value)
    return f'"{escaped}"'


def format_string(value: str) -> str:
    """
    Canonical shell rendering of value.

    Plain words are returned as-is; anything else is double-quoted.
    """
    if value == "":
        return '""'
    if not any(c in SPECIAL_CHARS for c in value):
        return value
    return dquote_string(value)
