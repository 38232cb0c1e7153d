"""Byte trimming helpers for fence detection."""


def trim_repeating(buf: bytes) -> tuple[bytes, int]:
    """
    Strip a run of the first byte of buf.

    Returns:
        (rest, run_length). A run of a single byte does not count:
        buf is returned unchanged with a length of 0.
    """
    if not buf:
        return b"", 0

    first = buf[0]
    end = 1
    while end < len(buf) and buf[end] == first:
        end += 1

    if end == 1:
        return buf, 0
    return buf[end:], end


def trim_space(buf: bytes) -> bytes:
    """Strip leading spaces and tabs."""
    return buf.lstrip(b" \t")
