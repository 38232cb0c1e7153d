"""UTF-8 helpers for byte-cursor parsers."""

# Lead byte -> expected sequence length.
_SEQUENCE_LENGTHS: list[tuple[int, int, int]] = [
    (0x00, 0x7F, 1),
    (0xC2, 0xDF, 2),
    (0xE0, 0xEF, 3),
    (0xF0, 0xF4, 4),
]


def decode_char(buf: bytes, pos: int) -> tuple[str | None, int]:
    """
    Decode one UTF-8 character of buf starting at pos.

    Returns:
        (char, size). At the end of buf this is ("", 0).
        For an invalid sequence char is None and size is 1.
    """
    if pos >= len(buf):
        return "", 0

    lead = buf[pos]
    for low, high, length in _SEQUENCE_LENGTHS:
        if low <= lead <= high:
            break
    else:
        return None, 1

    chunk = buf[pos:pos + length]
    try:
        return chunk.decode("utf-8"), length
    except UnicodeDecodeError:
        # Only the lead byte is consumed, so the next decode resyncs.
        return None, 1


def contains_byte(buf: bytes, b: int) -> bool:
    """
    Interpret buf as UTF-8 text and report whether the single-byte
    character b appears anywhere in it as a whole character.
    """
    pos = 0
    while pos < len(buf):
        _, size = decode_char(buf, pos)
        if size == 1 and buf[pos] == b:
            return True
        pos += size
    return False
