"""Constant-time membership tests against a set of ASCII characters."""

from __future__ import annotations


class ASCIISet:
    """
    A set of ASCII characters packed into a 128-bit mask.

    Any non-ASCII byte or character is reported as not in the set.
    """

    __slots__ = ("_mask",)

    def __init__(self, mask: int = 0):
        self._mask = mask

    @classmethod
    def make(cls, chars: str | bytes) -> tuple["ASCIISet", bool]:
        """
        Build a set from chars.

        Returns:
            (set, ok) where ok is False if any character was not ASCII.
            Non-ASCII characters are left out of the set.
        """
        if isinstance(chars, bytes):
            chars = chars.decode("utf-8", errors="replace")
        mask = 0
        ok = True
        for c in chars:
            code = ord(c)
            if code >= 0x80:
                ok = False
                continue
            mask |= 1 << code
        return cls(mask), ok

    def contains_byte(self, b: int) -> bool:
        if b >= 0x80:
            return False
        return bool(self._mask & (1 << b))

    def contains_char(self, c: str) -> bool:
        code = ord(c)
        if code >= 0x80:
            return False
        return self.contains_byte(code)

    def __contains__(self, item: int | str) -> bool:
        if isinstance(item, str):
            return self.contains_char(item)
        return self.contains_byte(item)

    def trim_left(self, buf: bytes) -> bytes:
        """Remove leading bytes of buf that are in the set."""
        i = 0
        while i < len(buf) and self.contains_byte(buf[i]):
            i += 1
        return buf[i:]

    def __repr__(self) -> str:
        members = "".join(chr(i) for i in range(128) if self._mask & (1 << i))
        return f"ASCIISet({members!r})"
