"""Tests for the fenced code block recognizer."""

import pytest

from readme_examples.markdown import (
    FencedBlock,
    FenceStatus,
    QuotedFile,
    open_fence,
    trim_repeating,
    trim_space,
)
from readme_examples.parsing import LineInfo


def li(text, number=1, name="hello.txt"):
    return LineInfo(line=text.encode("utf-8"), file_name=name, number=number)


def as_strings(warns):
    return [str(w) for w in warns]


class TestTrim:
    """Test the byte trimming helpers."""

    @pytest.mark.parametrize("text,want,length", [
        ("", "", 0),
        ("hello", "hello", 0),
        ("llama", "ama", 2),
        ("```fence", "fence", 3),
    ])
    def test_trim_repeating(self, text, want, length):
        rest, n = trim_repeating(text.encode("utf-8"))
        assert rest == want.encode("utf-8")
        assert n == length

    @pytest.mark.parametrize("text,want", [
        ("", ""),
        ("hello", "hello"),
        (" hello", "hello"),
        ("\t hello", "hello"),
        ("\n hello", "\n hello"),
    ])
    def test_trim_space(self, text, want):
        assert trim_space(text.encode("utf-8")) == want.encode("utf-8")


class TestFormat:
    """Test string rendering."""

    @pytest.mark.parametrize("block,want", [
        (
            FencedBlock(start_line=1, terminator=b"```"),
            'FencedBlock<[1 0] Info:"" Indent:"" Terminator:"```" Lines[0]>',
        ),
        (
            FencedBlock(start_line=1, indent=b"   ", terminator=b"~~~"),
            'FencedBlock<[1 0] Info:"" Indent:"   " Terminator:"~~~" Lines[0]>',
        ),
        (
            FencedBlock(start_line=1, terminator=b"```", info=b"lang", lines=[b"a", b""]),
            'FencedBlock<[1 0] Info:"lang" Indent:"" Terminator:"```" Lines[2]>',
        ),
    ])
    def test_fenced_block(self, block, want):
        assert str(block) == want

    def test_quoted_file(self):
        quoted = QuotedFile(
            name="file.txt",
            name_position=li("file.txt").position(1),
            block=FencedBlock(),
            data=b"test file\n",
            syntax="text",
        )
        assert str(quoted) == "QuotedFile<file.txt, type text, size 10>"


class TestOpenFence:
    """Test detection of opening fences."""

    @pytest.mark.parametrize("text", ["", "hello", "    ```", "\t```", "~", "`"])
    def test_no_match(self, text):
        block, col, warns, status = open_fence(li(text))
        assert block is None
        assert col == 1
        assert status is FenceStatus.NO_MATCH
        assert as_strings(warns) == []

    @pytest.mark.parametrize("text,terminator,indent,info,col", [
        ("```", b"```", b"", b"", 4),
        ("~~~", b"~~~", b"", b"", 4),
        ("   ```", b"```", b"   ", b"", 7),
        ("````", b"````", b"", b"", 5),
        ("```lang", b"```", b"", b"lang", 8),
        ("~~~ lang ~~~ ``` other", b"~~~", b"", b" lang ~~~ ``` other", 23),
    ])
    def test_open(self, text, terminator, indent, info, col):
        block, next_col, warns, status = open_fence(li(text))
        assert status is FenceStatus.OPEN
        assert as_strings(warns) == []
        assert block.start_line == 1
        assert block.end_line == 0
        assert block.is_open
        assert block.terminator == terminator
        assert block.indent == indent
        assert block.info == info
        assert block.lines == []
        assert next_col == col

    def test_two_chars_warns(self):
        block, _, warns, status = open_fence(li("~~"))
        assert block is None
        assert status is FenceStatus.NO_MATCH
        assert as_strings(warns) == [
            "syntax at hello.txt:1:1-2: code fences should be at least 3 chars long\n\n\t~~\n\t^^",
        ]

    def test_mid_line_fence(self):
        block, col, warns, status = open_fence(li("content ```"), 9)
        assert block is None
        assert col == 9
        assert status is FenceStatus.NO_MATCH
        assert as_strings(warns) == [
            "syntax at hello.txt:1:9: code fence interrupts a line, try breaking the line here"
            "\n\n\tcontent ```\n\t        ^  ",
        ]

    def test_same_line_termination(self):
        block, col, warns, status = open_fence(li("```content```"))
        assert block is None
        assert col == 1
        assert status is FenceStatus.NO_MATCH
        assert as_strings(warns) == [
            "syntax at hello.txt:1:4: possible fenced code block begins and ends on the same line, "
            "try splitting the line here\n\n\t```content```\n\t   ^         ",
        ]

    def test_tilde_fence_ignores_backticks_on_start_line(self):
        block, _, _, status = open_fence(li("~~~ ```x```"))
        assert status is FenceStatus.OPEN
        assert block.info == b" ```x```"


class TestFeedLine:
    """Test lines fed to an open block."""

    @pytest.mark.parametrize("indent,text,want,col", [
        (b"", "content", b"content", 8),
        (b"  ", "  content", b"content", 10),
        (b"  ", " content", b"content", 9),
        (b"  ", "   content", b" content", 11),
        (b"  ", "   ", b" ", 4),
        (b"  ", " ", b"", 2),
        (b"", "~~~", b"~~~", 4),
    ])
    def test_content(self, indent, text, want, col):
        block = FencedBlock(start_line=1, indent=indent, terminator=b"```")
        next_col, warns, status = block.feed_line(li(text, number=2))
        assert status is FenceStatus.OPEN
        assert as_strings(warns) == []
        assert block.lines == [want]
        assert block.end_line == 0
        assert next_col == col

    @pytest.mark.parametrize("text,lines,col", [
        ("```", [b""], 4),
        ("content```", [b"content"], 11),
        ("```   ", [b""], 7),
        ("````", [b""], 5),
    ])
    def test_terminator(self, text, lines, col):
        block = FencedBlock(start_line=1, terminator=b"```")
        next_col, _, status = block.feed_line(li(text, number=2))
        assert status is FenceStatus.CLOSED
        assert block.end_line == 2
        assert not block.is_open
        assert block.lines == lines
        assert next_col == col

    def test_longer_terminator_warns(self):
        block = FencedBlock(start_line=1, terminator=b"```")
        col, warns, status = block.feed_line(li("`````", number=2, name="extra.md"))
        assert status is FenceStatus.CLOSED
        assert col == 6
        assert as_strings(warns) == [
            'syntax at extra.md:2:1-5: length of the ending fence does not match the '
            'starting fence ("```", on line 1)\n\n\t`````\n\t^^^^^',
        ]

    def test_shorter_run_is_content(self):
        block = FencedBlock(start_line=1, terminator=b"````")
        _, _, status = block.feed_line(li("```", number=2))
        assert status is FenceStatus.OPEN
        assert block.lines == [b"```"]

    def test_text_after_terminator(self):
        block = FencedBlock(start_line=1, terminator=b"```")
        col, warns, status = block.feed_line(li("``` hi  ", number=2, name="extra.md"))
        assert status is FenceStatus.OPEN
        assert col == 9
        assert block.is_open
        assert block.lines == [b"``` hi  "]
        assert as_strings(warns) == [
            "syntax at extra.md:2:4: text after the end fence mark, try splitting the line here. "
            "If you want to include this line in the block, add marks to the start and end "
            "fences, or flip between backticks ` and tildes ~.\n\n\t``` hi  \n\t   ^    ",
        ]

    def test_whole_block(self):
        lines = ["  ```json", "  {", '    "a": 1', "  }", "  ```"]
        block, _, _, status = open_fence(li(lines[0]))
        assert status is FenceStatus.OPEN
        for number, text in enumerate(lines[1:], start=2):
            _, _, status = block.feed_line(li(text, number=number))
        assert status is FenceStatus.CLOSED
        assert (block.start_line, block.end_line) == (1, 5)
        assert block.info == b"json"
        assert block.content() == b'{\n  "a": 1\n}\n'
