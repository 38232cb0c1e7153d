"""One documented example: the files quoted before it, its command and output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from readme_examples.markdown import FencedBlock, QuotedFile
from readme_examples.parsing import Failed, LineInfo, SourceSyntaxError, skip_blanks
from readme_examples.shell import Command, parse_command

if TYPE_CHECKING:
    from readme_examples.examples.context import ReadmeContext

logger = logging.getLogger(__name__)

PROMPT = b"$ "
OUTPUT_CLIP = 20


@dataclass
class ReadmeCase:
    """
    A sample run documented in a Markdown file.

    Attributes:
        files: Files quoted before the command, by name
        command: The example command; its assignments override the
            environment of the program
        command_line_info: The line holding the command
        output: Expected output of the command
    """
    files: dict[str, QuotedFile] = field(default_factory=dict)
    command: Command = field(default_factory=Command)
    command_line_info: LineInfo = field(default_factory=LineInfo)
    output: bytes = b""

    def __str__(self) -> str:
        clip = self.output[:OUTPUT_CLIP]
        ellipsis = "..." if len(self.output) > OUTPUT_CLIP else ""
        files = "[" + " ".join(str(f) for f in self.files.values()) + "]"
        return (
            f"ReadmeCase<Files: {files}; Command: {str(self.command)!r}; "
            f"Output<{len(self.output)}>: {clip!r}{ellipsis}>"
        )

    def parse_example(self, context: "ReadmeContext", block: FencedBlock) -> bool:
        """
        Fill in the command and expected output from an example block.

        The first line must be `$ <program> ...`, and at least one line of
        output must follow.

        Returns:
            False if the block is not an example of the program

        Raises:
            SourceSyntaxError: if text follows the command on its line
        """
        lines = block.lines
        li = LineInfo(
            line=lines[0] if lines else b"",
            file_name=context.file_name,
            number=block.start_line + 1,
        )
        self.command_line_info = li
        where = f"{li.file_name}:{li.number}"
        syntax = context.config.example_syntax

        if len(lines) < 2:
            logger.debug(
                f'{where}: skipping non-example "{syntax}"-language block, '
                f"must have at least 2 lines, had {len(lines)}"
            )
            return False

        if not li.line.startswith(PROMPT):
            logger.debug(
                f'{where}: skipping non-example "{syntax}"-language block, '
                f'must have "$ " prefix'
            )
            return False

        result = parse_command(li, len(PROMPT))
        if isinstance(result, Failed):
            logger.debug(
                f'{where}: skipping non-example "{syntax}"-language block, '
                f"must contain command on first line\n{result.error}"
            )
            return False

        cmd = result.value
        if cmd.name != context.config.program:
            logger.debug(
                f'{where}: skipping non-example "{syntax}"-language block, '
                f"must be a {context.config.program} invocation"
            )
            return False

        self.command = cmd
        self.output = b"\n".join(lines[1:])

        rest = skip_blanks(li.line, result.pos)
        if rest < len(li.line):
            raise SourceSyntaxError.at(li, rest + 1, 0, "unexpected chars after command")
        return True
