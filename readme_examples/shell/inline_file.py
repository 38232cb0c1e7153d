"""
Process substitution: `<( cmd; cmd )` as a command argument.

The sub-commands run while the argument is parsed. Their combined
stdout and stderr become a synthetic file, and the argument's value is
that file's name.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, BinaryIO

from readme_examples.parsing import (
    Failed,
    LineInfo,
    Matched,
    NoMatch,
    ParseResult,
    SourceSyntaxError,
    fail_at,
    skip_blanks,
)
from readme_examples.shell.env import Env, ExitCode
from readme_examples.shell.filesystem import MemoryFS
from readme_examples.shell.identifier import Vars

if TYPE_CHECKING:
    from readme_examples.shell.command import Command

logger = logging.getLogger(__name__)

INLINE_FILE_PREFIX = b"<("


def inline_file_name(file_id: int) -> str:
    return f"tmp/inlineFile{file_id:02d}"


class CommandExitError(Exception):
    """A sub-command of an inline file exited with a non-zero code."""

    def __init__(self, code: int, cause: BaseException | None = None):
        if cause is None:
            message = f"exited with code {int(code)}"
        else:
            message = f"{cause} - exited with code {int(code)}"
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause


@dataclass
class Closure:
    """A parsed command bound to the column it was written at."""
    command: "Command"
    col: int = 0


@dataclass
class InlineFile:
    """A process substitution and the name of the file it produced."""
    name: str = ""
    line_info: LineInfo = field(default_factory=LineInfo)
    closures: list[Closure] = field(default_factory=list)

    def __str__(self) -> str:
        return "<(" + "; ".join(str(c.command) for c in self.closures) + ")"

    def run(
        self,
        stdout: BinaryIO,
        stderr: BinaryIO,
        env: Env | None = None,
    ) -> tuple[int, SourceSyntaxError | None]:
        """
        Run the sub-commands in order against one shared Env.

        Returns:
            (code, error). Stops at the first non-zero exit, with an
            error pointing at that command's name.
        """
        if env is None:
            env = Env(line_info=self.line_info, vars=Vars())
        env.stdout = stdout
        env.stderr = stderr

        for closure in self.closures:
            env.col = closure.col
            code, err = closure.command.run(env)
            env.vars["?"] = str(int(code))
            if code != ExitCode.OK:
                return code, SourceSyntaxError.at(
                    self.line_info, closure.col, 0, CommandExitError(code, err),
                )
        return ExitCode.OK, None


def parse_inline_file(
    line: LineInfo,
    pos: int,
    file_id: int,
    files: MemoryFS,
) -> ParseResult[InlineFile]:
    """
    Parse `<(...)` at pos, run it and store its output in files.

    Grammar inside the parens: one or more commands separated by ';',
    with an optional trailing ';'. Whitespace between tokens is skipped.
    """
    # parse_command parses inline files as arguments
    from readme_examples.shell.command import parse_command

    buf = line.line
    if not buf.startswith(INLINE_FILE_PREFIX, pos):
        return NoMatch()

    cursor = skip_blanks(buf, pos + len(INLINE_FILE_PREFIX))
    if buf.startswith(b")", cursor):
        # bash reads `<( )` as nothing at all; in an example it is a mistake.
        return fail_at(line, pos, cursor + 1 - pos, "inline file with no commands")

    inline_file = InlineFile(name=inline_file_name(file_id), line_info=line)
    while True:
        result = parse_command(line, cursor)
        if isinstance(result, Failed):
            if result.error.col_start == cursor + 1:
                # nothing at the cursor reads as a command
                return fail_at(line, cursor, 0, "expected a command")
            return result
        cmd = result.value
        inline_file.closures.append(Closure(command=cmd, col=cmd.col))
        cursor = skip_blanks(buf, result.pos)

        ended = False
        if buf.startswith(b";", cursor):
            ended = True
            cursor = skip_blanks(buf, cursor + 1)

        if buf.startswith(b")", cursor):
            cursor += 1
            break

        if cursor >= len(buf):
            return fail_at(
                line, cursor, 0,
                "unexpected end when building inline file, expected ')'",
            )
        if not ended:
            return fail_at(
                line, cursor, 0,
                "expected command termination (e.g. ';') between commands "
                "when building inline file",
            )

    output = io.BytesIO()
    code, err = inline_file.run(output, output)
    if err is not None:
        return Failed(err)

    files.write(inline_file.name, output.getvalue())
    logger.debug(
        f"{line.file_name}:{line.number}: wrote {len(output.getvalue())} bytes "
        f"to {inline_file.name}"
    )
    return Matched(inline_file, cursor)
