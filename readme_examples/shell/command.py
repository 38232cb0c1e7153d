"""
Shell command lines: `[KEY=VALUE ...] name [arg ...]`.

A parsed Command runs against a small built-in library (see shell.env).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from readme_examples.parsing import (
    Failed,
    LineInfo,
    Matched,
    NoMatch,
    ParseResult,
    fail_at,
    skip_blanks,
)
from readme_examples.shell.env import Env, ExitCode, UnknownCommandError
from readme_examples.shell.filesystem import MemoryFS, OverlayFS
from readme_examples.shell.identifier import Vars, parse_assignment
from readme_examples.shell.inline_file import InlineFile, parse_inline_file
from readme_examples.shell.strings import format_string, parse_shell_string


@dataclass
class Command:
    """
    One simple command.

    Attributes:
        name: Command name
        col: 1-based column of the name, after any assignments
        envs: Assignments written before the name
        args: Arguments; an inline file argument holds the file's name
        inline_files: Process substitutions among the arguments
        files: Output of the inline files, keyed by their names
    """
    name: str = ""
    col: int = 0
    envs: Vars = field(default_factory=Vars)
    args: list[str] = field(default_factory=list)
    inline_files: list[InlineFile] = field(default_factory=list)
    files: MemoryFS = field(default_factory=MemoryFS)

    def __str__(self) -> str:
        parts: list[str] = []
        if self.envs:
            parts.append(str(self.envs))
        parts.append(format_string(self.name))

        by_name = {f.name: f for f in self.inline_files}
        for arg in self.args:
            inline_file = by_name.get(arg)
            parts.append(str(inline_file) if inline_file else format_string(arg))
        return " ".join(parts)

    def run(self, env: Env) -> tuple[int, Exception | None]:
        """
        Run the command in env.

        The command's own assignments are layered over env.vars and its
        inline files over env.files; env itself is left untouched.
        """
        try:
            func = env.lookup_command(self.name)
        except UnknownCommandError as e:
            return ExitCode.COMMAND_NOT_FOUND, e

        run_env = env.child()
        run_env.col = self.col
        run_env.vars.update(self.envs)
        if len(self.files):
            run_env.files = OverlayFS([self.files, env.files])

        return func(run_env, list(self.args)), None


@dataclass
class ParsedArgs:
    args: list[str] = field(default_factory=list)
    inline_files: list[InlineFile] = field(default_factory=list)


def parse_command(line: LineInfo, pos: int) -> ParseResult[Command]:
    """Parse a command at pos: assignments, a name, then arguments."""
    buf = line.line
    cmd = Command()

    while pos < len(buf):
        assignment = parse_assignment(line, pos)
        if isinstance(assignment, NoMatch):
            break
        if isinstance(assignment, Failed):
            return assignment
        key, value = assignment.value
        cmd.envs[key] = value

        after = skip_blanks(buf, assignment.pos)
        if after == assignment.pos:
            return fail_at(line, assignment.pos, 0, "expected whitespace after assignment")
        pos = after

    name = parse_shell_string(line, pos)
    if isinstance(name, Failed):
        return name.with_context("error parsing command name")
    if isinstance(name, NoMatch):
        return fail_at(line, pos, 0, "expected command name")
    cmd.name = name.value
    cmd.col = pos + 1
    pos = name.pos

    parsed = parse_args(line, pos, cmd.files)
    if isinstance(parsed, Failed):
        return parsed
    if isinstance(parsed, Matched):
        cmd.args = parsed.value.args
        cmd.inline_files = parsed.value.inline_files
        pos = parsed.pos

    return Matched(cmd, pos)


def parse_args(line: LineInfo, pos: int, files: MemoryFS) -> ParseResult[ParsedArgs]:
    """
    Parse whitespace-separated arguments at pos.

    Inline files are run as they are parsed and written into files.
    A no-match means there were no arguments.
    """
    buf = line.line
    parsed = ParsedArgs()
    while pos < len(buf):
        start = skip_blanks(buf, pos)
        if start == pos:
            break

        arg = parse_shell_string(line, start)
        if isinstance(arg, Failed):
            return arg
        if isinstance(arg, Matched):
            parsed.args.append(arg.value)
            pos = arg.pos
            continue

        inline = parse_inline_file(line, start, len(parsed.inline_files) + 1, files)
        if isinstance(inline, Failed):
            return inline
        if isinstance(inline, NoMatch):
            break
        parsed.args.append(inline.value.name)
        parsed.inline_files.append(inline.value)
        pos = inline.pos

    if not parsed.args:
        return NoMatch()
    return Matched(parsed, pos)
