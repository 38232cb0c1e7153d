"""Execution environment and the built-in command table."""

from __future__ import annotations

import io
import json
import shutil
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import BinaryIO, Callable, Optional

from readme_examples.parsing import LineInfo
from readme_examples.shell.filesystem import FileSystem, MemoryFS
from readme_examples.shell.identifier import Vars


class ExitCode(IntEnum):
    """Shell exit statuses used by the built-ins."""
    OK = 0
    ERROR = 1
    CANNOT_EXECUTE = 126
    COMMAND_NOT_FOUND = 127


class UnknownCommandError(Exception):
    """The command name is not in the environment's library."""

    def __init__(self, name: str):
        super().__init__(f"unknown command: {json.dumps(name, ensure_ascii=False)}")
        self.name = name


CommandFunc = Callable[["Env", list[str]], int]


@dataclass
class Env:
    """
    Context a command runs in.

    Attributes:
        line_info: Line the command came from, for diagnostics
        col: Column of the command name (not of leading assignments)
        vars: Variables visible to the command
        files: Filesystem the command reads from
        library: Available commands; None means DEFAULT_COMMANDS
        stdout: Binary sink for output
        stderr: Binary sink for errors
    """
    line_info: LineInfo = field(default_factory=LineInfo)
    col: int = 0
    vars: Vars = field(default_factory=Vars)
    files: FileSystem = field(default_factory=MemoryFS)
    library: Optional[dict[str, CommandFunc]] = None
    stdout: BinaryIO = field(default_factory=io.BytesIO)
    stderr: BinaryIO = field(default_factory=io.BytesIO)

    def lookup_command(self, name: str) -> CommandFunc:
        library = self.library if self.library is not None else DEFAULT_COMMANDS
        try:
            return library[name]
        except KeyError:
            raise UnknownCommandError(name) from None

    def child(self, col_offset: int = 0) -> "Env":
        """A copy whose variables can change without touching this Env."""
        return replace(self, vars=Vars(self.vars), col=self.col + col_offset)

    def write_out(self, text: str) -> None:
        self.stdout.write(text.encode("utf-8"))

    def write_err(self, text: str) -> None:
        self.stderr.write(text.encode("utf-8"))


def cat(env: Env, args: list[str]) -> int:
    """Copy each named file to stdout."""
    code = ExitCode.OK
    for path in args:
        try:
            f = env.files.open(path)
        except FileNotFoundError:
            env.write_err(f"cat: {path}: No such file or directory\n")
            code = ExitCode.ERROR
            continue
        except OSError as e:
            env.write_err(f"cat: {path}: {e}\n")
            code = ExitCode.ERROR
            continue

        with f:
            try:
                shutil.copyfileobj(f, env.stdout)
            except OSError as e:
                env.write_err(f"cat: {path}: {e}\n")
                code = ExitCode.ERROR
    return code


def echo(env: Env, args: list[str]) -> int:
    """Write the arguments joined by single spaces, then a newline."""
    env.write_out(" ".join(args) + "\n")
    return ExitCode.OK


def false(env: Env, args: list[str]) -> int:
    return ExitCode.ERROR


def true(env: Env, args: list[str]) -> int:
    return ExitCode.OK


DEFAULT_COMMANDS: dict[str, CommandFunc] = {
    "cat": cat,
    "echo": echo,
    "false": false,
    "true": true,
}
