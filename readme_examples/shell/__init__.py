"""
Shell Layer - 迷你 Shell 层

A tiny shell-subset parser and interpreter for documented example
commands: quoting, assignments, simple commands and `<(...)` inline files.
"""

from readme_examples.shell.command import Command, ParsedArgs, parse_args, parse_command
from readme_examples.shell.env import (
    DEFAULT_COMMANDS,
    CommandFunc,
    Env,
    ExitCode,
    UnknownCommandError,
)
from readme_examples.shell.filesystem import (
    DiskFS,
    FileSystem,
    MemoryFS,
    OverlayFS,
    OverlayLayerError,
)
from readme_examples.shell.identifier import (
    Vars,
    format_assignment,
    parse_assignment,
    parse_identifier,
)
from readme_examples.shell.inline_file import (
    Closure,
    CommandExitError,
    InlineFile,
    inline_file_name,
    parse_inline_file,
)
from readme_examples.shell.strings import (
    SPECIAL_CHARS,
    dquote_string,
    format_string,
    parse_dquote,
    parse_raw,
    parse_shell_string,
    parse_squote,
)

__all__ = [
    # strings
    "SPECIAL_CHARS",
    "parse_dquote",
    "parse_squote",
    "parse_raw",
    "parse_shell_string",
    "format_string",
    "dquote_string",
    # identifier
    "Vars",
    "parse_identifier",
    "parse_assignment",
    "format_assignment",
    # filesystem
    "FileSystem",
    "MemoryFS",
    "DiskFS",
    "OverlayFS",
    "OverlayLayerError",
    # env
    "Env",
    "ExitCode",
    "CommandFunc",
    "UnknownCommandError",
    "DEFAULT_COMMANDS",
    # command
    "Command",
    "ParsedArgs",
    "parse_command",
    "parse_args",
    # inline file
    "InlineFile",
    "Closure",
    "CommandExitError",
    "inline_file_name",
    "parse_inline_file",
]
