"""Sandboxed runner for the program under test.

Documented examples read files that only exist in the Markdown. Before
running the real program, those files are written into a scratch
directory which becomes its working directory.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
import os
from pathlib import Path, PurePosixPath
import shutil
import subprocess
import tempfile
import time
from typing import Any

from readme_examples.shell.env import CommandFunc, Env, ExitCode
from readme_examples.shell.filesystem import FileSystem

logger = logging.getLogger(__name__)


class ExecutionStatus(Enum):
    """Program execution status."""
    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"


@dataclass
class ExecutionResult:
    """Result of one program run."""
    command: list[str]
    exit_code: int
    stdout: bytes
    stderr: bytes
    duration_ms: int
    status: ExecutionStatus

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "command": self.command,
            "exit_code": self.exit_code,
            "stdout": self.stdout.decode("utf-8", errors="replace"),
            "stderr": self.stderr.decode("utf-8", errors="replace"),
            "duration_ms": self.duration_ms,
            "status": self.status.value,
        }


@dataclass
class SandboxConfig:
    """Sandbox configuration."""
    program: str = "hebcalfmt"
    executable: str | None = None   # defaults to program looked up on PATH
    timeout: int = 60               # seconds
    inherit_env: bool = True
    extra_env: dict[str, str] = field(default_factory=dict)


def _is_safe_relative(path: str) -> bool:
    pure = PurePosixPath(path)
    return not pure.is_absolute() and ".." not in pure.parts


class SandboxExecutor:
    """Runs the configured executable over a materialised set of files."""

    def __init__(self, config: SandboxConfig | None = None):
        """Initialize the runner with configuration."""
        self.config = config or SandboxConfig()

    def resolve_executable(self) -> str | None:
        name = self.config.executable or self.config.program
        if os.sep in name or (os.altsep and os.altsep in name):
            return name if Path(name).exists() else None
        return shutil.which(name)

    def materialise(self, root: Path, fs: FileSystem, paths: list[str]) -> list[str]:
        """
        Copy paths readable through fs into root.

        Paths outside root and absent paths are skipped.

        Returns:
            The paths that were written
        """
        written: list[str] = []
        for path in paths:
            if not _is_safe_relative(path):
                continue
            try:
                with fs.open(path) as src:
                    data = src.read()
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Not copying {path} into the sandbox: {e}")
                continue
            target = root / path
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
            except OSError as e:
                logger.warning(f"Not copying {path} into the sandbox: {e}")
                continue
            written.append(path)
        return written

    def run(
        self,
        args: list[str],
        fs: FileSystem | None = None,
        env_vars: dict[str, str] | None = None,
    ) -> ExecutionResult:
        """
        Run the program with args.

        Every file fs can list is written into the working directory,
        then any argument naming a file readable through fs.

        Args:
            args: Arguments after the program name
            fs: Filesystem the example command sees
            env_vars: Variable assignments written before the command

        Returns:
            ExecutionResult with the captured output
        """
        command = [self.config.program, *args]
        executable = self.resolve_executable()
        if executable is None:
            return ExecutionResult(
                command=command,
                exit_code=ExitCode.COMMAND_NOT_FOUND,
                stdout=b"",
                stderr=f"{self.config.program}: executable not found\n".encode("utf-8"),
                duration_ms=0,
                status=ExecutionStatus.NOT_FOUND,
            )

        environ = dict(os.environ) if self.config.inherit_env else {}
        environ.update(self.config.extra_env)
        environ.update(env_vars or {})

        start_time = time.time()
        with tempfile.TemporaryDirectory(prefix="readme-examples-") as tmp:
            root = Path(tmp)
            if fs is not None:
                listed = fs.paths() if hasattr(fs, "paths") else []
                self.materialise(root, fs, [*listed, *args])

            logger.debug(f"Running {command} in {root}")
            try:
                result = subprocess.run(
                    [executable, *args],
                    cwd=root,
                    env=environ,
                    capture_output=True,
                    timeout=self.config.timeout,
                )
            except subprocess.TimeoutExpired:
                duration_ms = int((time.time() - start_time) * 1000)
                return ExecutionResult(
                    command=command,
                    exit_code=-1,
                    stdout=b"",
                    stderr=f"Command timed out after {self.config.timeout} seconds\n".encode("utf-8"),
                    duration_ms=duration_ms,
                    status=ExecutionStatus.TIMEOUT,
                )
            except OSError as e:
                duration_ms = int((time.time() - start_time) * 1000)
                return ExecutionResult(
                    command=command,
                    exit_code=ExitCode.CANNOT_EXECUTE,
                    stdout=b"",
                    stderr=f"{e}\n".encode("utf-8"),
                    duration_ms=duration_ms,
                    status=ExecutionStatus.FAILED,
                )

        duration_ms = int((time.time() - start_time) * 1000)
        status = ExecutionStatus.SUCCESS if result.returncode == 0 else ExecutionStatus.FAILED
        return ExecutionResult(
            command=command,
            exit_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            duration_ms=duration_ms,
            status=status,
        )

    def as_command(self) -> CommandFunc:
        """Adapt this runner to a shell built-in bound to the program name."""

        def run_program(env: Env, args: list[str]) -> int:
            # Special parameters such as "?" are not exported.
            exported = {k: v for k, v in env.vars.items() if k.isidentifier()}
            result = self.run(args, fs=env.files, env_vars=exported)
            env.stdout.write(result.stdout)
            env.stderr.write(result.stderr)
            return result.exit_code

        return run_program
