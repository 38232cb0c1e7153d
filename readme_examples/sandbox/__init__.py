"""Sandbox execution module.

Runs the program under test in a scratch directory holding the files
quoted by the documentation.
"""

from readme_examples.sandbox.executor import (
    ExecutionResult,
    ExecutionStatus,
    SandboxConfig,
    SandboxExecutor,
)

__all__ = [
    "ExecutionResult",
    "ExecutionStatus",
    "SandboxConfig",
    "SandboxExecutor",
]
