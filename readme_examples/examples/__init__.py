"""
Examples Layer - 文档示例层

Scans Markdown documents for example commands and quoted files, then
verifies them against the disk and the program under test.
"""

from readme_examples.examples.case import ReadmeCase
from readme_examples.examples.checks import (
    check_command_output,
    check_quoted_file,
    check_quoted_files,
    check_readme,
    match_ellipsis,
)
from readme_examples.examples.context import (
    ReadmeContext,
    ReadmeScan,
    scan_lines,
    scan_readme,
    split_lines,
)
from readme_examples.examples.result import CheckResult, Issue

__all__ = [
    # scanning
    "ReadmeCase",
    "ReadmeContext",
    "ReadmeScan",
    "scan_lines",
    "scan_readme",
    "split_lines",
    # checks
    "check_command_output",
    "check_quoted_file",
    "check_quoted_files",
    "check_readme",
    "match_ellipsis",
    # results
    "CheckResult",
    "Issue",
]
