"""
示例验证器 - Verifies scanned examples

1. Quoted files must match the files on disk, line by line
2. Quoted JSON/YAML files must parse
3. Example commands must exit 0 and print their documented output
"""

import io
import json
import logging
from pathlib import Path
from typing import Optional

import yaml

from readme_examples.config import CheckerConfig
from readme_examples.examples.case import ReadmeCase
from readme_examples.examples.context import ReadmeContext, scan_readme, split_lines
from readme_examples.examples.result import CheckResult, Issue
from readme_examples.markdown import QuotedFile
from readme_examples.sandbox import SandboxExecutor
from readme_examples.shell import DEFAULT_COMMANDS, Env, ExitCode, MemoryFS

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


def match_ellipsis(want: str, got: str) -> bool:
    """
    Compare got against want, where each "..." in want matches any text.

    Without an ellipsis this is plain equality.
    """
    parts = want.split(ELLIPSIS)
    if len(parts) == 1:
        return want == got

    head, *middle, tail = parts
    if not got.startswith(head):
        return False
    pos = len(head)
    for part in middle:
        idx = got.find(part, pos)
        if idx < 0:
            return False
        pos = idx + len(part)
    # The tail must not overlap text already matched.
    return len(got) - pos >= len(tail) and got.endswith(tail)


def _show(line: bytes) -> str:
    return line.decode("utf-8", errors="replace")


def _syntax_issue(quoted: QuotedFile, readme_path: str) -> Optional[Issue]:
    """验证 JSON/YAML 语法"""
    if quoted.syntax == "json":
        try:
            json.loads(quoted.data)
        except json.JSONDecodeError as e:
            return Issue(
                severity="error",
                code="INVALID_JSON",
                message=f"Invalid JSON syntax in {quoted.name}: {e.msg}",
                file_path=readme_path,
                line_number=quoted.block.start_line + e.lineno,
                suggestion="Fix the JSON syntax error",
            )
    elif quoted.syntax in ("yaml", "yml"):
        try:
            yaml.safe_load(quoted.data)
        except yaml.YAMLError as e:
            line_num = quoted.block.start_line + 1
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                line_num += mark.line
            return Issue(
                severity="error",
                code="INVALID_YAML",
                message=f"Invalid YAML syntax in {quoted.name}: {str(e)[:100]}",
                file_path=readme_path,
                line_number=line_num,
                suggestion="Fix the YAML syntax error",
            )
    return None


def check_quoted_file(quoted: QuotedFile, context: ReadmeContext) -> list[Issue]:
    """Compare one quoted file with its counterpart on disk."""
    issues: list[Issue] = []
    readme_path = context.file_name
    start = quoted.block.start_line

    syntax_issue = _syntax_issue(quoted, readme_path)
    if syntax_issue:
        issues.append(syntax_issue)

    try:
        with context.open(quoted.name) as f:
            disk_lines = split_lines(f.read())
    except FileNotFoundError:
        issues.append(Issue(
            severity="error",
            code="QUOTED_FILE_MISSING",
            message=f"Quoted file not found: {quoted.name}",
            file_path=readme_path,
            line_number=quoted.name_position.line_number,
            suggestion=f"Create {quoted.name} or fix the name above the block",
        ))
        return issues
    except PermissionError as e:
        issues.append(Issue(
            severity="error",
            code="QUOTED_FILE_UNREADABLE",
            message=f"Cannot read quoted file {quoted.name}: {e}",
            file_path=readme_path,
            line_number=quoted.name_position.line_number,
            suggestion=f"Quote files from inside {context.base_dir}",
        ))
        return issues
    except OSError as e:
        issues.append(Issue(
            severity="error",
            code="QUOTED_FILE_UNREADABLE",
            message=f"Cannot read quoted file {quoted.name}: {e}",
            file_path=readme_path,
            line_number=quoted.name_position.line_number,
        ))
        return issues

    # A closed block ends with an empty line standing for the final newline.
    quoted_lines = split_lines(quoted.data)
    for i, quoted_line in enumerate(quoted_lines, start=1):
        if i > len(disk_lines):
            issues.append(Issue(
                severity="error",
                code="QUOTED_FILE_DIFFERS",
                message=(
                    f"file at {quoted.name}:{len(disk_lines)} ran out of lines "
                    f"before fence block at {readme_path}:{start + i}"
                ),
                file_path=readme_path,
                line_number=start + i,
                suggestion=f"Remove the extra lines from the block or add them to {quoted.name}",
            ))
            return issues
        disk_line = disk_lines[i - 1]
        if disk_line != quoted_line:
            issues.append(Issue(
                severity="error",
                code="QUOTED_FILE_DIFFERS",
                message=(
                    f"found difference at -\nread {quoted.name}:{i}:\n{_show(disk_line)}\n"
                    f"fence block line at {readme_path}:{start + i}:\n{_show(quoted_line)}"
                ),
                file_path=readme_path,
                line_number=start + i,
                suggestion=f"Copy {quoted.name} into the block again",
            ))
            return issues

    if len(disk_lines) > len(quoted_lines):
        n = len(quoted_lines)
        issues.append(Issue(
            severity="error",
            code="QUOTED_FILE_DIFFERS",
            message=(
                f"fence block at {readme_path}:{start + n} ran out of lines "
                f"before file at {quoted.name}:{n + 1}"
            ),
            file_path=readme_path,
            line_number=start + n,
            suggestion=f"Copy the rest of {quoted.name} into the block",
        ))
    return issues


def check_quoted_files(case: ReadmeCase, context: ReadmeContext) -> list[Issue]:
    """Compare every file quoted by case with the file on disk."""
    issues: list[Issue] = []
    for name in sorted(case.files):
        issues.extend(check_quoted_file(case.files[name], context))
    return issues


def check_command_output(
    case: ReadmeCase,
    cases_so_far: list[ReadmeCase],
    runner: SandboxExecutor,
) -> list[Issue]:
    """
    Run an example and compare its output with the documented output.

    The command sees every file quoted so far in the document. Built-in
    commands are available next to the program under test.
    """
    readme_path = case.command_line_info.file_name
    line_number = case.command_line_info.number

    files = MemoryFS()
    for c in cases_so_far:
        for name, quoted in c.files.items():
            files.write(name, quoted.data)

    library = dict(DEFAULT_COMMANDS)
    library[runner.config.program] = runner.as_command()

    output = io.BytesIO()
    env = Env(
        line_info=case.command_line_info,
        col=case.command.col,
        files=files,
        library=library,
        stdout=output,
        stderr=output,
    )
    logger.debug(f"{readme_path}:{line_number}: running {case.command}")
    code, err = case.command.run(env)
    got = output.getvalue().decode("utf-8", errors="replace")

    issues: list[Issue] = []
    if err is not None:
        issues.append(Issue(
            severity="error",
            code="EXAMPLE_FAILED",
            message=f"{case.command}: {err}",
            file_path=readme_path,
            line_number=line_number,
        ))
    elif code != ExitCode.OK:
        issues.append(Issue(
            severity="error",
            code="EXAMPLE_EXIT_CODE",
            message=f"{case.command}: exited with code {int(code)}",
            file_path=readme_path,
            line_number=line_number,
            suggestion=got.strip() or None,
        ))

    want = case.output.decode("utf-8", errors="replace")
    # The block cannot show the final newline of the output.
    if not match_ellipsis(want.rstrip("\n"), got.rstrip("\n")):
        issues.append(Issue(
            severity="error",
            code="OUTPUT_MISMATCH",
            message=f"{case.command}: output does not match the documented output",
            file_path=readme_path,
            line_number=line_number + 1,
            suggestion=f"Actual output:\n{got}",
        ))
    return issues


def check_readme(
    path: Path,
    config: Optional[CheckerConfig] = None,
    runner: Optional[SandboxExecutor] = None,
) -> CheckResult:
    """
    Scan a Markdown file and verify its examples.

    Args:
        path: Markdown file
        config: Checker configuration
        runner: Runner for the program; examples are not run without one

    Returns:
        CheckResult with all issues found
    """
    config = config or CheckerConfig()
    result = CheckResult()
    readme_path = str(path)

    try:
        scan = scan_readme(path, config)
    except OSError as e:
        logger.warning(f"Failed to read {path}: {e}")
        result.issues.append(Issue(
            severity="error",
            code="UNREADABLE",
            message=f"Failed to read {readme_path}: {e}",
            file_path=readme_path,
            line_number=0,
        ))
        result.update_stats()
        return result

    result.issues.extend(
        Issue.from_syntax_error(w, severity="warning", code="MARKDOWN_WARNING")
        for w in scan.warnings
    )
    summary = scan.warnings.build()
    if summary is not None:
        logger.info(f"{readme_path}: {summary}")
    result.issues.extend(Issue.from_syntax_error(e) for e in scan.errors)

    quoted_files = 0
    for i, case in enumerate(scan.cases):
        quoted_files += len(case.files)
        result.issues.extend(check_quoted_files(case, scan.context))
        if runner is not None:
            result.issues.extend(check_command_output(case, scan.cases[:i + 1], runner))

    # Files quoted after the last example still have to match the disk.
    trailing = scan.context.progress_case
    quoted_files += len(trailing.files)
    result.issues.extend(check_quoted_files(trailing, scan.context))

    result.stats["documents"] = 1
    result.stats["examples"] = len(scan.cases)
    result.stats["quoted_files"] = quoted_files
    result.update_stats()
    return result

