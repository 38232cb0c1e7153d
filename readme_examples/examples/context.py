"""
README 扫描器 - Line-by-line scan of a Markdown document

Collects every fenced block and turns the interesting ones into
ReadmeCases: quoted files accumulate until an example command closes
the case.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional

from readme_examples.config import CheckerConfig
from readme_examples.examples.case import ReadmeCase
from readme_examples.markdown import (
    FencedBlock,
    FenceStatus,
    QuotedFile,
    open_fence,
    trim_space,
)
from readme_examples.parsing import LineInfo, SourceSyntaxError
from readme_examples.shell import DiskFS
from readme_examples.warning import Warnings

logger = logging.getLogger(__name__)

SUMMARY_OPEN = b"<summary>"
SUMMARY_CLOSE = b"</summary>"


def split_lines(data: bytes) -> list[bytes]:
    """Split into lines without their endings; a final newline adds no empty line."""
    lines = data.split(b"\n")
    if lines and lines[-1] == b"":
        lines.pop()
    return [line[:-1] if line.endswith(b"\r") else line for line in lines]


class ReadmeContext:
    """
    Scan state for one Markdown document.

    Attributes:
        file_name: Name used in diagnostics
        config: Checker configuration
        base_dir: Directory quoted file names are relative to
        files: Disk view of base_dir that quoted files are read through
        line_number: Number of the last line fed
        last_nonempty_line: Latest prose line, a candidate file name
        cases: Completed examples, in document order
        progress_case: The case collecting quoted files
        progress_block: The fenced block being read, if any
    """

    def __init__(
        self,
        file_name: str,
        config: Optional[CheckerConfig] = None,
        base_dir: Optional[Path] = None,
    ):
        self.file_name = file_name
        self.config = config or CheckerConfig()
        self.base_dir = base_dir if base_dir is not None else Path(file_name).parent
        self.files = DiskFS(self.base_dir)
        self.line_number = 0
        self.last_nonempty_line: Optional[LineInfo] = None
        self.cases: list[ReadmeCase] = []
        self.progress_case = ReadmeCase()
        self.progress_block: Optional[FencedBlock] = None

    def open(self, name: str) -> BinaryIO:
        """Open a file named by the document; names may not leave base_dir."""
        return self.files.open(name)

    def feed(self, line: bytes) -> tuple[Warnings, list[SourceSyntaxError]]:
        """
        Process the next line of the document, without its line ending.

        Returns:
            (warnings, errors) found on this line
        """
        self.line_number += 1
        li = LineInfo(line=line, file_name=self.file_name, number=self.line_number)
        warns = Warnings()
        errors: list[SourceSyntaxError] = []

        if self.progress_block is None:
            self.progress_block, _, sub_warns, status = open_fence(li)
        else:
            _, sub_warns, status = self.progress_block.feed_line(li)
        warns.extend(sub_warns)

        if status is FenceStatus.CLOSED:
            sub_warns, err = self._finish_block(self.progress_block)
            warns.extend(sub_warns)
            if err is not None:
                errors.append(err)
        elif status is FenceStatus.NO_MATCH:
            if trim_space(line):
                self.last_nonempty_line = li
            elif (
                self.last_nonempty_line is not None
                and li.number - self.last_nonempty_line.number >= self.config.max_memory_lines
            ):
                self.last_nonempty_line = None

        return warns, errors

    def finish(self) -> tuple[Warnings, list[SourceSyntaxError]]:
        """End the document. A block still open is closed by the end of the document."""
        if self.progress_block is None:
            return Warnings(), []
        logger.debug(
            f"{self.file_name}:{self.progress_block.start_line}: "
            f"fenced block closed by the end of the document"
        )
        warns, err = self._finish_block(self.progress_block)
        return warns, [err] if err is not None else []

    def _finish_block(self, block: FencedBlock) -> tuple[Warnings, Optional[SourceSyntaxError]]:
        warns = Warnings()
        info = trim_space(block.info)
        syntax = info.split(b" ", 1)[0].decode("utf-8", errors="replace")
        try:
            if syntax == self.config.example_syntax:
                case = self.progress_case
                if case.parse_example(self, block):
                    self.cases.append(case)
                    self.progress_case = ReadmeCase()
            elif syntax in self.config.content_syntaxes:
                self._quote_file(block, syntax)
            else:
                logger.debug(f"{self.file_name}:{block.start_line}: skipping {syntax!r}-language block")
        except SourceSyntaxError as e:
            return warns, e
        finally:
            self.progress_block = None
            self.last_nonempty_line = None
        return warns, None

    def _quote_file(self, block: FencedBlock, syntax: str) -> None:
        label = self.last_nonempty_line
        if label is None:
            logger.debug(
                f"{self.file_name}:{block.start_line}: skipping un-sourced "
                f"{syntax!r}-language block"
            )
            return

        want_ext = self.config.content_syntaxes[syntax]
        fname = trim_space(label.line).rstrip(b" \t")
        fname_col = 1 + len(label.line) - len(trim_space(label.line))
        if fname.startswith(SUMMARY_OPEN):
            fname = fname[len(SUMMARY_OPEN):]
            fname_col += len(SUMMARY_OPEN)
            if not fname.endswith(SUMMARY_CLOSE):
                shown = fname.decode("utf-8", errors="replace")
                raise SourceSyntaxError.at(
                    label, fname_col, fname_col + max(len(fname), 1) - 1,
                    f"missing </summary> tag: {shown} "
                    f"(from {self.file_name}:{label.number})",
                )
            fname = fname[:-len(SUMMARY_CLOSE)]

        name = fname.decode("utf-8", errors="replace")
        if not name.endswith(want_ext):
            logger.debug(
                f"{self.file_name}:{block.start_line}: skipping likely non-file, "
                f"as the line before is missing the extension {want_ext!r}: {name!r}"
            )
            return

        self.progress_case.files[name] = QuotedFile(
            name=name,
            name_position=label.position(fname_col),
            block=block,
            data=block.content(),
            syntax=syntax,
        )


@dataclass
class ReadmeScan:
    """Everything found in one document."""
    context: ReadmeContext
    warnings: Warnings = field(default_factory=Warnings)
    errors: list[SourceSyntaxError] = field(default_factory=list)

    @property
    def cases(self) -> list[ReadmeCase]:
        return self.context.cases


def scan_lines(
    data: bytes,
    file_name: str,
    config: Optional[CheckerConfig] = None,
    base_dir: Optional[Path] = None,
) -> ReadmeScan:
    """Scan the Markdown in data."""
    scan = ReadmeScan(context=ReadmeContext(file_name, config, base_dir))
    for line in split_lines(data):
        warns, errors = scan.context.feed(line)
        scan.warnings.extend(warns)
        scan.errors.extend(errors)
    warns, errors = scan.context.finish()
    scan.warnings.extend(warns)
    scan.errors.extend(errors)
    return scan


def scan_readme(path: Path, config: Optional[CheckerConfig] = None) -> ReadmeScan:
    """
    Read and scan a Markdown file.

    Raises:
        OSError: if the file cannot be read
    """
    logger.debug(f"Scanning {path}")
    return scan_lines(path.read_bytes(), str(path), config, path.parent)
