"""Tests for scanning Markdown documents and checking their examples."""

import logging

import pytest

from readme_examples.config import CheckerConfig
from readme_examples.examples import (
    CheckResult,
    Issue,
    ReadmeContext,
    check_quoted_files,
    check_readme,
    match_ellipsis,
    scan_lines,
    split_lines,
)
from readme_examples.parsing import LineInfo, SourceSyntaxError
from readme_examples.sandbox import (
    ExecutionResult,
    ExecutionStatus,
    SandboxConfig,
    SandboxExecutor,
)

FENCE = "```"


def doc(*lines: str) -> bytes:
    return ("\n".join(lines) + "\n").encode("utf-8")


def first_line(err) -> str:
    return str(err).split("\n", 1)[0]


class FakeExecutor(SandboxExecutor):
    """Stands in for the program: prints the files named by its arguments."""

    def __init__(self, exit_code=0):
        super().__init__(SandboxConfig(program="hebcalfmt"))
        self.exit_code = exit_code
        self.calls = []

    def run(self, args, fs=None, env_vars=None):
        self.calls.append((list(args), dict(env_vars or {})))
        out = b"".join(fs.open(a).read() for a in args)
        return ExecutionResult(
            command=[self.config.program, *args],
            exit_code=self.exit_code,
            stdout=out,
            stderr=b"",
            duration_ms=0,
            status=ExecutionStatus.SUCCESS if self.exit_code == 0 else ExecutionStatus.FAILED,
        )


class TestSplitLines:
    """Test line splitting."""

    @pytest.mark.parametrize("data,want", [
        (b"", []),
        (b"a", [b"a"]),
        (b"a\n", [b"a"]),
        (b"a\r\nb\r\n", [b"a", b"b"]),
        (b"a\n\n", [b"a", b""]),
    ])
    def test_split(self, data, want):
        assert split_lines(data) == want


class TestMatchEllipsis:
    """Test output comparison with ... wildcards."""

    @pytest.mark.parametrize("want,got,ok", [
        ("exact", "exact", True),
        ("exact", "exactly", False),
        ("a...c", "abbbc", True),
        ("a...c", "ac", True),
        ("a...c", "ab", False),
        ("...", "anything", True),
        ("start...", "start and more", True),
        ("...end", "the end", True),
        ("a...b...c", "a1b2c", True),
        ("a...b...c", "a1c2b", False),
        ("ab...ba", "aba", False),
        ("line 1\n...\nline 9", "line 1\nline 2\nline 9", True),
    ])
    def test_match(self, want, got, ok):
        assert match_ellipsis(want, got) is ok


class TestScan:
    """Test collecting cases from a document."""

    def test_quoted_file_then_example(self):
        scan = scan_lines(doc(
            "# Demo",
            "",
            "config.json",
            "",
            FENCE + "json",
            '{"a": 1}',
            FENCE,
            "",
            FENCE + "bash",
            "$ hebcalfmt config.json",
            "hello",
            FENCE,
        ), "README.md")
        assert list(scan.warnings) == []
        assert scan.errors == []
        assert len(scan.cases) == 1

        case = scan.cases[0]
        assert case.command.name == "hebcalfmt"
        assert case.command.args == ["config.json"]
        assert case.command.col == 3
        assert case.command_line_info.number == 10
        assert case.output == b"hello\n"

        quoted = case.files["config.json"]
        assert quoted.data == b'{"a": 1}\n'
        assert quoted.syntax == "json"
        assert quoted.name_position.line_number == 3
        assert quoted.name_position.col == 1
        assert str(quoted) == "QuotedFile<config.json, type json, size 9>"

        assert scan.context.progress_case.files == {}

    def test_label_expires(self):
        scan = scan_lines(doc("config.txt", "", "", FENCE + "text", "x", FENCE), "README.md")
        assert scan.context.progress_case.files == {}

    def test_label_survives_one_blank_line(self):
        scan = scan_lines(doc("config.txt", "", FENCE + "text", "x", FENCE), "README.md")
        assert list(scan.context.progress_case.files) == ["config.txt"]

    def test_label_must_have_extension(self):
        scan = scan_lines(doc("Some notes:", FENCE + "text", "x", FENCE), "README.md")
        assert scan.context.progress_case.files == {}

    def test_block_text_is_not_a_label(self):
        scan = scan_lines(doc(FENCE, "file.txt", FENCE, FENCE + "text", "x", FENCE), "README.md")
        assert scan.context.progress_case.files == {}

    def test_summary_label(self):
        scan = scan_lines(doc(
            "<details>",
            "  <summary>data.txt</summary>",
            "",
            FENCE + "text",
            "x",
            FENCE,
        ), "README.md")
        quoted = scan.context.progress_case.files["data.txt"]
        assert quoted.name_position.line_number == 2
        assert quoted.name_position.col == 12

    def test_summary_missing_close_tag(self):
        scan = scan_lines(doc("<summary>data.txt", FENCE + "text", "x", FENCE), "doc.md")
        assert len(scan.errors) == 1
        assert first_line(scan.errors[0]) == (
            "syntax at doc.md:1:10-17: missing </summary> tag: data.txt (from doc.md:1)"
        )

    def test_unknown_language_skipped(self):
        scan = scan_lines(doc("main.py", FENCE + "python", "print()", FENCE), "README.md")
        assert scan.context.progress_case.files == {}
        assert scan.cases == []

    def test_custom_content_syntax(self):
        config = CheckerConfig(content_syntaxes={"yaml": ".yaml"})
        scan = scan_lines(doc("ci.yaml", FENCE + "yaml", "a: 1", FENCE), "README.md", config)
        assert list(scan.context.progress_case.files) == ["ci.yaml"]

    @pytest.mark.parametrize("block", [
        [FENCE + "bash", FENCE],
        [FENCE + "bash", "hebcalfmt", "out", FENCE],
        [FENCE + "bash", "$ other-tool", "out", FENCE],
        [FENCE + "bash", "$ 'open", "out", FENCE],
        [FENCE + "sh", "$ hebcalfmt", "out", FENCE],
    ])
    def test_not_an_example(self, block):
        scan = scan_lines(doc(*block), "README.md")
        assert scan.cases == []
        assert scan.errors == []

    def test_other_program(self):
        config = CheckerConfig(program="mytool", example_syntax="console")
        scan = scan_lines(doc(FENCE + "console", "$ mytool -v", "1.0", FENCE), "README.md", config)
        assert [c.command.args for c in scan.cases] == [["-v"]]

    def test_unexpected_chars_after_command(self):
        scan = scan_lines(doc(FENCE + "bash", "$ hebcalfmt a | cat", "out", FENCE), "doc.md")
        assert scan.cases == []
        assert len(scan.errors) == 1
        assert first_line(scan.errors[0]) == "syntax at doc.md:2:15: unexpected chars after command"

    def test_inline_file_in_example(self):
        scan = scan_lines(doc(FENCE + "bash", "$ hebcalfmt <(echo hi)", "hi", FENCE), "README.md")
        cmd = scan.cases[0].command
        assert cmd.args == ["tmp/inlineFile01"]
        assert cmd.files.files == {"tmp/inlineFile01": b"hi\n"}

    def test_files_reset_after_each_example(self):
        scan = scan_lines(doc(
            "a.txt",
            FENCE + "text",
            "A",
            FENCE,
            FENCE + "bash",
            "$ hebcalfmt a.txt",
            "A",
            FENCE,
            "b.txt",
            FENCE + "text",
            "B",
            FENCE,
            FENCE + "bash",
            "$ hebcalfmt b.txt",
            "B",
            FENCE,
        ), "README.md")
        assert [list(c.files) for c in scan.cases] == [["a.txt"], ["b.txt"]]

    def test_fence_warnings_collected(self):
        scan = scan_lines(doc("```inline```"), "README.md")
        assert len(scan.warnings) == 1

    def test_block_closed_by_end_of_document(self):
        scan = scan_lines(b"config.txt\n```text\na\nb", "README.md")
        quoted = scan.context.progress_case.files["config.txt"]
        assert quoted.data == b"a\nb"
        assert scan.context.progress_block is None


@pytest.fixture
def project(tmp_path):
    def write(readme: bytes, **files: str):
        for name, content in files.items():
            (tmp_path / name.replace("__", ".")).write_text(content, encoding="utf-8")
        path = tmp_path / "README.md"
        path.write_bytes(readme)
        return path

    return write


def codes(result: CheckResult) -> list[str]:
    return [issue.code for issue in result.issues]


class TestQuotedFiles:
    """Test comparing quoted files with the files on disk."""

    README = doc("config.txt", FENCE + "text", "a", "b", FENCE)

    def test_match(self, project):
        result = check_readme(project(self.README, config__txt="a\nb\n"))
        assert result.issues == []
        assert result.stats["documents"] == 1
        assert result.stats["quoted_files"] == 1
        assert result.stats["examples"] == 0

    def test_missing_final_newline_still_matches(self, project):
        result = check_readme(project(self.README, config__txt="a\nb"))
        assert result.issues == []

    def test_difference(self, project):
        path = project(self.README, config__txt="a\nc\n")
        result = check_readme(path)
        assert codes(result) == ["QUOTED_FILE_DIFFERS"]
        issue = result.issues[0]
        assert issue.line_number == 4
        assert issue.message == (
            f"found difference at -\nread config.txt:2:\nc\nfence block line at {path}:4:\nb"
        )

    def test_file_shorter(self, project):
        path = project(self.README, config__txt="a\n")
        result = check_readme(path)
        assert codes(result) == ["QUOTED_FILE_DIFFERS"]
        assert result.issues[0].message == (
            f"file at config.txt:1 ran out of lines before fence block at {path}:4"
        )

    def test_file_longer(self, project):
        path = project(self.README, config__txt="a\nb\nc\n")
        result = check_readme(path)
        assert codes(result) == ["QUOTED_FILE_DIFFERS"]
        assert result.issues[0].message == (
            f"fence block at {path}:4 ran out of lines before file at config.txt:3"
        )

    def test_missing(self, project):
        result = check_readme(project(self.README))
        assert codes(result) == ["QUOTED_FILE_MISSING"]
        assert result.issues[0].line_number == 1
        assert result.errors == 1

    def test_outside_document_tree(self, tmp_path):
        (tmp_path / "outside.txt").write_text("a\nb\n")
        docs = tmp_path / "docs"
        docs.mkdir()
        path = docs / "README.md"
        path.write_bytes(doc("../outside.txt", FENCE + "text", "a", "b", FENCE))
        result = check_readme(path)
        assert codes(result) == ["QUOTED_FILE_UNREADABLE"]
        issue = result.issues[0]
        assert issue.line_number == 1
        assert "attempted access outside of" in issue.message

    def test_invalid_json(self, project):
        readme = doc("bad.json", FENCE + "json", "{", FENCE)
        result = check_readme(project(readme, bad__json="{\n"))
        assert codes(result) == ["INVALID_JSON"]

    def test_invalid_yaml(self, project):
        config = CheckerConfig(content_syntaxes={"yaml": ".yaml"})
        readme = doc("ci.yaml", FENCE + "yaml", "a: [", FENCE)
        result = check_readme(project(readme, ci__yaml="a: [\n"), config)
        assert codes(result) == ["INVALID_YAML"]

    def test_check_quoted_files_directly(self, tmp_path):
        (tmp_path / "a.txt").write_text("A\n")
        scan = scan_lines(doc("a.txt", FENCE + "text", "A", FENCE), "README.md", base_dir=tmp_path)
        context = scan.context
        assert isinstance(context, ReadmeContext)
        assert check_quoted_files(context.progress_case, context) == []

    def test_markdown_warning_reported(self, project):
        result = check_readme(project(doc("```inline```")))
        assert codes(result) == ["MARKDOWN_WARNING"]
        assert result.warnings == 1
        assert result.errors == 0
        assert result.issues[0].excerpt == "```inline```\n   ^        "

    def test_warning_summary_logged(self, project, caplog):
        with caplog.at_level(logging.INFO, logger="readme_examples.examples.checks"):
            path = project(doc("```inline```"))
            check_readme(path)
        assert f"{path}: warn: syntax at {path}:1:" in caplog.text

    def test_unreadable_document(self, tmp_path):
        result = check_readme(tmp_path / "missing.md")
        assert codes(result) == ["UNREADABLE"]


class TestCommandOutput:
    """Test running examples through a runner."""

    def readme(self, *example):
        return doc(
            "greeting.txt",
            FENCE + "text",
            "hello",
            FENCE,
            "",
            FENCE + "bash",
            *example,
            FENCE,
        )

    def test_passes(self, project):
        runner = FakeExecutor()
        path = project(self.readme("$ hebcalfmt greeting.txt", "hello"), greeting__txt="hello\n")
        result = check_readme(path, runner=runner)
        assert result.issues == []
        assert result.stats["examples"] == 1
        assert runner.calls == [(["greeting.txt"], {})]

    def test_ellipsis(self, project):
        path = project(self.readme("$ hebcalfmt greeting.txt", "he..."), greeting__txt="hello\n")
        assert check_readme(path, runner=FakeExecutor()).issues == []

    def test_mismatch(self, project):
        path = project(self.readme("$ hebcalfmt greeting.txt", "bye"), greeting__txt="hello\n")
        result = check_readme(path, runner=FakeExecutor())
        assert codes(result) == ["OUTPUT_MISMATCH"]
        issue = result.issues[0]
        assert issue.line_number == 8
        assert issue.suggestion == "Actual output:\nhello\n"

    def test_exit_code(self, project):
        path = project(self.readme("$ hebcalfmt greeting.txt", "hello"), greeting__txt="hello\n")
        result = check_readme(path, runner=FakeExecutor(exit_code=1))
        assert codes(result) == ["EXAMPLE_EXIT_CODE"]
        assert result.issues[0].message == "hebcalfmt greeting.txt: exited with code 1"

    def test_assignments_reach_program(self, project):
        runner = FakeExecutor()
        path = project(self.readme("$ TZ=UTC hebcalfmt greeting.txt", "hello"), greeting__txt="hello\n")
        assert check_readme(path, runner=runner).issues == []
        assert runner.calls == [(["greeting.txt"], {"TZ": "UTC"})]

    def test_inline_file_visible_to_program(self, project):
        path = project(self.readme("$ hebcalfmt <(echo hi)", "hi"), greeting__txt="hello\n")
        assert check_readme(path, runner=FakeExecutor()).issues == []

    def test_not_run_without_runner(self, project):
        path = project(self.readme("$ hebcalfmt greeting.txt", "bye"), greeting__txt="hello\n")
        assert check_readme(path).issues == []

    def test_earlier_files_still_visible(self, project):
        readme = doc(
            "a.txt",
            FENCE + "text",
            "A",
            FENCE,
            FENCE + "bash",
            "$ hebcalfmt a.txt",
            "A",
            FENCE,
            FENCE + "bash",
            "$ hebcalfmt a.txt",
            "A",
            FENCE,
        )
        result = check_readme(project(readme, a__txt="A\n"), runner=FakeExecutor())
        assert result.issues == []
        assert result.stats["examples"] == 2


class TestResult:
    """Test the result model."""

    def test_issue_from_syntax_error(self):
        li = LineInfo(line=b"hello world", file_name="a.md", number=3)
        issue = Issue.from_syntax_error(SourceSyntaxError.at(li, 7, 11, "bad word"))
        assert issue.severity == "error"
        assert issue.code == "SYNTAX_ERROR"
        assert issue.message == "bad word"
        assert issue.file_path == "a.md"
        assert issue.line_number == 3
        assert issue.excerpt == "hello world\n      ^^^^^"

    def test_merge(self):
        a = CheckResult(stats={"documents": 1, "examples": 2})
        b = CheckResult(
            issues=[Issue("warning", "W", "w", "b.md", 1)],
            stats={"documents": 1, "examples": 1, "errors": 5},
        )
        a.merge(b)
        assert a.stats == {
            "documents": 2,
            "examples": 3,
            "total_issues": 1,
            "errors": 0,
            "warnings": 1,
        }
