"""
检查结果模型 - Issues and check results
"""

from dataclasses import dataclass, field
from typing import Literal, Optional

from readme_examples.parsing import SourceSyntaxError


@dataclass
class Issue:
    """
    检查问题

    Attributes:
        severity: 严重程度 (error, warning, info)
        code: 问题代码 (如 OUTPUT_MISMATCH, QUOTED_FILE_DIFFERS)
        message: 问题描述
        file_path: 相关文件路径
        line_number: 行号
        suggestion: 修复建议
        excerpt: Annotated source line, for syntax diagnostics
    """
    severity: Literal["error", "warning", "info"]
    code: str
    message: str
    file_path: str
    line_number: int
    suggestion: Optional[str] = None
    excerpt: Optional[str] = None

    @classmethod
    def from_syntax_error(
        cls,
        err: SourceSyntaxError,
        severity: Literal["error", "warning", "info"] = "error",
        code: str = "SYNTAX_ERROR",
    ) -> "Issue":
        marked_line, marker_line = err.excerpt()
        return cls(
            severity=severity,
            code=code,
            message=err.message,
            file_path=err.file_name,
            line_number=err.line_no,
            excerpt=f"{marked_line}\n{marker_line}",
        )


@dataclass
class CheckResult:
    """
    检查结果

    Attributes:
        issues: 发现的问题列表
        stats: 统计信息
    """
    issues: list[Issue] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)

    @property
    def errors(self) -> int:
        return sum(1 for i in self.issues if i.severity == "error")

    @property
    def warnings(self) -> int:
        return sum(1 for i in self.issues if i.severity == "warning")

    def update_stats(self) -> None:
        self.stats["total_issues"] = len(self.issues)
        self.stats["errors"] = self.errors
        self.stats["warnings"] = self.warnings

    def merge(self, other: "CheckResult") -> None:
        """Add another result's issues and counters into this one."""
        self.issues.extend(other.issues)
        for key, value in other.stats.items():
            if key in ("total_issues", "errors", "warnings"):
                continue
            self.stats[key] = self.stats.get(key, 0) + value
        self.update_stats()
