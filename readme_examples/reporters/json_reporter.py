"""
JSON 报告器 - 输出 JSON 格式报告

Issues are listed in check order; `by_code` counts them per issue code
so CI jobs can gate on specific problems.
"""

import json
import sys
from collections import Counter
from dataclasses import asdict
from typing import Any, TextIO

from readme_examples.examples.result import CheckResult


class JsonReporter:
    """JSON 报告器"""

    def __init__(self, output: TextIO | None = None):
        self.output = output or sys.stdout

    def build(self, result: CheckResult, target: str) -> dict[str, Any]:
        by_code = Counter(issue.code for issue in result.issues)
        return {
            "target": target,
            "issues": [asdict(issue) for issue in result.issues],
            "stats": result.stats,
            "summary": {
                "total_issues": len(result.issues),
                "errors": result.errors,
                "warnings": result.warnings,
                "by_code": dict(sorted(by_code.items())),
                "passed": result.errors == 0,
            },
        }

    def report(self, result: CheckResult, target: str) -> None:
        """生成 JSON 格式报告"""
        json.dump(self.build(result, target), self.output, indent=2, ensure_ascii=False)
        self.output.write("\n")
