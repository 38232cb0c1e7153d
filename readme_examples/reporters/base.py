"""
报告器基类 - 定义报告器接口
"""

from typing import Protocol

from readme_examples.examples.result import CheckResult


class Reporter(Protocol):
    """报告器协议"""

    def report(self, result: CheckResult, target: str) -> None:
        """生成报告"""
        ...
