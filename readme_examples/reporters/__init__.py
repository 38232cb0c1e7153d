"""
Reporters Layer - 报告层

包含 Rich 终端报告器和 JSON 报告器。
"""

from readme_examples.reporters.base import Reporter
from readme_examples.reporters.json_reporter import JsonReporter
from readme_examples.reporters.rich_reporter import RichReporter

__all__ = [
    "Reporter",
    "RichReporter",
    "JsonReporter",
]
