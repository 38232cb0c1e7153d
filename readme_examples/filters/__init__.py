"""
Filters Layer - 文件过滤层
"""

from readme_examples.filters.pathspec_filter import PathspecFilter, find_markdown_files

__all__ = [
    "PathspecFilter",
    "find_markdown_files",
]
