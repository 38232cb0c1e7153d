"""
readme-examples - 文档示例验证工具

Verifies that the examples in Markdown documentation still hold: quoted
files match the project, and documented commands print what the
documentation says they print.
"""

__version__ = "0.1.0"
