"""
Markdown Layer - Markdown 围栏代码块层

Streaming recognizer for fenced code blocks and the QuotedFile model
for blocks that quote a project file.
"""

from readme_examples.markdown.fence import (
    FencedBlock,
    FenceStatus,
    QuotedFile,
    is_fence_char,
    open_fence,
)
from readme_examples.markdown.trim import trim_repeating, trim_space

__all__ = [
    "FencedBlock",
    "FenceStatus",
    "QuotedFile",
    "is_fence_char",
    "open_fence",
    "trim_repeating",
    "trim_space",
]
