"""Markdown discovery with gitignore handling.

Directories given on the command line are searched for Markdown files.
The pathspec library applies the root and nested .gitignore files.
"""

import logging
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown")

# Default ignore patterns when no .gitignore exists
DEFAULT_IGNORE_PATTERNS: list[str] = [
    "node_modules/",
    "venv/",
    ".venv/",
    "__pycache__/",
    ".git/",
    "dist/",
    "build/",
    "vendor/",
    ".tox/",
    ".pytest_cache/",
    "*.egg-info/",
]


def _read_spec(gitignore_path: Path) -> pathspec.PathSpec:
    with open(gitignore_path, encoding="utf-8") as f:
        lines = f.readlines()
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


class PathspecFilter:
    """File filter based on pathspec library with nested gitignore support."""

    def __init__(self, root: Path):
        """
        Initialize the filter.

        Args:
            root: Directory the ignore rules are relative to
        """
        self.root = root
        self._root_spec = pathspec.PathSpec.from_lines("gitwildmatch", DEFAULT_IGNORE_PATTERNS)
        self._nested_specs: dict[Path, pathspec.PathSpec] = {}
        self._load_gitignores()

    def _load_gitignores(self) -> None:
        for gitignore_path in sorted(self.root.rglob(".gitignore")):
            try:
                spec = _read_spec(gitignore_path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable {gitignore_path}: {e}")
                continue
            if gitignore_path.parent == self.root:
                self._root_spec = spec
            else:
                self._nested_specs[gitignore_path.parent] = spec

    def should_ignore(self, path: Path) -> bool:
        """
        Check if a file should be ignored.

        The root .gitignore applies to all files, nested ones to the files
        below their directory.
        """
        try:
            relative = path.relative_to(self.root) if path.is_absolute() else path
        except ValueError:
            return False

        if self._root_spec.match_file(relative.as_posix()):
            return True

        for gitignore_dir, spec in self._nested_specs.items():
            try:
                below = (self.root / relative).relative_to(gitignore_dir)
            except ValueError:
                continue
            if spec.match_file(below.as_posix()):
                return True
        return False

    def filter_paths(self, paths: list[Path]) -> list[Path]:
        """Filter paths, returning those that should NOT be ignored."""
        return [p for p in paths if not self.should_ignore(p)]


def find_markdown_files(targets: list[Path]) -> list[Path]:
    """
    Expand targets into Markdown files.

    Files are kept as given. Directories are searched recursively,
    skipping ignored paths.
    """
    found: list[Path] = []
    for target in targets:
        if target.is_file():
            found.append(target)
            continue
        if not target.is_dir():
            raise FileNotFoundError(f"Path does not exist: {target}")

        root = target.resolve()
        path_filter = PathspecFilter(root)
        candidates = sorted(
            p for p in root.rglob("*")
            if p.is_file() and p.suffix.lower() in MARKDOWN_SUFFIXES
        )
        for path in path_filter.filter_paths(candidates):
            logger.debug(f"Found Markdown file {path}")
            found.append(path)
    return found
