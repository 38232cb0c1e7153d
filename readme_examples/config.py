"""
配置模块 - Checker configuration

Settings live in the `[tool.readme-examples]` table of the project's
pyproject.toml:

    [tool.readme-examples]
    program = "hebcalfmt"
    example-syntax = "bash"
    max-memory-lines = 2
    timeout = 60

    [tool.readme-examples.content-syntaxes]
    text = ".txt"
    json = ".json"

Command line options override file values.
"""

import logging
import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

# Handle tomllib/tomli for different Python versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

TOOL_NAME = "readme-examples"


def default_content_syntaxes() -> dict[str, str]:
    return {
        "text": ".txt",
        "json": ".json",
        "tmpl": ".tmpl",
    }


class ConfigError(ValueError):
    """The configuration table holds a value of the wrong type."""


@dataclass
class CheckerConfig:
    """
    检查器配置

    Attributes:
        program: Command name of the program under test; only examples
            invoking it are checked
        example_syntax: Info-string word marking example commands
        content_syntaxes: Info-string word to the file extension a quoted
            file of that syntax must have
        max_memory_lines: How many lines a file name stays eligible to
            label the next fenced block
        timeout: Seconds before a program run is abandoned
        executable: Path of the program, if not the program name on PATH
        run: Whether to run the examples at all
    """
    program: str = "hebcalfmt"
    example_syntax: str = "bash"
    content_syntaxes: dict[str, str] = field(default_factory=default_content_syntaxes)
    max_memory_lines: int = 2
    timeout: int = 60
    executable: Optional[str] = None
    run: bool = True

    def with_overrides(self, **overrides: Any) -> "CheckerConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_FIELD_TYPES = {f.name: f for f in fields(CheckerConfig)}


def _check_type(key: str, value: Any) -> Any:
    if key in ("program", "example_syntax", "executable"):
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be a string, got {value!r}")
    elif key in ("max_memory_lines", "timeout"):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigError(f"{key} must be a non-negative integer, got {value!r}")
    elif key == "run":
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be a boolean, got {value!r}")
    elif key == "content_syntaxes":
        if not isinstance(value, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        ):
            raise ConfigError(f"{key} must be a table of strings, got {value!r}")
        value = dict(value)
    return value


def config_from_table(table: dict[str, Any], base: Optional[CheckerConfig] = None) -> CheckerConfig:
    """Build a config from a parsed TOML table. Unknown keys are logged and ignored."""
    values: dict[str, Any] = {}
    for raw_key, value in table.items():
        key = raw_key.replace("-", "_")
        if key not in _FIELD_TYPES:
            logger.warning(f"Ignoring unknown [tool.{TOOL_NAME}] key: {raw_key}")
            continue
        values[key] = _check_type(key, value)
    return replace(base or CheckerConfig(), **values)


def find_pyproject(start: Path) -> Optional[Path]:
    """查找最近的 pyproject.toml"""
    start = start.resolve()
    if start.is_file():
        start = start.parent
    for directory in (start, *start.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path) -> CheckerConfig:
    """
    加载配置

    Looks for pyproject.toml in start and its parents. A missing file or
    table yields the defaults.

    Raises:
        ConfigError: if the file is not valid TOML or a value has the wrong type
    """
    pyproject_path = find_pyproject(start)
    if pyproject_path is None:
        return CheckerConfig()

    try:
        content = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{pyproject_path}: {e}") from e

    table = content.get("tool", {}).get(TOOL_NAME)
    if table is None:
        return CheckerConfig()

    logger.debug(f"Loaded [tool.{TOOL_NAME}] from {pyproject_path}")
    return config_from_table(table)
