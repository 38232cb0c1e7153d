"""
CLI 入口模块 - 使用 Typer 构建命令行界面

文档示例检查流程：
1. 查找 Markdown 文件
2. 扫描围栏代码块
3. 验证引用文件并运行示例
4. 生成报告
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from readme_examples.config import CheckerConfig, ConfigError, load_config
from readme_examples.examples import CheckResult, check_readme
from readme_examples.filters import find_markdown_files
from readme_examples.reporters import JsonReporter, Reporter, RichReporter
from readme_examples.sandbox import SandboxConfig, SandboxExecutor

# 创建 Typer 应用实例
app = typer.Typer(
    name="readme-examples",
    help="readme-examples: verify the examples in Markdown documentation.",
    add_completion=False,
)

# Rich Console 用于输出
console = Console()

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Route log records through rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_runner(config: CheckerConfig) -> Optional[SandboxExecutor]:
    """获取示例运行器"""
    if not config.run:
        return None
    return SandboxExecutor(SandboxConfig(
        program=config.program,
        executable=config.executable,
        timeout=config.timeout,
    ))


@app.command()
def check(
    paths: Optional[List[Path]] = typer.Argument(
        None,
        help="Markdown files or directories to check (default: current directory)",
    ),
    program: Optional[str] = typer.Option(
        None,
        "--program",
        "-p",
        help="Command name of the program the examples invoke",
    ),
    executable: Optional[str] = typer.Option(
        None,
        "--executable",
        help="Path of the program, if it is not on PATH",
    ),
    run: Optional[bool] = typer.Option(
        None,
        "--run/--no-run",
        help="Run the example commands, or only check quoted files",
    ),
    format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default) or json",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """
    Check the examples documented in Markdown files.

    Examples:
        readme-examples check
        readme-examples check README.md docs/
        readme-examples check --no-run --format json
        readme-examples check -p mytool --executable ./bin/mytool
    """
    configure_logging(verbose)
    targets = paths or [Path(".")]

    if format not in ("rich", "json"):
        console.print(f"[red]Error:[/red] Unknown format: {format}")
        raise typer.Exit(1)

    # 1. 加载配置
    try:
        config = load_config(targets[0])
    except ConfigError as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise typer.Exit(1)
    config = config.with_overrides(program=program, executable=executable, run=run)

    # 2. 查找 Markdown 文件
    try:
        documents = find_markdown_files(targets)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not documents:
        console.print("[yellow]Warning:[/yellow] No Markdown files found")
        raise typer.Exit(0)

    # 3. 执行验证
    runner = build_runner(config)
    result = CheckResult()
    for document in documents:
        logger.debug(f"Checking {document}")
        result.merge(check_readme(document, config, runner))
    result.update_stats()

    # 4. 生成报告
    reporter: Reporter
    if format == "json":
        reporter = JsonReporter()
    else:
        reporter = RichReporter(console)

    target = " ".join(str(t) for t in targets)
    reporter.report(result, target)

    # 5. 设置退出码
    if result.errors > 0:
        raise typer.Exit(1)
    raise typer.Exit(0)


@app.command()
def version() -> None:
    """Show the version of readme-examples."""
    from readme_examples import __version__
    console.print(f"[bold]readme-examples[/bold] v{__version__}")


if __name__ == "__main__":
    app()
