"""
Rich 终端报告器 - 使用 Rich 库输出彩色终端格式
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from readme_examples.examples.result import CheckResult, Issue

# 问题分类
CATEGORIES = [
    ("markdown", "📝", "Markdown 语法", ("MARKDOWN_WARNING", "SYNTAX_ERROR", "UNREADABLE")),
    ("quoted", "📄", "引用文件", (
        "QUOTED_FILE_MISSING",
        "QUOTED_FILE_UNREADABLE",
        "QUOTED_FILE_DIFFERS",
        "INVALID_JSON",
        "INVALID_YAML",
    )),
    ("examples", "💻", "示例命令", ("EXAMPLE_FAILED", "EXAMPLE_EXIT_CODE", "OUTPUT_MISMATCH")),
]

MAX_SHOWN_ISSUES = 20


class RichReporter:
    """Rich 终端报告器"""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def report(self, result: CheckResult, target: str) -> None:
        """生成 Rich 格式报告"""
        self.console.print()
        self.console.print("─" * 80, style="dim")
        self.console.print(
            "📋 readme-examples 文档示例检查报告 📋",
            style="bold cyan",
            justify="center",
        )
        self.console.print("─" * 80, style="dim")

        self._print_summary_panel(result, target)
        self._print_categories(result)
        if result.issues:
            self._print_issues(result.issues)
        self._print_conclusion(result)

    def _print_summary_panel(self, result: CheckResult, target: str) -> None:
        """打印统计面板"""
        color = "green" if result.errors == 0 else "red"
        content = Text()
        content.append("文档: ", style="bold")
        content.append(f"{result.stats.get('documents', 0)}\n")
        content.append("示例: ", style="bold")
        content.append(f"{result.stats.get('examples', 0)}\n")
        content.append("引用文件: ", style="bold")
        content.append(f"{result.stats.get('quoted_files', 0)}\n\n")
        content.append(f"目标: {target}", style="dim")

        self.console.print(Panel(
            content,
            title="[bold]📊 检查统计[/bold]",
            border_style=color,
        ))

    def _print_categories(self, result: CheckResult) -> None:
        """打印分类详情"""
        self.console.print()
        self.console.print("[bold]◆ 检查项详情[/bold]")
        self.console.print()

        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("检查项", style="cyan", width=20)
        table.add_column("状态", width=20)

        for _, icon, label, codes in CATEGORIES:
            errors = sum(1 for i in result.issues if i.code in codes and i.severity == "error")
            warnings = sum(1 for i in result.issues if i.code in codes and i.severity == "warning")
            if errors > 0:
                status = f"[red]⚠ {errors} 错误[/red]"
            elif warnings > 0:
                status = f"[yellow]○ {warnings} 警告[/yellow]"
            else:
                status = "[green]✓ 通过[/green]"
            table.add_row(f"{icon} {label}", status)

        self.console.print(table)

    def _print_issues(self, issues: list[Issue]) -> None:
        """打印问题详情"""
        self.console.print()
        self.console.print("[bold]◆ 问题详情[/bold]")
        self.console.print()

        # 按严重程度排序
        sorted_issues = sorted(
            issues,
            key=lambda x: (0 if x.severity == "error" else 1, x.file_path, x.line_number or 0),
        )

        for i, issue in enumerate(sorted_issues[:MAX_SHOWN_ISSUES], 1):
            if issue.severity == "error":
                icon = "❌"
                style = "red"
            else:
                icon = "⚠️"
                style = "yellow"

            location = f"{issue.file_path}"
            if issue.line_number:
                location += f":{issue.line_number}"

            self.console.print(f"  {i}. [{style}]{icon} {escape(issue.message)}[/{style}]")
            self.console.print(f"     [dim]{escape(location)}[/dim]")
            if issue.excerpt:
                for line in issue.excerpt.splitlines():
                    self.console.print(Text(f"       {line}", style="dim"))
            if issue.suggestion:
                self.console.print(f"     [dim]→ {escape(issue.suggestion)}[/dim]")
            self.console.print()

        if len(issues) > MAX_SHOWN_ISSUES:
            self.console.print(f"  [dim]... 还有 {len(issues) - MAX_SHOWN_ISSUES} 个问题未显示[/dim]")

    def _print_conclusion(self, result: CheckResult) -> None:
        """打印总结"""
        self.console.print()
        self.console.print("[bold]◆ 总结[/bold]")
        self.console.print()

        if result.errors == 0 and result.warnings == 0:
            self.console.print(Panel(
                "[green]👍 所有示例与文档一致[/green]",
                border_style="green",
            ))
        else:
            color = "red" if result.errors else "yellow"
            self.console.print(Panel(
                f"发现 [red]{result.errors}[/red] 个错误，"
                f"[yellow]{result.warnings}[/yellow] 个警告",
                border_style=color,
            ))

        self.console.print()
