"""Output panel widget for command feedback."""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import RichLog

from ...state.tasks import Task, TaskCounts

TASK_MARKERS = {False: "○", True: "●"}


def format_task_line(task: Task) -> str:
    """Markup for one task in a listing; completed tasks are struck through."""
    line = f"  {TASK_MARKERS[task.completed]} {task.id}. {escape(task.text)}"
    if task.completed:
        return f"[dim strike]{line}[/dim strike]"
    return line


def format_counts(counts: TaskCounts) -> str:
    return f"Total: {counts.total} | Active: {counts.active} | Completed: {counts.completed}"


class OutputPanel(Widget):
    """Scrolling log of command results, task listings and warnings."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.border_title = "Messages"

    def compose(self) -> ComposeResult:
        yield RichLog(id="output-log", highlight=False, markup=True, auto_scroll=True, wrap=True)

    @property
    def log_view(self) -> RichLog:
        return self.query_one("#output-log", RichLog)

    def write_line(self, text: str, style: str | None = None) -> None:
        self.log_view.write(f"[{style}]{text}[/{style}]" if style else text)

    def write_section(self, title: str, content: str) -> None:
        self.log_view.write(Panel(content, title=title, border_style="blue"))

    def write_task(self, task: Task) -> None:
        self.write_line(format_task_line(task))

    def write_counts(self, counts: TaskCounts) -> None:
        self.write_line(format_counts(counts), style="cyan")

    def write_error(self, error: str) -> None:
        self.write_line(f"ERROR: {error}", style="bold red")

    def write_success(self, message: str) -> None:
        self.write_line(f"✓ {message}", style="bold green")

    def write_warning(self, message: str) -> None:
        self.write_line(f"⚠ {message}", style="bold yellow")
