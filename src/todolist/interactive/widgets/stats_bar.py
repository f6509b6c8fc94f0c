"""Counts, filter buttons and the clear-completed button."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Static

from ...state.tasks import TaskCounts, TaskFilter

FILTER_LABELS = {
    TaskFilter.ALL: "All",
    TaskFilter.ACTIVE: "Active",
    TaskFilter.COMPLETED: "Completed",
}


class StatsBar(Widget):
    """Shows task counts and lets the user pick a filter."""

    DEFAULT_CSS = """
    StatsBar {
        height: auto;
        padding: 0 1;
    }

    StatsBar Horizontal {
        height: auto;
    }

    StatsBar #stats {
        width: 1fr;
        content-align: left middle;
        padding: 1 0;
    }

    StatsBar Button {
        min-width: 12;
        margin: 0 1 0 0;
    }

    StatsBar #clear-completed-button {
        display: none;
    }
    """

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Static(id="stats")
            for task_filter, label in FILTER_LABELS.items():
                yield Button(label, id=f"filter-{task_filter.value}")
            yield Button("Clear completed", variant="error", id="clear-completed-button")

    def update_stats(self, counts: TaskCounts, active_filter: TaskFilter) -> None:
        stats = self.query_one("#stats", Static)
        stats.update(
            f"[bold]{counts.total}[/bold] total  "
            f"[bold yellow]{counts.active}[/bold yellow] active  "
            f"[bold green]{counts.completed}[/bold green] completed"
        )

        for task_filter in FILTER_LABELS:
            button = self.query_one(f"#filter-{task_filter.value}", Button)
            button.variant = "primary" if task_filter is active_filter else "default"

        clear_button = self.query_one("#clear-completed-button", Button)
        clear_button.label = f"Clear completed ({counts.completed})"
        clear_button.display = counts.completed > 0

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id == "clear-completed-button":
            self.post_message(self.ClearCompletedRequested())
        elif button_id.startswith("filter-"):
            self.post_message(self.FilterSelected(TaskFilter(button_id[len("filter-") :])))
        event.stop()

    class FilterSelected(Message):
        """Message sent when a filter button is pressed."""

        def __init__(self, task_filter: TaskFilter) -> None:
            super().__init__()
            self.task_filter = task_filter

    class ClearCompletedRequested(Message):
        """Message sent when the clear-completed button is pressed."""
