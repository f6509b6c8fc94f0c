"""Task list widget for interactive mode."""

from __future__ import annotations

from typing import Iterable, List, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Label, ListItem, ListView, Static

from ...state.tasks import Task, TaskFilter

SECTION_TITLES = {
    TaskFilter.ALL: "All tasks",
    TaskFilter.ACTIVE: "Active tasks",
    TaskFilter.COMPLETED: "Completed tasks",
}

EMPTY_MESSAGES = {
    TaskFilter.ALL: "No tasks yet. Start adding tasks to organise your day!",
    TaskFilter.ACTIVE: "No active tasks!",
    TaskFilter.COMPLETED: "No completed tasks!",
}


class TaskListWidget(Widget):
    """Widget displaying the filtered task list."""

    DEFAULT_CSS = """
    TaskListWidget Vertical {
        height: 100%;
    }

    TaskListWidget #section-title {
        text-style: bold;
        padding: 0 1;
    }

    TaskListWidget #empty-message {
        color: $text-muted;
        padding: 1 2;
    }

    TaskListWidget ListView {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("space", "toggle", "Toggle"),
        Binding("e", "edit", "Edit"),
        Binding("delete", "delete", "Delete"),
    ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.border_title = "Tasks"
        self.tasks: List[Task] = []

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(id="section-title")
            yield ListView(id="task-list-view")
            yield Static(id="empty-message")

    def update_tasks(self, tasks: Iterable[Task], task_filter: TaskFilter) -> None:
        self.tasks = list(tasks)

        title = self.query_one("#section-title", Static)
        title.update(f"{SECTION_TITLES[task_filter]} ({len(self.tasks)})")

        empty = self.query_one("#empty-message", Static)
        empty.update(EMPTY_MESSAGES[task_filter] if not self.tasks else "")
        empty.display = not self.tasks

        list_view = self.query_one("#task-list-view", ListView)
        previous_index = list_view.index
        list_view.clear()
        for task in self.tasks:
            list_view.append(ListItem(Label(self._render_task(task))))
        if self.tasks and previous_index is not None:
            list_view.index = min(previous_index, len(self.tasks) - 1)

    @staticmethod
    def _render_task(task: Task) -> Text:
        text = Text()
        if task.completed:
            text.append("● ", style="green")
            text.append(f"[{task.id}] ", style="dim")
            text.append(task.text, style="strike dim")
        else:
            text.append("○ ", style="#888888")
            text.append(f"[{task.id}] ", style="dim")
            text.append(task.text)
        return text

    def selected_task(self) -> Optional[Task]:
        """Task under the list cursor, if any."""
        index = self.query_one("#task-list-view", ListView).index
        if index is None or index >= len(self.tasks):
            return None
        return self.tasks[index]

    def action_toggle(self) -> None:
        task = self.selected_task()
        if task:
            self.post_message(self.ToggleRequested(task))

    def action_edit(self) -> None:
        task = self.selected_task()
        if task:
            self.post_message(self.EditRequested(task))

    def action_delete(self) -> None:
        task = self.selected_task()
        if task:
            self.post_message(self.DeleteRequested(task))

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Enter on a task toggles it."""
        event.stop()
        self.action_toggle()

    class ToggleRequested(Message):
        """Message sent when a task should flip its completed flag."""

        def __init__(self, task: Task) -> None:
            super().__init__()
            self.task = task

    class EditRequested(Message):
        """Message sent when a task should be edited."""

        def __init__(self, task: Task) -> None:
            super().__init__()
            self.task = task

    class DeleteRequested(Message):
        """Message sent when a task should be removed."""

        def __init__(self, task: Task) -> None:
            super().__init__()
            self.task = task
