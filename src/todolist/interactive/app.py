"""Textual application for interactive mode."""

from __future__ import annotations

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer

from .commands import CommandHandler
from .widgets import (
    ConfirmModal,
    EditTaskModal,
    OutputPanel,
    StatsBar,
    TaskListWidget,
    TopBar,
)
from ..state.tasks import TaskFilter, TaskStore

logger = logging.getLogger(__name__)


class TodoApp(App):
    """Terminal front end over a TaskStore."""

    CSS = """
    Screen {
        layout: grid;
        grid-size: 2 3;
        grid-rows: auto auto 1fr;
        grid-columns: 2fr 1fr;
        overflow: hidden;
    }

    #top-bar {
        column-span: 2;
    }

    #stats-bar {
        column-span: 2;
    }

    #task-list-widget {
        border: tall $primary;
        padding: 0;
        overflow-y: auto;
    }

    #output-panel {
        border: tall $primary;
        padding: 0;
        overflow-y: auto;
    }
    """

    BINDINGS = [
        Binding("ctrl+n", "focus_input", "New Task"),
        Binding("f1", "filter('all')", "All"),
        Binding("f2", "filter('active')", "Active"),
        Binding("f3", "filter('completed')", "Completed"),
        Binding("f4", "clear_completed", "Clear Completed"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, store: TaskStore, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.store = store
        self.command_handler = CommandHandler(self.store, self)

    def compose(self) -> ComposeResult:
        self.top_bar = TopBar(id="top-bar")
        self.stats_bar = StatsBar(id="stats-bar")
        self.task_list = TaskListWidget(id="task-list-widget")
        self.output_panel = OutputPanel(id="output-panel")

        yield self.top_bar
        yield self.stats_bar
        yield self.task_list
        yield self.output_panel
        yield Footer()

    def on_mount(self) -> None:
        if not self.store.loaded:
            self.store.load()
        logger.info("Interactive mode started with %d task(s)", self.store.counts().total)
        self.refresh_tasks()
        self.output_panel.write_line("Type a task and press Enter to add it")
        self.output_panel.write_line("Type /help for commands")

    def refresh_tasks(self) -> None:
        """Re-render the list and counters from the store."""
        counts = self.store.counts()
        self.task_list.update_tasks(self.store.filtered_view(), self.store.filter)
        self.stats_bar.update_stats(counts, self.store.filter)
        self.top_bar.set_placeholder(empty=counts.total == 0)

    # ------------------------------------------------------------------ #
    # Prompts used by CommandHandler
    # ------------------------------------------------------------------ #
    async def ask_confirmation(self, message: str) -> bool:
        return bool(await self.push_screen_wait(ConfirmModal(message)))

    async def ask_text(self, title: str, text: str) -> Optional[str]:
        return await self.push_screen_wait(EditTaskModal(text, title=title))

    # ------------------------------------------------------------------ #
    # Widget messages
    # ------------------------------------------------------------------ #
    def on_top_bar_command_submitted(self, event: TopBar.CommandSubmitted) -> None:
        self.run_worker(self.command_handler.handle(event.command))

    def on_stats_bar_filter_selected(self, event: StatsBar.FilterSelected) -> None:
        self.action_filter(event.task_filter.value)

    def on_stats_bar_clear_completed_requested(self, event: StatsBar.ClearCompletedRequested) -> None:
        self.action_clear_completed()

    def on_task_list_widget_toggle_requested(self, event: TaskListWidget.ToggleRequested) -> None:
        self.run_worker(self.command_handler.cmd_toggle(str(event.task.id)))

    def on_task_list_widget_edit_requested(self, event: TaskListWidget.EditRequested) -> None:
        self.run_worker(self.command_handler.cmd_edit(str(event.task.id)))

    def on_task_list_widget_delete_requested(self, event: TaskListWidget.DeleteRequested) -> None:
        self.run_worker(self.command_handler.cmd_delete(str(event.task.id)))

    # ------------------------------------------------------------------ #
    # Actions
    # ------------------------------------------------------------------ #
    def action_focus_input(self) -> None:
        self.top_bar.focus_input()

    def action_filter(self, name: str) -> None:
        self.store.set_filter(TaskFilter(name))
        self.refresh_tasks()

    def action_clear_completed(self) -> None:
        self.run_worker(self.command_handler.cmd_clear(""))
