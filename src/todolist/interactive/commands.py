"""Command handlers for interactive mode."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from rich.markup import escape

from ..errors import DuplicateTaskError
from ..state.tasks import Task, TaskFilter, TaskStore

logger = logging.getLogger(__name__)

CLEAR_CONFIRMATION = "Are you sure you want to delete all completed tasks?"


class CommandHandler:
    """Turns text typed into the top bar into TaskStore calls.

    Plain text adds a task; ``/command args`` runs a command. The app object
    must provide ``output_panel``, ``refresh_tasks()``, ``exit()`` and the
    awaitable prompts ``ask_confirmation(message)`` and ``ask_text(title, text)``.
    """

    def __init__(self, store: TaskStore, app):
        self.store = store
        self.app = app

        self.commands: Dict[str, Callable] = {
            "/help": self.cmd_help,
            "/add": self.cmd_add,
            "/tasks": self.cmd_tasks,
            "/toggle": self.cmd_toggle,
            "/done": self.cmd_toggle,
            "/edit": self.cmd_edit,
            "/delete": self.cmd_delete,
            "/clear": self.cmd_clear,
            "/filter": self.cmd_filter,
            "/stats": self.cmd_stats,
            "/exit": self.cmd_exit,
        }

    async def handle(self, command: str) -> None:
        if command.startswith("/"):
            parts = command.split(maxsplit=1)
            cmd = parts[0]
            args = parts[1] if len(parts) > 1 else ""

            handler = self.commands.get(cmd)
            if handler:
                await handler(args)
            else:
                self.app.output_panel.write_error(f"Unknown command: {escape(cmd)}")
                self.app.output_panel.write_line("Type /help for available commands")
        else:
            await self.cmd_add(command)

    async def cmd_help(self, args: str) -> None:
        help_text = """
[bold]Commands[/bold]

  <text>               Add a task
  /tasks               List tasks in the current filter
  /toggle <id>         Mark task completed / active (alias /done)
  /edit <id> <text>    Change task text (omit text to open the editor)
  /delete <id>         Delete a task
  /clear               Delete all completed tasks
  /filter <name>       Show all, active or completed tasks
  /stats               Show task counts
  /exit                Quit

[bold]Keys[/bold]

  space / enter        Toggle selected task
  e                    Edit selected task
  delete               Delete selected task
  F1 / F2 / F3         Filter all / active / completed
  F4                   Clear completed
  ctrl+n               Focus input
"""
        self.app.output_panel.write_section("Help", help_text)

    async def cmd_add(self, args: str) -> None:
        text = args.strip()
        if not text:
            self.app.output_panel.write_error("Usage: /add <text>")
            return
        try:
            tasks = self.store.add(text)
        except DuplicateTaskError:
            self.app.output_panel.write_warning("This task already exists!")
            return
        task = tasks[-1]
        self.app.output_panel.write_success(f"Task added: [{task.id}] {escape(task.text)}")
        self.app.refresh_tasks()

    async def cmd_tasks(self, args: str) -> None:
        view = self.store.filtered_view()
        self.app.output_panel.write_line(f"{view.filter.value.capitalize()} tasks: {len(view)}")
        for task in view:
            self.app.output_panel.write_task(task)

    async def cmd_toggle(self, args: str) -> None:
        task = self._resolve(args, "/toggle <task_id>")
        if not task:
            return
        self.store.toggle(task.id)
        state = "completed" if task.completed else "active"
        self.app.output_panel.write_success(f"Task {task.id} marked as {state}")
        self.app.refresh_tasks()

    async def cmd_edit(self, args: str) -> None:
        task_arg, _, text = args.strip().partition(" ")
        task = self._resolve(task_arg, "/edit <task_id> <text>")
        if not task:
            return
        if not text.strip():
            text = await self.app.ask_text("Edit Task", task.text)
            if text is None:
                return
        if not text.strip():
            self.app.output_panel.write_warning("Task text cannot be empty")
            return
        self.store.edit(task.id, text)
        self.app.output_panel.write_success(f"Task {task.id} updated")
        self.app.refresh_tasks()

    async def cmd_delete(self, args: str) -> None:
        task = self._resolve(args, "/delete <task_id>")
        if not task:
            return
        self.store.delete(task.id)
        self.app.output_panel.write_success(f"Task {task.id} deleted")
        self.app.refresh_tasks()

    async def cmd_clear(self, args: str) -> None:
        completed = self.store.counts().completed
        if not completed:
            self.app.output_panel.write_warning("No completed tasks")
            return
        confirmed = await self.app.ask_confirmation(CLEAR_CONFIRMATION)
        if not confirmed:
            self.app.output_panel.write_line("[dim]Clear cancelled[/dim]")
            return
        self.store.clear_completed(confirmed=True)
        self.app.output_panel.write_success(f"Deleted {completed} completed task(s)")
        self.app.refresh_tasks()

    async def cmd_filter(self, args: str) -> None:
        name = args.strip().lower() or TaskFilter.ALL.value
        try:
            task_filter = self.store.set_filter(name)
        except ValueError:
            choices = ", ".join(f.value for f in TaskFilter)
            self.app.output_panel.write_error(f"Unknown filter: {escape(name)} (choose {choices})")
            return
        self.app.output_panel.write_line(f"Showing {task_filter.value} tasks")
        self.app.refresh_tasks()

    async def cmd_stats(self, args: str) -> None:
        self.app.output_panel.write_counts(self.store.counts())

    async def cmd_exit(self, args: str) -> None:
        self.app.exit()

    def _resolve(self, args: str, usage: str) -> Optional[Task]:
        """Parse a task id argument and look the task up."""
        raw = args.strip()
        if not raw:
            self.app.output_panel.write_error(f"Usage: {usage}")
            return None
        try:
            task_id = int(raw)
        except ValueError:
            self.app.output_panel.write_error(f"Invalid task id: {escape(raw)}")
            return None
        task = self.store.get(task_id)
        if task is None:
            logger.debug("Command referenced missing task %d", task_id)
            self.app.output_panel.write_error(f"Task {task_id} not found")
        return task
