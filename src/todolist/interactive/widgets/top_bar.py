"""Top bar widget with title and task input."""

from __future__ import annotations

from typing import List

from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Input, Static

INPUT_PLACEHOLDER = "Add a new task... (type /help for commands)"
EMPTY_PLACEHOLDER = "Add your first task... (type /help for commands)"


class TopBar(Widget):
    """Top bar with the app title and the task/command input."""

    DEFAULT_CSS = """
    TopBar {
        height: auto;
        dock: top;
        background: $panel;
    }

    TopBar #title-status {
        width: 100%;
        height: 1;
        content-align: center middle;
        background: $primary;
        color: $text;
        text-style: bold;
    }

    TopBar #task-input {
        border: tall $primary;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(self, title: str = "My Todo List", *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.title_text = title
        self.command_history: List[str] = []
        self.history_index = -1

    def compose(self) -> ComposeResult:
        """Compose the top bar layout."""
        yield Static(self.title_text, id="title-status")
        yield Input(placeholder=INPUT_PLACEHOLDER, id="task-input")

    def on_mount(self) -> None:
        """Focus the input when mounted."""
        self.focus_input()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Forward submitted text to the app."""
        if event.input.id != "task-input":
            return

        command = event.value.strip()
        if command:
            self.command_history.append(command)
            self.history_index = len(self.command_history)
            self.post_message(self.CommandSubmitted(command))

        event.input.value = ""
        event.stop()

    async def on_key(self, event) -> None:
        """Handle key presses for input history."""
        input_widget = self.query_one("#task-input", Input)
        if not input_widget.has_focus:
            return

        if event.key == "up":
            if self.command_history and self.history_index > 0:
                self.history_index -= 1
                input_widget.value = self.command_history[self.history_index]
                input_widget.cursor_position = len(input_widget.value)
            event.prevent_default()
        elif event.key == "down":
            if self.command_history:
                if self.history_index < len(self.command_history) - 1:
                    self.history_index += 1
                    input_widget.value = self.command_history[self.history_index]
                else:
                    self.history_index = len(self.command_history)
                    input_widget.value = ""
                input_widget.cursor_position = len(input_widget.value)
            event.prevent_default()

    def focus_input(self) -> None:
        self.query_one("#task-input", Input).focus()

    def set_placeholder(self, empty: bool) -> None:
        """Swap the placeholder depending on whether any task exists."""
        input_widget = self.query_one("#task-input", Input)
        input_widget.placeholder = EMPTY_PLACEHOLDER if empty else INPUT_PLACEHOLDER

    class CommandSubmitted(Message):
        """Message sent when text is submitted."""

        def __init__(self, command: str) -> None:
            super().__init__()
            self.command = command
