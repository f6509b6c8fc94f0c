"""Modal for editing a task's text."""

from __future__ import annotations

from typing import Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Grid, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label


class EditTaskModal(ModalScreen[Optional[str]]):
    """Modal dialog prefilled with the current task text."""

    DEFAULT_CSS = """
    EditTaskModal {
        align: center middle;
    }

    EditTaskModal > Vertical {
        width: 80;
        height: auto;
        background: $panel;
        border: thick $primary;
        padding: 1 2;
    }

    EditTaskModal Label {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    EditTaskModal Input {
        width: 100%;
        border: round $primary;
        margin-bottom: 1;
    }

    EditTaskModal Grid {
        width: 100%;
        height: auto;
        grid-size: 2;
        grid-gutter: 1;
    }

    EditTaskModal Button {
        width: 100%;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, text: str, title: str = "Edit Task") -> None:
        super().__init__()
        self.initial_text = text
        self.title_text = title

    def compose(self) -> ComposeResult:
        """Compose the modal layout."""
        with Vertical():
            yield Label(self.title_text)
            yield Input(value=self.initial_text, id="edit-input")
            with Grid():
                yield Button("Cancel", variant="default", id="cancel-button")
                yield Button("Save", variant="primary", id="save-button")

    def on_mount(self) -> None:
        """Focus the input when mounted."""
        self.query_one("#edit-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "cancel-button":
            self.dismiss(None)
        elif event.button.id == "save-button":
            self._save()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save(self) -> None:
        edit_input = self.query_one("#edit-input", Input)
        text = edit_input.value.strip()
        if text:
            self.dismiss(text)
        else:
            # Don't dismiss if empty
            edit_input.focus()
