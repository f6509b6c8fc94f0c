"""Interactive mode (Textual TUI)."""

from .app import TodoApp

__all__ = ["TodoApp"]
