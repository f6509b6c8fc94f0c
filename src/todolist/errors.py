"""Exception types raised by the task core."""

from __future__ import annotations


class TodoError(Exception):
    """Base class for todolist errors."""


class DuplicateTaskError(TodoError):
    """A task with the same normalized text already exists."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Task already exists: {text!r}")
        self.text = text


class CorruptStateError(TodoError):
    """Persisted task data could not be parsed or failed validation."""


class StoreNotLoadedError(TodoError, RuntimeError):
    """A mutation was attempted before the store finished loading."""


class StoreAlreadyLoadedError(TodoError, RuntimeError):
    """load() was called on a store that is already loaded."""
