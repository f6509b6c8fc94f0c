"""todolist - a small persistent task list."""

__version__ = "0.1.0"
__author__ = "todolist Contributors"

from .config import Config
from .errors import DuplicateTaskError, TodoError
from .state.persistence import LocalStorage, PersistenceAdapter
from .state.tasks import Task, TaskCounts, TaskFilter, TaskStore

__all__ = [
    "Config",
    "DuplicateTaskError",
    "LocalStorage",
    "PersistenceAdapter",
    "Task",
    "TaskCounts",
    "TaskFilter",
    "TaskStore",
    "TodoError",
]
