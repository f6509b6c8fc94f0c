"""State management modules."""

from .persistence import LocalStorage, PersistenceAdapter
from .tasks import Task, TaskCounts, TaskFilter, TaskStore, TaskView

__all__ = [
    "LocalStorage",
    "PersistenceAdapter",
    "Task",
    "TaskCounts",
    "TaskFilter",
    "TaskStore",
    "TaskView",
]
