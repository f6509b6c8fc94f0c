"""Task collection, filtering and the id allocator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional, Union

from ..errors import DuplicateTaskError, StoreAlreadyLoadedError, StoreNotLoadedError

logger = logging.getLogger(__name__)

ChangeListener = Callable[[List["Task"]], Any]


class TaskFilter(Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    def matches(self, task: "Task") -> bool:
        if self is TaskFilter.ACTIVE:
            return not task.completed
        if self is TaskFilter.COMPLETED:
            return task.completed
        return True


class TaskCounts(NamedTuple):
    total: int
    active: int
    completed: int


def utc_timestamp() -> str:
    """Current time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return now.replace("+00:00", "Z")


def normalize_text(text: str) -> str:
    """Comparison key used for duplicate detection."""
    return text.strip().casefold()


@dataclass
class Task:
    """A single to-do entry."""

    id: int
    text: str
    completed: bool = False
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored representation."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Task":
        """Create from the stored representation."""
        return Task(
            id=data["id"],
            text=data["text"],
            completed=data.get("completed", False),
            created_at=data.get("createdAt", ""),
        )


class TaskView:
    """Lazy, restartable view of the tasks matching a filter."""

    def __init__(self, source: Callable[[], List[Task]], task_filter: TaskFilter) -> None:
        self._source = source
        self.filter = task_filter

    def __iter__(self) -> Iterator[Task]:
        return (task for task in self._source() if self.filter.matches(task))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return any(True for _ in self)


class TaskStore:
    """Owns the task collection, the next-id counter and the active filter.

    ``load()`` must be called once before any mutation. Every mutation that
    changes the collection notifies the registered change listeners with a
    snapshot; no-op calls notify nobody.
    """

    def __init__(self, persistence=None) -> None:
        self.persistence = persistence
        self.filter = TaskFilter.ALL
        self._tasks: List[Task] = []
        self._next_id = 1
        self._loaded = False
        self._listeners: List[ChangeListener] = []

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def next_id(self) -> int:
        return self._next_id

    def load(self) -> List[Task]:
        """Replace the collection with persisted tasks and start saving changes."""
        if self._loaded:
            raise StoreAlreadyLoadedError("TaskStore.load() may only be called once")

        tasks = self.persistence.load() if self.persistence is not None else []
        self._tasks = list(tasks)
        self._next_id = max((task.id for task in self._tasks), default=0) + 1
        self._loaded = True
        if self.persistence is not None:
            self.subscribe(self.persistence.save)
        logger.debug("Store loaded with %d task(s), next id %d", len(self._tasks), self._next_id)
        return self.list_all()

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callable invoked with the new snapshot after each change."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #
    def add(self, raw_text: str) -> List[Task]:
        """Append a new task. Empty text is ignored; duplicates raise."""
        self._require_loaded()
        text = raw_text.strip()
        if not text:
            return self.list_all()

        key = normalize_text(text)
        if any(normalize_text(task.text) == key for task in self._tasks):
            raise DuplicateTaskError(text)

        task = Task(id=self._allocate_id(), text=text, completed=False, created_at=utc_timestamp())
        self._tasks.append(task)
        logger.info("Added task %d", task.id)
        return self._changed()

    def toggle(self, task_id: int) -> List[Task]:
        """Flip the completed flag of a task."""
        self._require_loaded()
        task = self.get(task_id)
        if task is None:
            return self.list_all()
        task.completed = not task.completed
        logger.info("Task %d marked %s", task.id, "completed" if task.completed else "active")
        return self._changed()

    def edit(self, task_id: int, new_text: str) -> List[Task]:
        """Replace the text of a task. Duplicate text is not checked here."""
        self._require_loaded()
        text = new_text.strip()
        task = self.get(task_id)
        if not text or task is None:
            return self.list_all()
        task.text = text
        logger.info("Edited task %d", task.id)
        return self._changed()

    def delete(self, task_id: int) -> List[Task]:
        """Remove a task."""
        self._require_loaded()
        remaining = [task for task in self._tasks if task.id != task_id]
        if len(remaining) == len(self._tasks):
            return self.list_all()
        self._tasks = remaining
        logger.info("Deleted task %d", task_id)
        return self._changed()

    def clear_completed(self, confirmed: bool) -> List[Task]:
        """Remove all completed tasks once the caller has confirmed."""
        self._require_loaded()
        if not confirmed:
            return self.list_all()
        remaining = [task for task in self._tasks if not task.completed]
        removed = len(self._tasks) - len(remaining)
        if not removed:
            return self.list_all()
        self._tasks = remaining
        logger.info("Cleared %d completed task(s)", removed)
        return self._changed()

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    def set_filter(self, task_filter: Union[TaskFilter, str]) -> TaskFilter:
        """Change the active filter."""
        self.filter = TaskFilter(task_filter)
        return self.filter

    def filtered_view(self, task_filter: Optional[Union[TaskFilter, str]] = None) -> TaskView:
        """Tasks matching task_filter (or the active filter) in collection order."""
        selected = self.filter if task_filter is None else TaskFilter(task_filter)
        return TaskView(lambda: self._tasks, selected)

    def counts(self) -> TaskCounts:
        total = len(self._tasks)
        completed = sum(1 for task in self._tasks if task.completed)
        return TaskCounts(total=total, active=total - completed, completed=completed)

    def get(self, task_id: int) -> Optional[Task]:
        """Get task by ID."""
        return next((task for task in self._tasks if task.id == task_id), None)

    def list_all(self) -> List[Task]:
        """List all tasks."""
        return list(self._tasks)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _allocate_id(self) -> int:
        task_id = self._next_id
        self._next_id += 1
        return task_id

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise StoreNotLoadedError("TaskStore.load() must run before tasks are modified")

    def _changed(self) -> List[Task]:
        snapshot = self.list_all()
        for listener in self._listeners:
            listener(snapshot)
        return snapshot
