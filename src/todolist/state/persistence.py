"""Durable key-value storage and task (de)serialization."""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..errors import CorruptStateError
from .tasks import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "myTodoApp_todos"

# Values a browser-era writer could leave behind for "nothing stored".
_EMPTY_VALUES = ("", "null", "undefined")


class LocalStorage:
    """String key-value store backed by one file per key."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def path_for(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        """Atomically replace the value stored under key."""
        path = self.path_for(key)
        self.ensure_dir(path.parent)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as fp:
                fp.write(value)
                fp.flush()
                os.fsync(fp.fileno())
            shutil.move(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def remove_item(self, key: str) -> None:
        """Delete key if present."""
        path = self.path_for(key)
        if path.exists():
            path.unlink()

    @staticmethod
    def ensure_dir(dir_path: Path) -> None:
        """Create directory if it doesn't exist."""
        dir_path.mkdir(parents=True, exist_ok=True)


class PersistenceAdapter:
    """Reads and writes the task collection in a single storage slot."""

    def __init__(self, storage: LocalStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> List[Task]:
        """Load tasks from the slot.

        Missing data yields an empty list. Malformed or invalid data is
        logged, the slot is cleared, and an empty list is returned.
        """
        try:
            raw = self.storage.get_item(self.key)
        except UnicodeDecodeError as exc:
            logger.error("Discarding undecodable task data in %s: %s", self.key, exc)
            self._clear()
            return []
        except OSError as exc:
            logger.error("Could not read stored tasks from %s: %s", self.key, exc)
            return []

        if raw is None or raw.strip() in _EMPTY_VALUES:
            return []

        try:
            tasks = decode_tasks(raw)
        except CorruptStateError as exc:
            logger.error("Discarding corrupted task data in %s: %s", self.key, exc)
            self._clear()
            return []

        logger.info("Loaded %d task(s) from %s", len(tasks), self.key)
        return tasks

    def save(self, tasks: Iterable[Task]) -> bool:
        """Overwrite the slot with tasks. Returns False if the write failed."""
        try:
            self.storage.set_item(self.key, encode_tasks(tasks))
        except (OSError, ValueError) as exc:
            logger.error("Could not save tasks to %s: %s", self.key, exc)
            return False
        logger.debug("Saved tasks to %s", self.key)
        return True

    def _clear(self) -> None:
        try:
            self.storage.remove_item(self.key)
        except OSError as exc:
            logger.warning("Could not clear %s: %s", self.key, exc)


def encode_tasks(tasks: Iterable[Task]) -> str:
    """Serialize tasks to the stored JSON array."""
    return json.dumps([task.to_dict() for task in tasks], ensure_ascii=False)


def decode_tasks(raw: str) -> List[Task]:
    """Parse and validate the stored JSON array.

    Raises CorruptStateError for anything that is not a list of well-formed
    task objects with unique ids.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CorruptStateError(f"invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise CorruptStateError(f"expected a list, got {type(data).__name__}")

    tasks: List[Task] = []
    seen_ids = set()
    for index, entry in enumerate(data):
        _validate_entry(index, entry)
        if entry["id"] in seen_ids:
            raise CorruptStateError(f"duplicate id {entry['id']}")
        seen_ids.add(entry["id"])
        tasks.append(Task.from_dict(entry))
    return tasks


def _validate_entry(index: int, entry: Any) -> None:
    if not isinstance(entry, dict):
        raise CorruptStateError(f"entry {index} is not an object")

    checks: Dict[str, bool] = {
        # bool is a subclass of int
        "id": isinstance(entry.get("id"), int) and not isinstance(entry.get("id"), bool),
        "text": isinstance(entry.get("text"), str) and bool(entry.get("text", "").strip()),
        "completed": isinstance(entry.get("completed"), bool),
        "createdAt": isinstance(entry.get("createdAt"), str) and _is_iso_timestamp(entry["createdAt"]),
    }
    for field, ok in checks.items():
        if not ok:
            raise CorruptStateError(f"entry {index} has invalid {field!r}")


def _is_iso_timestamp(value: str) -> bool:
    try:
        datetime.fromisoformat(value[:-1] + "+00:00" if value.endswith("Z") else value)
    except ValueError:
        return False
    return True
