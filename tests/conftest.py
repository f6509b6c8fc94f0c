from pathlib import Path

import pytest

from todolist.state.persistence import LocalStorage, PersistenceAdapter
from todolist.state.tasks import TaskStore


@pytest.fixture()
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage")


@pytest.fixture()
def adapter(storage: LocalStorage) -> PersistenceAdapter:
    return PersistenceAdapter(storage, key="test_todos")


@pytest.fixture()
def store(adapter: PersistenceAdapter) -> TaskStore:
    """A loaded store that persists through ``adapter``."""
    task_store = TaskStore(adapter)
    task_store.load()
    return task_store
