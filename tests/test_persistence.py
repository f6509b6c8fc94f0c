import json
from pathlib import Path

import pytest

from todolist.state.persistence import LocalStorage, PersistenceAdapter, decode_tasks
from todolist.errors import CorruptStateError
from todolist.state.tasks import Task, TaskStore


def stored(storage: LocalStorage, key: str = "test_todos"):
    return json.loads(storage.get_item(key))


def test_local_storage_round_trip(tmp_path: Path) -> None:
    storage = LocalStorage(tmp_path / "nested" / "dir")
    assert storage.get_item("k") is None

    storage.set_item("k", "first")
    storage.set_item("k", "second")
    assert storage.get_item("k") == "second"
    assert not list(storage.base_dir.glob("*.tmp"))

    storage.remove_item("k")
    storage.remove_item("k")
    assert storage.get_item("k") is None


def test_load_missing_slot_is_empty(adapter: PersistenceAdapter) -> None:
    assert adapter.load() == []


@pytest.mark.parametrize("raw", ["", "null", "undefined"])
def test_load_empty_markers(storage: LocalStorage, adapter: PersistenceAdapter, raw: str) -> None:
    storage.set_item(adapter.key, raw)
    assert adapter.load() == []


def test_save_then_load_round_trip(adapter: PersistenceAdapter) -> None:
    tasks = [
        Task(id=1, text="Buy milk", completed=False, created_at="2024-05-01T10:00:00.000Z"),
        Task(id=3, text="Walk dog", completed=True, created_at="2024-05-02T11:30:15.250Z"),
    ]
    assert adapter.save(tasks) is True
    assert adapter.load() == tasks


def test_save_uses_stored_field_names(storage: LocalStorage, adapter: PersistenceAdapter) -> None:
    adapter.save([Task(id=1, text="Ünïcode", completed=True, created_at="2024-05-01T10:00:00.000Z")])
    assert stored(storage) == [
        {"id": 1, "text": "Ünïcode", "completed": True, "createdAt": "2024-05-01T10:00:00.000Z"}
    ]


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"id": 1}',
        "42",
        '"a string"',
        '[1, 2]',
        '[{"id": 1, "text": "a", "completed": false}]',
        '[{"id": "1", "text": "a", "completed": false, "createdAt": "2024-05-01T10:00:00.000Z"}]',
        '[{"id": true, "text": "a", "completed": false, "createdAt": "2024-05-01T10:00:00.000Z"}]',
        '[{"id": 1, "text": "  ", "completed": false, "createdAt": "2024-05-01T10:00:00.000Z"}]',
        '[{"id": 1, "text": "a", "completed": "no", "createdAt": "2024-05-01T10:00:00.000Z"}]',
        '[{"id": 1, "text": "a", "completed": false, "createdAt": "yesterday"}]',
        '[{"id": 1, "text": "a", "completed": false, "createdAt": "2024-05-01T10:00:00.000Z"},'
        ' {"id": 1, "text": "b", "completed": false, "createdAt": "2024-05-01T10:00:00.000Z"}]',
    ],
)
def test_corrupted_slot_is_cleared(storage: LocalStorage, adapter: PersistenceAdapter, raw: str) -> None:
    storage.set_item(adapter.key, raw)

    assert adapter.load() == []
    assert storage.get_item(adapter.key) is None


@pytest.mark.parametrize("raw", [b"\xff\xfe", b'[{"id": 1, "text": "\xff\xfe"}]'])
def test_undecodable_slot_is_cleared(storage: LocalStorage, adapter: PersistenceAdapter, raw: bytes) -> None:
    storage.ensure_dir(storage.base_dir)
    storage.path_for(adapter.key).write_bytes(raw)

    store = TaskStore(adapter)

    assert store.load() == []
    assert not storage.path_for(adapter.key).exists()


def test_corrupted_slot_is_logged(storage: LocalStorage, adapter: PersistenceAdapter, caplog) -> None:
    storage.set_item(adapter.key, "not json")
    with caplog.at_level("ERROR", logger="todolist.state.persistence"):
        adapter.load()
    assert "Discarding corrupted task data" in caplog.text


def test_decode_tasks_raises_on_bad_payload() -> None:
    with pytest.raises(CorruptStateError):
        decode_tasks("{}")


def test_save_failure_is_reported_not_raised(tmp_path: Path, caplog) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where the storage dir should be", encoding="utf-8")
    adapter = PersistenceAdapter(LocalStorage(blocker / "storage"), key="k")

    with caplog.at_level("ERROR", logger="todolist.state.persistence"):
        assert adapter.save([Task(id=1, text="a", created_at="2024-05-01T10:00:00.000Z")]) is False
    assert "Could not save tasks" in caplog.text


def test_unencodable_text_does_not_break_add(storage: LocalStorage, store: TaskStore, caplog) -> None:
    store.add("Buy milk")

    with caplog.at_level("ERROR", logger="todolist.state.persistence"):
        tasks = store.add("bad \ud800 text")

    assert [task.text for task in tasks] == ["Buy milk", "bad \ud800 text"]
    assert "Could not save tasks" in caplog.text
    assert [entry["text"] for entry in stored(storage)] == ["Buy milk"]
    assert not list(storage.base_dir.glob("*.tmp"))


def test_store_saves_after_each_mutation(storage: LocalStorage, store: TaskStore) -> None:
    store.add("Buy milk")
    assert [entry["text"] for entry in stored(storage)] == ["Buy milk"]

    store.toggle(1)
    assert stored(storage)[0]["completed"] is True

    store.edit(1, "Buy oat milk")
    assert stored(storage)[0]["text"] == "Buy oat milk"

    store.clear_completed(confirmed=True)
    assert stored(storage) == []


def test_load_does_not_overwrite_stored_tasks(storage: LocalStorage, adapter: PersistenceAdapter) -> None:
    adapter.save([Task(id=1, text="kept", created_at="2024-05-01T10:00:00.000Z")])

    store = TaskStore(adapter)
    store.load()

    assert [entry["text"] for entry in stored(storage)] == ["kept"]
    assert [task.text for task in store.list_all()] == ["kept"]


def test_next_id_after_load_exceeds_loaded_ids(adapter: PersistenceAdapter) -> None:
    adapter.save(
        [
            Task(id=1, text="a", created_at="2024-05-01T10:00:00.000Z"),
            Task(id=3, text="b", created_at="2024-05-01T10:00:00.000Z"),
            Task(id=2, text="c", created_at="2024-05-01T10:00:00.000Z"),
        ]
    )
    store = TaskStore(adapter)
    store.load()

    tasks = store.add("d")

    assert tasks[-1].id == 4
    assert [task.id for task in tasks] == [1, 3, 2, 4]


def test_store_reloads_across_sessions(adapter: PersistenceAdapter) -> None:
    first = TaskStore(adapter)
    first.load()
    first.add("a")
    first.add("b")
    first.toggle(2)

    second = TaskStore(adapter)
    second.load()

    assert second.list_all() == first.list_all()
    assert second.counts() == first.counts()


def test_store_load_with_corrupted_slot_starts_empty(storage: LocalStorage, adapter: PersistenceAdapter) -> None:
    storage.set_item(adapter.key, "not json")
    store = TaskStore(adapter)

    assert store.load() == []
    assert store.add("fresh")[0].id == 1
