import pytest

from todolist.errors import DuplicateTaskError, StoreAlreadyLoadedError, StoreNotLoadedError
from todolist.state.tasks import Task, TaskCounts, TaskFilter, TaskStore


def make_store() -> TaskStore:
    store = TaskStore()
    store.load()
    return store


def test_adds_get_strictly_increasing_ids() -> None:
    store = make_store()
    for text in ["one", "two", "three", "four"]:
        store.add(text)

    ids = [task.id for task in store.list_all()]
    assert ids == [1, 2, 3, 4]
    assert all(not task.completed for task in store.list_all())
    assert all(task.created_at.endswith("Z") for task in store.list_all())


def test_add_trims_text() -> None:
    store = make_store()
    tasks = store.add("   Buy milk  ")
    assert tasks[0].text == "Buy milk"


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_add_empty_text_is_noop(text: str) -> None:
    store = make_store()
    store.add("keep")
    assert store.add(text) == store.list_all()
    assert len(store.list_all()) == 1
    assert store.next_id == 2


def test_add_duplicate_is_rejected_case_insensitively() -> None:
    store = make_store()
    store.add("Buy milk")

    with pytest.raises(DuplicateTaskError) as excinfo:
        store.add("  buy MILK ")

    assert excinfo.value.text == "buy MILK"
    assert [task.text for task in store.list_all()] == ["Buy milk"]
    assert store.next_id == 2


def test_ids_are_not_reused_after_delete() -> None:
    store = make_store()
    store.add("a")
    store.add("b")
    store.delete(2)
    tasks = store.add("c")
    assert [task.id for task in tasks] == [1, 3]


def test_toggle_twice_restores_state() -> None:
    store = make_store()
    store.add("task")
    store.toggle(1)
    assert store.get(1).completed is True
    store.toggle(1)
    assert store.get(1).completed is False


def test_toggle_after_delete_is_noop() -> None:
    store = make_store()
    store.add("a")
    store.add("b")
    store.delete(1)
    before = [(t.id, t.completed) for t in store.list_all()]
    store.toggle(1)
    assert [(t.id, t.completed) for t in store.list_all()] == before


def test_edit_replaces_text_and_keeps_other_fields() -> None:
    store = make_store()
    store.add("old")
    store.toggle(1)
    original = store.get(1)
    created_at = original.created_at

    store.edit(1, "  new text ")

    task = store.get(1)
    assert task == Task(id=1, text="new text", completed=True, created_at=created_at)


def test_edit_ignores_empty_text_and_unknown_id() -> None:
    store = make_store()
    store.add("keep")
    store.edit(1, "   ")
    store.edit(99, "other")
    assert [task.text for task in store.list_all()] == ["keep"]


def test_edit_does_not_check_duplicates() -> None:
    store = make_store()
    store.add("first")
    store.add("second")
    store.edit(2, "FIRST")
    assert [task.text for task in store.list_all()] == ["first", "FIRST"]


def test_delete_unknown_id_is_noop() -> None:
    store = make_store()
    store.add("a")
    store.delete(42)
    assert len(store.list_all()) == 1


def test_filtered_view_preserves_order() -> None:
    store = make_store()
    for text in ["a", "b", "c", "d"]:
        store.add(text)
    store.toggle(3)
    store.toggle(1)

    completed = store.filtered_view(TaskFilter.COMPLETED)
    assert [task.id for task in completed] == [1, 3]
    assert [task.id for task in store.filtered_view("active")] == [2, 4]
    assert [task.id for task in store.filtered_view()] == [1, 2, 3, 4]


def test_filtered_view_is_restartable_and_follows_filter() -> None:
    store = make_store()
    store.add("a")
    store.add("b")
    store.toggle(2)
    store.set_filter(TaskFilter.ACTIVE)

    view = store.filtered_view()
    assert [task.id for task in view] == [1]
    assert [task.id for task in view] == [1]
    assert len(view) == 1

    store.toggle(1)
    assert list(view) == []
    assert not view


def test_set_filter_accepts_strings() -> None:
    store = make_store()
    assert store.set_filter("completed") is TaskFilter.COMPLETED
    with pytest.raises(ValueError):
        store.set_filter("done")


def test_counts() -> None:
    store = make_store()
    assert store.counts() == TaskCounts(total=0, active=0, completed=0)
    for text in ["a", "b", "c"]:
        store.add(text)
    store.toggle(2)
    assert store.counts() == TaskCounts(total=3, active=2, completed=1)


def test_clear_completed_requires_confirmation() -> None:
    store = make_store()
    store.add("a")
    store.toggle(1)

    store.clear_completed(confirmed=False)
    assert len(store.list_all()) == 1


def test_clear_completed_removes_only_completed() -> None:
    store = make_store()
    for text in ["a", "b", "c", "d"]:
        store.add(text)
    store.toggle(2)
    store.toggle(4)

    tasks = store.clear_completed(confirmed=True)

    assert [(task.id, task.completed) for task in tasks] == [(1, False), (3, False)]


def test_mutations_before_load_raise() -> None:
    store = TaskStore()
    with pytest.raises(StoreNotLoadedError):
        store.add("too early")
    with pytest.raises(StoreNotLoadedError):
        store.toggle(1)


def test_load_twice_raises() -> None:
    store = make_store()
    with pytest.raises(StoreAlreadyLoadedError):
        store.load()


def test_listeners_see_successful_mutations_only() -> None:
    store = make_store()
    snapshots = []
    store.subscribe(lambda tasks: snapshots.append([task.text for task in tasks]))

    store.add("a")
    store.add("")
    store.toggle(99)
    store.edit(1, "b")
    store.delete(99)
    store.set_filter("completed")
    list(store.filtered_view())
    store.counts()
    store.clear_completed(confirmed=True)
    store.delete(1)

    assert snapshots == [["a"], ["b"], []]


def test_walkthrough() -> None:
    store = make_store()

    tasks = store.add("Buy milk")
    assert [(t.id, t.text, t.completed) for t in tasks] == [(1, "Buy milk", False)]

    with pytest.raises(DuplicateTaskError):
        store.add("buy milk")
    assert len(store.list_all()) == 1

    store.toggle(1)
    assert store.get(1).completed is True

    tasks = store.add("Walk dog")
    assert tasks[-1].id == 2

    store.set_filter(TaskFilter.ACTIVE)
    assert [task.id for task in store.filtered_view()] == [2]

    tasks = store.clear_completed(confirmed=True)
    assert [task.id for task in tasks] == [2]
