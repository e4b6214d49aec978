# tests/test_store.py

from __future__ import annotations

from datetime import date

import pytest

from tickoff.dates import NO_DEADLINE, Deadline
from tickoff.errors import InvalidPositionError, TaskIndexError, ValidationError
from tickoff.models import Task
from tickoff.store import TaskStore


def texts(tasks: list[Task]) -> list[str]:
    return [t.text for t in tasks]


# ----- add -----


def test_add_applies_defaults() -> None:
    store = TaskStore()
    task = store.add("Buy milk ")

    assert len(store) == 1
    assert task.text == "Buy milk "
    assert task.done is False
    assert task.category == "General"
    assert task.deadline == NO_DEADLINE
    assert task.priority == "Medium"
    assert task.repeat is None


def test_add_keeps_supplied_fields() -> None:
    store = TaskStore()
    task = store.add("Pay rent", category="Home", deadline="2024-05-01", priority="High", repeat="Monthly")

    assert store.list() == [task]
    assert task.category == "Home"
    assert task.deadline.raw == "2024-05-01"
    assert task.priority == "High"
    assert task.repeat == "monthly"


def test_add_stores_text_as_given() -> None:
    task = TaskStore().add("  indented note", category=" Work ", priority="High ")
    assert task.text == "  indented note"
    assert task.category == " Work "
    assert task.priority == "High "


def test_add_keeps_unparseable_deadline_verbatim() -> None:
    task = TaskStore().add("Dentist", deadline="next tuesday")
    assert task.deadline.raw == "next tuesday"
    assert not task.deadline.is_valid


@pytest.mark.parametrize("text", ["", "   ", "\t"])
def test_add_rejects_blank_text(text: str) -> None:
    store = TaskStore()
    with pytest.raises(ValidationError):
        store.add(text)
    assert len(store) == 0


def test_add_rejects_unknown_repeat() -> None:
    store = TaskStore()
    with pytest.raises(ValidationError):
        store.add("Water plants", repeat="hourly")
    assert len(store) == 0


def test_add_repeat_none_means_not_recurring() -> None:
    task = TaskStore().add("One-off", repeat="none")
    assert task.repeat is None
    assert not task.is_recurring


def test_ids_are_unique() -> None:
    store = TaskStore()
    a = store.add("Same")
    b = store.add("Same")
    assert a.id != b.id


# ----- toggle -----


def test_toggle_twice_restores_done(store: TaskStore) -> None:
    task_id = store.resolve(2)
    store.toggle(task_id)
    assert store.get(task_id).done is True
    store.toggle(task_id)
    assert store.get(task_id).done is False
    assert len(store) == 4


def test_toggle_recurring_weekly_spawns_next() -> None:
    store = TaskStore()
    task = store.add("Team sync", category="Work", deadline="2024-01-01", priority="High", repeat="weekly")

    result = store.toggle(task.id)

    assert result.task is task
    assert task.done is True
    assert len(store) == 2
    spawned = store.list()[1]
    assert result.spawned is spawned
    assert spawned.deadline.raw == "2024-01-08"
    assert spawned.done is False
    assert spawned.text == "Team sync"
    assert spawned.category == "Work"
    assert spawned.priority == "High"
    assert spawned.repeat == "weekly"
    assert spawned.id != task.id


def test_toggle_recurring_only_spawns_on_completion() -> None:
    store = TaskStore()
    task = store.add("Standup", deadline="2024-01-01", repeat="daily")

    store.toggle(task.id)
    second = store.toggle(task.id)

    assert task.done is False
    assert second.spawned is None
    assert len(store) == 2


def test_toggle_recurring_monthly_clamps() -> None:
    store = TaskStore()
    task = store.add("Pay rent", deadline="2024-01-31", repeat="monthly")
    result = store.toggle(task.id)
    assert result.spawned is not None
    assert result.spawned.deadline.raw == "2024-02-29"


@pytest.mark.parametrize("deadline", [None, "someday"])
def test_toggle_recurring_without_valid_deadline_skips(deadline: str | None) -> None:
    store = TaskStore()
    task = store.add("Stretch", deadline=deadline, repeat="daily")

    result = store.toggle(task.id)

    assert task.done is True
    assert result.spawned is None
    assert result.recurrence_skipped is True
    assert len(store) == 1


@pytest.mark.parametrize("repeat", ["", "none", "None"])
def test_toggle_stored_blank_repeat_is_not_recurring(repeat: str) -> None:
    task = Task.from_dict({"text": "Old entry", "deadline": "2024-01-01", "repeat": repeat})
    store = TaskStore([task])

    result = store.toggle(task.id)

    assert not task.is_recurring
    assert result.spawned is None
    assert result.recurrence_skipped is False
    assert len(store) == 1
    # the stored value is left as it was
    assert task.repeat == repeat


def test_toggle_stored_repeat_in_other_case_still_spawns() -> None:
    task = Task.from_dict({"text": "Gym", "deadline": "2024-01-01", "repeat": "Weekly"})
    store = TaskStore([task])

    result = store.toggle(task.id)

    assert result.spawned is not None
    assert result.spawned.deadline.raw == "2024-01-08"
    assert result.spawned.repeat == "Weekly"


def test_toggle_unknown_id() -> None:
    with pytest.raises(TaskIndexError):
        TaskStore().toggle("missing")


# ----- edit -----


def test_edit_updates_given_fields(store: TaskStore) -> None:
    task_id = store.resolve(1)
    task = store.edit(task_id, text=" Write final report ", deadline="2024-03-12")

    assert task.text == "Write final report"
    assert task.deadline == Deadline("2024-03-12")
    assert task.category == "Work"
    assert task.priority == "High"


def test_edit_blank_keeps_existing(store: TaskStore) -> None:
    task_id = store.resolve(1)
    before = store.get(task_id)
    snapshot = (before.text, before.category, before.deadline, before.priority)

    store.edit(task_id, text="", category="  ", deadline=None, priority="")

    after = store.get(task_id)
    assert (after.text, after.category, after.deadline, after.priority) == snapshot


# ----- delete -----


def test_delete_keeps_order_of_the_rest(store: TaskStore) -> None:
    original = store.list()
    removed = store.delete(store.resolve(2))

    assert removed is original[1]
    assert store.list() == [original[0], original[2], original[3]]


def test_delete_unknown_id_leaves_store_alone(store: TaskStore) -> None:
    with pytest.raises(TaskIndexError):
        store.delete("nope")
    assert len(store) == 4


# ----- queries -----


def test_filter_by_category_ignores_case(store: TaskStore) -> None:
    assert texts(store.filter_by_category("work")) == ["Write report"]
    assert texts(store.filter_by_category("PERSONAL")) == ["Buy milk", "Call plumber"]
    assert store.filter_by_category("Hobby") == []


def test_filter_by_deadline_is_inclusive_and_skips_unset(store: TaskStore) -> None:
    store.add("Mystery", deadline="one day")
    assert texts(store.filter_by_deadline("2024-03-15")) == ["Write report", "Call plumber"]
    assert texts(store.filter_by_deadline(date(2024, 12, 31))) == [
        "Write report",
        "Read chapter 4",
        "Call plumber",
    ]


def test_filter_by_deadline_rejects_bad_date(store: TaskStore) -> None:
    with pytest.raises(ValidationError):
        store.filter_by_deadline("15/03/2024")


def test_search_is_case_insensitive_substring(store: TaskStore) -> None:
    assert texts(store.search("READ")) == ["Read chapter 4"]
    assert texts(store.search("r")) == ["Write report", "Read chapter 4", "Call plumber"]
    assert store.search("xyz") == []


def test_overdue_excludes_done_and_unset(store: TaskStore, today: date) -> None:
    store.add("Ancient", deadline="2020-01-01")
    store.add("Garbled", deadline="yesterday")
    store.toggle(store.resolve(5))

    # due today counts once the day has started
    assert texts(store.overdue(today)) == ["Write report", "Call plumber"]


def test_task_due_today_is_overdue_by_default() -> None:
    store = TaskStore()
    store.add("Renew passport", deadline=date.today().isoformat())
    assert texts(store.overdue()) == ["Renew passport"]


# ----- sort -----


def test_sort_priority() -> None:
    store = TaskStore()
    for priority in ("Low", "High", "Medium"):
        store.add(f"{priority} task", priority=priority)

    store.sort("priority")

    assert [t.priority for t in store.list()] == ["High", "Medium", "Low"]


def test_sort_priority_unranked_last_and_stable() -> None:
    store = TaskStore()
    store.add("a", priority="Urgent")
    store.add("b", priority="low")
    store.add("c", priority="High")
    store.add("d", priority="Someday")
    store.add("e", priority="high")

    store.sort("priority")

    assert texts(store.list()) == ["c", "e", "b", "a", "d"]


def test_sort_deadline_puts_unset_last() -> None:
    store = TaskStore()
    store.add("none")
    store.add("bad", deadline="soon")
    store.add("late", deadline="2024-06-01")
    store.add("early", deadline="2024-01-01")

    store.sort("deadline")

    assert texts(store.list()) == ["early", "late", "bad", "none"]


def test_sort_status_done_first(store: TaskStore) -> None:
    store.toggle(store.resolve(3))
    store.sort("status")
    assert texts(store.list()) == ["Read chapter 4", "Write report", "Buy milk", "Call plumber"]


def test_sort_category_alphabetical(store: TaskStore) -> None:
    store.sort("category")
    assert [t.category for t in store.list()] == ["Personal", "personal", "Study", "Work"]


def test_sort_unknown_criterion_keeps_order(store: TaskStore) -> None:
    before = store.list()
    with pytest.raises(ValidationError):
        store.sort("colour")
    assert store.list() == before


# ----- resolve -----


def test_resolve_maps_position_to_id(store: TaskStore) -> None:
    tasks = store.list()
    assert store.resolve(1) == tasks[0].id
    assert store.resolve(" 4. ") == tasks[3].id


def test_resolve_uses_the_given_view(store: TaskStore) -> None:
    view = store.filter_by_category("personal")
    assert store.resolve("2", view) == view[1].id


@pytest.mark.parametrize("position", [0, 5, "0", "-1", "99"])
def test_resolve_out_of_range(store: TaskStore, position: int | str) -> None:
    with pytest.raises(TaskIndexError):
        store.resolve(position)


@pytest.mark.parametrize("position", ["", "two", "1.5", "#3"])
def test_resolve_not_a_number(store: TaskStore, position: str) -> None:
    with pytest.raises(InvalidPositionError):
        store.resolve(position)
    with pytest.raises(ValidationError):
        store.resolve(position)
