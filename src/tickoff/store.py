"""In-memory task store: queries, mutations and display-position lookup."""

from __future__ import annotations

import locale
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from tickoff.dates import Deadline, parse_date
from tickoff.errors import InvalidPositionError, TaskIndexError, ValidationError
from tickoff.models import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    REPEAT_KINDS,
    Task,
    normalize_repeat,
    priority_rank,
)

logger = logging.getLogger(__name__)

SORT_CRITERIA = ("deadline", "category", "status", "priority")


@dataclass
class ToggleResult:
    """Outcome of toggling a task.

    Attributes:
        task: The toggled task (already updated).
        spawned: The next occurrence appended for a recurring task, if any.
        recurrence_skipped: True when the task repeats but its deadline had
            no valid date, so no follow-up could be scheduled.
    """

    task: Task
    spawned: Task | None = None
    recurrence_skipped: bool = False


def _category_key(task: Task) -> tuple[str, str]:
    return (locale.strxfrm(task.category.casefold()), task.category)


_SORT_KEYS = {
    "deadline": lambda task: task.deadline.sort_key(),
    "category": _category_key,
    "status": lambda task: not task.done,
    "priority": lambda task: priority_rank(task.priority),
}


def _clean(value: str | None) -> str | None:
    """Strip a value; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class TaskStore:
    """Ordered sequence of tasks.

    Order is insertion order until sort() is called. Mutations address
    tasks by id and return what they changed; saving is the caller's job.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: list[Task] = list(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(list(self._tasks))

    # ---- queries ----

    def list(self) -> list[Task]:
        """Return all tasks in current order."""
        return list(self._tasks)

    def get(self, task_id: str) -> Task:
        """Return the task with the given id.

        Raises:
            TaskIndexError: If no task has that id.
        """
        return self._tasks[self._index_of(task_id)]

    def filter_by_category(self, category: str) -> list[Task]:
        """Tasks whose category equals the given one, ignoring case."""
        wanted = category.strip().casefold()
        return [t for t in self._tasks if t.category.casefold() == wanted]

    def filter_by_deadline(self, on_or_before: date | str) -> list[Task]:
        """Tasks due on or before a date.

        Tasks without a deadline, or with one that is not a valid date,
        never match.

        Raises:
            ValidationError: If a string date is not YYYY-MM-DD.
        """
        if isinstance(on_or_before, str):
            on_or_before = parse_date(on_or_before)
        return [t for t in self._tasks if t.deadline.is_on_or_before(on_or_before)]

    def search(self, keyword: str) -> list[Task]:
        """Tasks whose text contains the keyword, ignoring case."""
        needle = keyword.casefold()
        return [t for t in self._tasks if needle in t.text.casefold()]

    def overdue(self, today: date | None = None) -> list[Task]:
        """Open tasks whose deadline is a valid date that has already begun (today or earlier)."""
        if today is None:
            today = date.today()
        return [t for t in self._tasks if not t.done and t.deadline.is_overdue(today)]

    def resolve(self, position: int | str, view: Sequence[Task] | None = None) -> str:
        """Map a 1-based displayed position to a task id.

        Args:
            position: The number the user typed (int or string).
            view: The ordering the user is looking at; defaults to list().

        Raises:
            InvalidPositionError: If the position is not a whole number.
            TaskIndexError: If the position is outside the view.
        """
        if view is None:
            view = self._tasks
        if isinstance(position, str):
            raw = position.strip().rstrip(".")
            if not raw.lstrip("-").isdigit():
                raise InvalidPositionError(f"Invalid task number '{position}'.")
            position = int(raw)
        if position < 1 or position > len(view):
            raise TaskIndexError(f"Invalid task number {position}; there are {len(view)} tasks.")
        return view[position - 1].id

    # ---- mutations ----

    def add(
        self,
        text: str,
        category: str | None = None,
        deadline: str | None = None,
        priority: str | None = None,
        repeat: str | None = None,
    ) -> Task:
        """Append a new task, applying defaults for omitted fields.

        Text, category and priority are stored as given; only blank values
        are replaced by defaults.

        Raises:
            ValidationError: If the text is blank or the repeat kind is unknown.
        """
        if not text or not text.strip():
            raise ValidationError("Task cannot be empty.")
        repeat_kind = normalize_repeat(repeat)
        if repeat_kind is not None and repeat_kind not in REPEAT_KINDS:
            raise ValidationError(
                f"Unknown repeat '{repeat}'; use one of: {', '.join(REPEAT_KINDS)} or none."
            )
        task = Task(
            text=text,
            category=category if _clean(category) else DEFAULT_CATEGORY,
            deadline=Deadline.parse(deadline),
            priority=priority if _clean(priority) else DEFAULT_PRIORITY,
            repeat=repeat_kind,
        )
        self._tasks.append(task)
        logger.debug("Task added id=%s text=%r repeat=%s", task.id, task.text, task.repeat)
        return task

    def toggle(self, task_id: str) -> ToggleResult:
        """Flip a task's done flag.

        Completing a recurring task appends one copy with the deadline
        advanced by the repeat interval. Reopening never spawns anything.

        Raises:
            TaskIndexError: If no task has that id.
        """
        task = self.get(task_id)
        task.done = not task.done
        result = ToggleResult(task=task)
        if task.done and task.is_recurring:
            spawned = task.next_occurrence()
            if spawned is None:
                result.recurrence_skipped = True
                logger.warning(
                    "Next occurrence of task %s not created (deadline=%r repeat=%r)",
                    task.id,
                    task.deadline.raw,
                    task.repeat,
                )
            else:
                self._tasks.append(spawned)
                result.spawned = spawned
                logger.debug("Recurring task %s spawned %s due %s", task.id, spawned.id, spawned.deadline)
        logger.debug("Task toggled id=%s done=%s", task.id, task.done)
        return result

    def edit(
        self,
        task_id: str,
        text: str | None = None,
        category: str | None = None,
        deadline: str | None = None,
        priority: str | None = None,
    ) -> Task:
        """Update fields in place; blank or None keeps the existing value.

        Raises:
            TaskIndexError: If no task has that id.
        """
        task = self.get(task_id)
        if _clean(text):
            task.text = _clean(text)
        if _clean(category):
            task.category = _clean(category)
        if _clean(deadline):
            task.deadline = Deadline.parse(deadline)
        if _clean(priority):
            task.priority = _clean(priority)
        logger.debug("Task edited id=%s", task.id)
        return task

    def delete(self, task_id: str) -> Task:
        """Remove a task and return it.

        Raises:
            TaskIndexError: If no task has that id.
        """
        task = self._tasks.pop(self._index_of(task_id))
        logger.debug("Task deleted id=%s", task.id)
        return task

    def sort(self, criterion: str) -> None:
        """Reorder tasks in place (stable).

        - deadline: real dates ascending, then unparseable, then no deadline
        - category: alphabetical, case-insensitive
        - status: done first
        - priority: High, Medium, Low, then anything else

        Raises:
            ValidationError: If the criterion is unknown; order is unchanged.
        """
        key = _SORT_KEYS.get(criterion.strip().lower())
        if key is None:
            raise ValidationError(
                f"Invalid sort option '{criterion}'; use one of: {', '.join(SORT_CRITERIA)}."
            )
        self._tasks.sort(key=key)
        logger.debug("Tasks sorted by %s", criterion)

    # ---- helpers ----

    def _index_of(self, task_id: str) -> int:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        raise TaskIndexError(f"Task {task_id} no longer exists.")
