"""Data models for Tickoff."""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any

from tickoff.dates import NO_DEADLINE, Deadline

DEFAULT_CATEGORY = "General"
DEFAULT_PRIORITY = "Medium"

# Lower rank sorts first. Anything else is "unranked".
PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}
PRIORITIES = ("High", "Medium", "Low")

REPEAT_KINDS = ("daily", "weekly", "monthly")
REPEAT_NONE = "none"


def new_task_id() -> str:
    """Return a fresh opaque task identifier."""
    return uuid.uuid4().hex


def normalize_repeat(value: str | None) -> str | None:
    """Lower-case a repeat value; blank or "none" become None."""
    if value is None:
        return None
    cleaned = value.strip().lower()
    if not cleaned or cleaned == REPEAT_NONE:
        return None
    return cleaned


def priority_rank(priority: str) -> int:
    """Rank used for sorting; unknown priorities rank after Low."""
    return PRIORITY_RANK.get(priority.strip().lower(), len(PRIORITY_RANK))


@dataclass
class Task:
    """A single to-do record.

    The id lives in memory only. It is assigned when the task is created
    or loaded and is what every mutation addresses; display positions are
    resolved to ids at command time.
    """

    text: str
    done: bool = False
    category: str = DEFAULT_CATEGORY
    deadline: Deadline = NO_DEADLINE
    priority: str = DEFAULT_PRIORITY
    repeat: str | None = None
    id: str = field(default_factory=new_task_id, compare=False)

    @property
    def repeat_kind(self) -> str | None:
        """The repeat value as a kind name; None for null, blank or "none"."""
        return normalize_repeat(self.repeat)

    @property
    def is_recurring(self) -> bool:
        return self.repeat_kind in REPEAT_KINDS

    def next_occurrence(self) -> "Task | None":
        """Return the follow-up copy of a recurring task, or None.

        None when the task does not repeat or its deadline has no valid date.
        The stored repeat value is copied as it is.
        """
        if not self.is_recurring:
            return None
        next_deadline = self.deadline.shifted(self.repeat_kind)
        if next_deadline is None:
            return None
        return replace(self, done=False, deadline=next_deadline, id=new_task_id())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted document layout (no id)."""
        return {
            "text": self.text,
            "done": self.done,
            "category": self.category,
            "deadline": self.deadline.raw,
            "priority": self.priority,
            "repeat": self.repeat,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create a Task from a persisted JSON object.

        Missing optional fields take their defaults. Values are kept as
        stored, including a blank or "none" repeat, so that loading and
        saving again reproduces the document.

        Raises:
            TypeError: If a field has the wrong JSON type.
            KeyError: If "text" is missing.
        """
        text = data["text"]
        if not isinstance(text, str):
            raise TypeError("'text' must be a string")
        done = data.get("done", False)
        if not isinstance(done, bool):
            raise TypeError("'done' must be a boolean")
        category = data.get("category", DEFAULT_CATEGORY)
        deadline = data.get("deadline", NO_DEADLINE.raw)
        priority = data.get("priority", DEFAULT_PRIORITY)
        for name, value in (("category", category), ("deadline", deadline), ("priority", priority)):
            if not isinstance(value, str):
                raise TypeError(f"'{name}' must be a string")
        repeat = data.get("repeat")
        if repeat is not None and not isinstance(repeat, str):
            raise TypeError("'repeat' must be a string or null")
        return cls(
            text=text,
            done=done,
            category=category,
            deadline=Deadline(deadline),
            priority=priority,
            repeat=repeat,
        )
