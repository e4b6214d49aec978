"""Utility functions for Tickoff."""

import re
from dataclasses import dataclass
from datetime import date

from tickoff.models import Task

_PRIORITY_WORDS = {"high": "High", "medium": "Medium", "med": "Medium", "low": "Low"}
_DUE_RE = re.compile(r"^due:(\S+)$", re.IGNORECASE)
_EVERY_RE = re.compile(r"^every:(\S+)$", re.IGNORECASE)

DONE_MARK = "[x]"
OPEN_MARK = "[ ]"
OVERDUE_MARK = "OVERDUE"


@dataclass
class QuickAdd:
    """Fields extracted from a one-line task entry."""

    text: str
    category: str | None = None
    deadline: str | None = None
    priority: str | None = None
    repeat: str | None = None


def parse_quick_add(raw: str) -> QuickAdd:
    """Parse a one-line task entry into its fields.

    Recognized tokens (anywhere in the line, the last one of a kind wins):
    - ``#category`` (everything after the LAST '#', may contain spaces,
      must come at the end like in "call mom #Family stuff")
    - ``!high`` / ``!medium`` / ``!low`` priority
    - ``due:YYYY-MM-DD`` deadline
    - ``every:daily`` / ``every:weekly`` / ``every:monthly`` repeat

    Args:
        raw: The raw input string, e.g., "pay rent !high due:2024-05-01 every:monthly #Home"

    Returns:
        A QuickAdd whose text is what remains after removing the tokens.

    Examples:
        >>> parse_quick_add("buy milk")
        QuickAdd(text='buy milk', category=None, deadline=None, priority=None, repeat=None)
        >>> parse_quick_add("pay rent !high #Home").category
        'Home'
    """
    line = raw.strip()
    category: str | None = None

    if "#" in line:
        last_hash_index = line.rfind("#")
        title_part = line[:last_hash_index].strip()
        category_part = line[last_hash_index + 1 :].strip()
        # "#" with nothing before or after it is just part of the text
        if category_part and title_part:
            line = title_part
            category = category_part

    words: list[str] = []
    result = QuickAdd(text="", category=category)
    for word in line.split():
        due = _DUE_RE.match(word)
        every = _EVERY_RE.match(word)
        if due:
            result.deadline = due.group(1)
        elif every:
            result.repeat = every.group(1).lower()
        elif word.startswith("!") and word[1:].lower() in _PRIORITY_WORDS:
            result.priority = _PRIORITY_WORDS[word[1:].lower()]
        else:
            words.append(word)

    result.text = " ".join(words)
    return result


def format_task_line(position: int, task: Task, today: date | None = None) -> str:
    """Render one task as a numbered line for terminal output.

    Example:
        ``2. [ ] Pay rent (Category: Home, Deadline: 2024-01-01, Priority: High, Repeat: monthly) OVERDUE``
    """
    if today is None:
        today = date.today()
    mark = DONE_MARK if task.done else OPEN_MARK
    details = [
        f"Category: {task.category}",
        f"Deadline: {task.deadline}",
        f"Priority: {task.priority}",
    ]
    if task.repeat_kind:
        details.append(f"Repeat: {task.repeat_kind}")
    line = f"{position}. {mark} {task.text} ({', '.join(details)})"
    if not task.done and task.deadline.is_overdue(today):
        line += f" {OVERDUE_MARK}"
    return line
