"""Task list widget."""

from datetime import date

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import ListItem, ListView, Static

from tickoff.models import Task
from tickoff.utils import DONE_MARK, OPEN_MARK, OVERDUE_MARK


class TaskToggleRequested(Message):
    """Message sent when the highlighted task should be marked done/undone."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__()


class TaskDeleteRequested(Message):
    """Message sent when the highlighted task should be deleted."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__()


class TaskEditRequested(Message):
    """Message sent when the highlighted task should be opened for editing."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__()


class StatusBarUpdate(Message):
    """Message sent to update the status bar text."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__()


class TaskListItem(ListItem):
    """A single task row, prefixed with its display number."""

    def __init__(self, position: int, task: Task, overdue: bool = False) -> None:
        self._task_data = task
        self._display_number = position
        self._overdue = overdue
        super().__init__()
        if task.done:
            self.add_class("-completed")
        if overdue:
            self.add_class("-overdue")

    @property
    def task_id(self) -> str:
        return self._task_data.id

    def compose(self) -> ComposeResult:
        yield Static(self.summary(), markup=False)

    def summary(self) -> str:
        task = self._task_data
        mark = DONE_MARK if task.done else OPEN_MARK
        details = [task.category, str(task.deadline), task.priority]
        if task.repeat_kind:
            details.append(f"every {task.repeat_kind}")
        line = f"{self._display_number:>3}. {mark} {task.text}  ({' · '.join(details)})"
        if self._overdue:
            line += f"  {OVERDUE_MARK}"
        return line


class TaskList(ListView):
    """ListView for displaying tasks with j/k navigation."""

    BINDINGS = [
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("space", "toggle_status", "Toggle done", show=True),
        Binding("e", "edit", "Edit", show=True),
        Binding("d", "delete_press", "Delete", show=True),
    ]

    DEFAULT_CSS = """
    TaskList {
        height: 1fr;
    }

    TaskList:focus > TaskListItem.-highlight {
        background: $accent;
    }

    TaskList > TaskListItem.-highlight {
        background: $surface;
    }

    TaskList > TaskListItem {
        height: auto;
        padding: 0 1;
    }

    TaskList > TaskListItem.-completed Static {
        text-style: strike;
        color: $text-muted;
    }

    TaskList > TaskListItem.-overdue Static {
        color: $error;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._delete_pending: bool = False

    def get_selected_task_id(self) -> str | None:
        """Return the id of the highlighted task, or None if nothing is selected."""
        if self.highlighted_child and isinstance(self.highlighted_child, TaskListItem):
            return self.highlighted_child.task_id
        return None

    def action_toggle_status(self) -> None:
        """Toggle the highlighted task between done and not done."""
        task_id = self.get_selected_task_id()
        if task_id is not None:
            self.post_message(TaskToggleRequested(task_id))

    def action_edit(self) -> None:
        """Open the highlighted task for editing."""
        task_id = self.get_selected_task_id()
        if task_id is not None:
            self.post_message(TaskEditRequested(task_id))

    def action_delete_press(self) -> None:
        """Handle 'd' key press for vim-style delete."""
        task_id = self.get_selected_task_id()
        if task_id is None:
            return

        if not self._delete_pending:
            self._delete_pending = True
            self.post_message(StatusBarUpdate("Press d again to delete, Escape to cancel"))
        else:
            self._delete_pending = False
            self.post_message(StatusBarUpdate(""))
            self.post_message(TaskDeleteRequested(task_id))

    def cancel_delete(self) -> bool:
        """Cancel a pending delete; return True if one was pending."""
        if not self._delete_pending:
            return False
        self._delete_pending = False
        self.post_message(StatusBarUpdate(""))
        return True


class TaskListView(Vertical):
    """Widget displaying the current view of tasks, numbered from 1."""

    DEFAULT_CSS = """
    TaskListView {
        height: 1fr;
    }

    TaskListView #empty-message {
        width: 100%;
        height: 100%;
        content-align: center middle;
        color: $text-muted;
    }

    TaskListView #empty-message.hidden {
        display: none;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._tasks: list[Task] = []

    def compose(self) -> ComposeResult:
        yield Static("", id="empty-message", classes="hidden", markup=False)
        yield TaskList(id="task-list")

    @property
    def tasks(self) -> list[Task]:
        """The tasks currently shown, in display order."""
        return list(self._tasks)

    @property
    def selected_task_id(self) -> str | None:
        return self.query_one("#task-list", TaskList).get_selected_task_id()

    def load_tasks(
        self,
        tasks: list[Task],
        today: date,
        select_task_id: str | None = None,
        empty_message: str = "No tasks yet. Press 'a' to add one.",
    ) -> None:
        """Replace the displayed tasks.

        Args:
            tasks: Tasks to show, in display order.
            today: Date used to flag overdue tasks.
            select_task_id: Task to highlight once the rows are mounted.
            empty_message: Text shown when there is nothing to list.
        """
        self._tasks = list(tasks)
        task_list = self.query_one("#task-list", TaskList)
        task_list.clear()

        empty = self.query_one("#empty-message", Static)
        if not self._tasks:
            empty.update(empty_message)
            empty.remove_class("hidden")
            return
        empty.add_class("hidden")

        for position, task in enumerate(self._tasks, start=1):
            overdue = not task.done and task.deadline.is_overdue(today)
            task_list.append(TaskListItem(position, task, overdue=overdue))

        self.call_after_refresh(self.select_task_by_id, select_task_id)

    def focus_list(self) -> None:
        """Focus the task list for keyboard navigation."""
        self.query_one("#task-list", TaskList).focus()

    def select_task_by_id(self, task_id: str | None) -> None:
        """Highlight a task by its id; the first row when it is not shown."""
        task_list = self.query_one("#task-list", TaskList)
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                task_list.index = i
                return
        if self._tasks:
            task_list.index = 0
