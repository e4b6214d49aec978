"""Task add/edit modal dialog."""

from dataclasses import dataclass

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select

from tickoff.models import PRIORITIES, REPEAT_KINDS, REPEAT_NONE, Task


@dataclass
class TaskForm:
    """Values entered in the task form. Blank strings mean "not given"."""

    text: str
    category: str
    deadline: str
    priority: str
    repeat: str | None = None


class TaskFormModal(ModalScreen[TaskForm | None]):
    """Modal dialog for adding a task, or editing one when a task is given.

    When editing, the fields start with the current values and a field left
    blank keeps its old value. Repeat can only be chosen when adding.
    """

    CSS = """
    TaskFormModal {
        align: center middle;
        background: $background 60%;
    }

    TaskFormModal > Vertical {
        width: 64;
        height: auto;
        background: $surface;
        border: solid $primary-muted;
        padding: 1 2;
    }

    TaskFormModal #modal-title {
        text-style: bold;
        margin-bottom: 1;
    }

    TaskFormModal .field-label {
        color: $text-muted;
        margin-bottom: 0;
    }

    TaskFormModal Input {
        border: none;
        background: transparent;
        padding: 0;
        height: 1;
        margin-bottom: 1;
    }

    TaskFormModal Input:focus {
        border: none;
    }

    TaskFormModal #error {
        color: $error;
        height: auto;
    }

    TaskFormModal #button-row {
        margin-top: 1;
        height: auto;
    }

    TaskFormModal Button {
        min-width: 10;
        border: none;
        background: transparent;
        color: $text-muted;
        padding: 0 1;
        height: 1;
    }

    TaskFormModal Button:hover {
        background: $surface-lighten-1;
        color: $text;
    }

    TaskFormModal Button:focus {
        background: $surface-lighten-1;
        color: $text;
        text-style: bold;
    }

    TaskFormModal #save-btn {
        color: $success;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, task: Task | None = None) -> None:
        """Initialize the modal; pass a task to edit it."""
        super().__init__()
        self._editing_task = task

    @property
    def editing(self) -> bool:
        return self._editing_task is not None

    def compose(self) -> ComposeResult:
        """Create dialog widgets."""
        task = self._editing_task
        with Vertical():
            yield Label("Edit Task" if task else "New Task", id="modal-title")
            yield Label("Task:", classes="field-label")
            yield Input(value=task.text if task else "", id="text-input")
            yield Label("Category (Work/Personal/Study):", classes="field-label")
            yield Input(
                value=task.category if task else "",
                placeholder="General",
                id="category-input",
            )
            yield Label("Deadline (YYYY-MM-DD):", classes="field-label")
            yield Input(
                value=task.deadline.raw if task and task.deadline.is_set else "",
                placeholder="No deadline",
                id="deadline-input",
            )
            yield Label(f"Priority ({'/'.join(PRIORITIES)}):", classes="field-label")
            yield Input(
                value=task.priority if task else "",
                placeholder="Medium",
                id="priority-input",
            )
            if not task:
                yield Label("Recurring:", classes="field-label")
                yield Select(
                    [(kind, kind) for kind in (REPEAT_NONE, *REPEAT_KINDS)],
                    value=REPEAT_NONE,
                    allow_blank=False,
                    id="repeat-select",
                )
            yield Label("", id="error")
            with Horizontal(id="button-row"):
                yield Button("Save (Enter)", id="save-btn")
                yield Button("Cancel (Esc)", id="cancel-btn")

    def on_mount(self) -> None:
        """Focus the text input when the modal opens."""
        self.query_one("#text-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in any field - save the task."""
        self._save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "save-btn":
            self._save()
        elif event.button.id == "cancel-btn":
            self.dismiss(None)

    def action_cancel(self) -> None:
        """Handle Escape key - cancel."""
        self.dismiss(None)

    def _save(self) -> None:
        """Return the entered values."""
        text = self.query_one("#text-input", Input).value.strip()
        if not text and not self.editing:
            self.query_one("#error", Label).update("Task cannot be empty.")
            return
        repeat: str | None = None
        if not self.editing:
            repeat = str(self.query_one("#repeat-select", Select).value)
        self.dismiss(
            TaskForm(
                text=text,
                category=self.query_one("#category-input", Input).value,
                deadline=self.query_one("#deadline-input", Input).value,
                priority=self.query_one("#priority-input", Input).value,
                repeat=repeat,
            )
        )
