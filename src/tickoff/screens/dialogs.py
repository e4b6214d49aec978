"""Dialog screens for Tickoff."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Center, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from tickoff.store import SORT_CRITERIA

DIALOG_CSS = """
{name} {{
    align: center middle;
}}

{name} > Vertical {{
    width: 60;
    height: auto;
    border: thick $primary;
    background: $surface;
    padding: 1 2;
}}

{name} #title {{
    text-align: center;
    text-style: bold;
    margin-bottom: 1;
}}

{name} #message {{
    margin-bottom: 1;
}}

{name} Center {{
    margin-top: 1;
    height: auto;
}}

{name} Button {{
    margin: 0 1;
}}
"""


class LoadErrorDialog(ModalScreen[bool]):
    """Modal dialog shown when the task file cannot be loaded.

    Starting with an empty list would overwrite the file on the next save,
    so the only way out is to quit.
    """

    CSS = DIALOG_CSS.format(name="LoadErrorDialog") + """
    LoadErrorDialog #path {
        color: $text-muted;
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        ("enter", "exit_app", "Exit"),
        ("escape", "exit_app", "Exit"),
    ]

    def __init__(self, message: str, path: str) -> None:
        """Initialize dialog with the error message and file path."""
        super().__init__()
        self.message = message
        self.path = path

    def compose(self) -> ComposeResult:
        """Create dialog widgets."""
        with Vertical():
            yield Static("Cannot Load Tasks", id="title")
            yield Label(self.message, id="message", markup=False)
            yield Static(f"Path: {self.path}", id="path", markup=False)
            with Center():
                yield Button("Exit", variant="error", id="exit")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        self.dismiss(False)

    def action_exit_app(self) -> None:
        """Handle Enter/Escape - exit application."""
        self.dismiss(False)


class PromptDialog(ModalScreen[str | None]):
    """Single-line prompt; dismisses with the entered text or None."""

    CSS = DIALOG_CSS.format(name="PromptDialog")

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, title: str, placeholder: str = "", value: str = "") -> None:
        super().__init__()
        self._title = title
        self._placeholder = placeholder
        self._value = value

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(self._title, id="title", markup=False)
            yield Input(value=self._value, placeholder=self._placeholder, id="prompt-input")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss(None)


class SortDialog(ModalScreen[str | None]):
    """Choose a sort criterion; dismisses with its name or None."""

    CSS = DIALOG_CSS.format(name="SortDialog")

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("1", "choose('deadline')", "Deadline", show=False),
        Binding("2", "choose('category')", "Category", show=False),
        Binding("3", "choose('status')", "Status", show=False),
        Binding("4", "choose('priority')", "Priority", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Sort by", id="title")
            with Center():
                for number, criterion in enumerate(SORT_CRITERIA, start=1):
                    yield Button(f"{number}. {criterion.title()}", id=f"sort-{criterion}")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        self.dismiss(button_id.removeprefix("sort-"))

    def action_choose(self, criterion: str) -> None:
        self.dismiss(criterion)

    def action_cancel(self) -> None:
        self.dismiss(None)
