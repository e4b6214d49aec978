"""Main application module."""

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from tickoff.cli import EXIT_STORAGE_ERROR, console_log_level, create_parser, dispatch, resolve_config
from tickoff.config import Config
from tickoff.errors import PersistenceError, TaskIndexError, ValidationError
from tickoff.logging_setup import setup_logging
from tickoff.models import Task
from tickoff.screens import LoadErrorDialog, PromptDialog, SortDialog, TaskForm, TaskFormModal
from tickoff.storage import JsonStorage
from tickoff.store import TaskStore
from tickoff.widgets import TaskListView
from tickoff.widgets.task_list import (
    StatusBarUpdate,
    TaskDeleteRequested,
    TaskEditRequested,
    TaskList,
    TaskToggleRequested,
)

logger = logging.getLogger(__name__)


@dataclass
class ViewFilter:
    """The query currently narrowing the list, and how to describe it."""

    label: str
    apply: Callable[[TaskStore], list[Task]]


class TickoffApp(App):
    """A Textual app for tickoff."""

    TITLE = "Tickoff"

    hide_completed: reactive[bool] = reactive(False, bindings=True)

    BINDINGS = [
        ("a", "add_task", "Add"),
        ("/", "search", "Search"),
        ("c", "filter_category", "Category"),
        ("b", "filter_deadline", "Due by"),
        ("o", "show_overdue", "Overdue"),
        ("s", "sort", "Sort"),
        ("g", "goto", "Go to #"),
        ("escape", "clear_filter", "Clear filter"),
        Binding("f1", "hide_completed_tasks", "Hide done"),
        Binding("f1", "show_completed_tasks", "Show done"),
        ("D", "toggle_dark", "Toggle dark mode"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    #status-bar {
        height: 1;
        width: 100%;
        background: $surface;
        color: $warning;
        padding: 0 1;
    }

    #status-bar.hidden {
        display: none;
    }
    """

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Control which F1 binding is shown based on current state."""
        if action == "hide_completed_tasks":
            return not self.hide_completed
        if action == "show_completed_tasks":
            return self.hide_completed
        return True

    def __init__(self, config: Config | None = None) -> None:
        """Initialize the application."""
        super().__init__()
        self._config = config or Config()
        self.storage = JsonStorage(self._config.data_file)
        self.store = TaskStore()
        self.view_filter: ViewFilter | None = None
        self._loaded = False

    def _apply_theme(self) -> None:
        """Apply the configured theme, keeping the default if it is unknown."""
        if self._config.theme in self.available_themes:
            self.theme = self._config.theme
        else:
            logger.warning("Unknown theme %r; using %s", self._config.theme, self.theme)

    def compose(self) -> ComposeResult:
        """Create child widgets for the app."""
        yield Header()
        yield TaskListView()
        yield Static("", id="status-bar", classes="hidden", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        """Load the task file before accepting any command."""
        self._apply_theme()
        self.hide_completed = self._config.hide_completed
        self.sub_title = str(self.storage.path)

        try:
            self.store = TaskStore(self.storage.load())
        except PersistenceError as e:
            logger.error("Cannot start: %s", e)
            self.push_screen(
                LoadErrorDialog(str(e), str(self.storage.path)),
                lambda _: self.exit(return_code=EXIT_STORAGE_ERROR),
            )
            return

        self._loaded = True
        self._load_tasks()
        if self._config.show_overdue_on_start:
            self._warn_overdue()

    # ---- view ----

    def _current_view(self) -> list[Task]:
        """Tasks in display order after the active filter and done-filter."""
        if self.view_filter is not None:
            tasks = self.view_filter.apply(self.store)
        else:
            tasks = self.store.list()
        if self.hide_completed:
            tasks = [t for t in tasks if not t.done]
        return tasks

    def _load_tasks(self, select_task_id: str | None = None) -> None:
        """Redraw the list from the store.

        Args:
            select_task_id: If provided, select this task after loading.
        """
        task_list_view = self.query_one(TaskListView)
        if select_task_id is None:
            select_task_id = task_list_view.selected_task_id
        empty_message = (
            f"No tasks match: {self.view_filter.label}"
            if self.view_filter is not None
            else "No tasks yet. Press 'a' to add one."
        )
        task_list_view.load_tasks(
            self._current_view(),
            date.today(),
            select_task_id=select_task_id,
            empty_message=empty_message,
        )
        task_list_view.focus_list()
        self._update_status_bar()

    def _update_status_bar(self, text: str = "") -> None:
        status_bar = self.query_one("#status-bar", Static)
        if not text and self.view_filter is not None:
            text = f"Filter: {self.view_filter.label}  (Esc to clear)"
        status_bar.update(text)
        status_bar.set_class(not text, "hidden")

    def _set_filter(self, view_filter: ViewFilter | None) -> None:
        self.view_filter = view_filter
        self._load_tasks()

    def _warn_overdue(self) -> None:
        overdue = self.store.overdue()
        if overdue:
            lines = "\n".join(f"- {t.text} (Deadline: {t.deadline})" for t in overdue)
            self.notify(lines, title="You have overdue tasks", severity="warning", timeout=8, markup=False)

    # ---- persistence ----

    def _persist(self) -> bool:
        """Save after a mutation; tell the user when the change is not durable."""
        try:
            self.storage.save(self.store.list())
        except PersistenceError as e:
            self.notify(
                f"The change is kept for now but may be lost on restart.\n{e}",
                title="Save failed",
                severity="error",
                timeout=10,
                markup=False,
            )
            return False
        return True

    def _report(self, error: Exception) -> None:
        self.notify(str(error), severity="warning", markup=False)

    # ---- actions ----

    def action_add_task(self) -> None:
        """Open the form for a new task."""
        if self._loaded:
            self.push_screen(TaskFormModal(), self._on_add_result)

    def _on_add_result(self, form: TaskForm | None) -> None:
        if form is None:
            return
        try:
            task = self.store.add(
                form.text,
                category=form.category,
                deadline=form.deadline,
                priority=form.priority,
                repeat=form.repeat,
            )
        except ValidationError as e:
            self._report(e)
            return
        self._persist()
        self._load_tasks(select_task_id=task.id)

    def on_task_edit_requested(self, event: TaskEditRequested) -> None:
        """Open the form for the highlighted task."""
        try:
            task = self.store.get(event.task_id)
        except TaskIndexError as e:
            self._report(e)
            return

        def on_result(form: TaskForm | None) -> None:
            if form is None:
                return
            try:
                self.store.edit(
                    task.id,
                    text=form.text,
                    category=form.category,
                    deadline=form.deadline,
                    priority=form.priority,
                )
            except TaskIndexError as e:
                self._report(e)
                return
            self._persist()
            self._load_tasks(select_task_id=task.id)

        self.push_screen(TaskFormModal(task), on_result)

    def on_task_toggle_requested(self, event: TaskToggleRequested) -> None:
        """Flip done on the highlighted task; completing a repeat spawns the next one."""
        try:
            result = self.store.toggle(event.task_id)
        except TaskIndexError as e:
            self._report(e)
            return
        if self._persist():
            if result.spawned is not None:
                self.notify(f"New recurring task created for {result.spawned.deadline}.")
            elif result.recurrence_skipped:
                self.notify(
                    f"'{result.task.deadline}' is not a date, so no next occurrence was created.",
                    severity="warning",
                    markup=False,
                )
        self._load_tasks(select_task_id=event.task_id)

    def on_task_delete_requested(self, event: TaskDeleteRequested) -> None:
        """Delete the highlighted task and select its neighbour."""
        view = self.query_one(TaskListView).tasks
        ids = [t.id for t in view]
        next_task_id: str | None = None
        if event.task_id in ids:
            idx = ids.index(event.task_id)
            if idx < len(ids) - 1:
                next_task_id = ids[idx + 1]
            elif idx > 0:
                next_task_id = ids[idx - 1]

        try:
            self.store.delete(event.task_id)
        except TaskIndexError as e:
            self._report(e)
            return
        self._persist()
        self._load_tasks(select_task_id=next_task_id)

    def on_status_bar_update(self, event: StatusBarUpdate) -> None:
        """Handle status bar updates from widgets."""
        self._update_status_bar(event.text)

    def action_search(self) -> None:
        """Show only tasks whose text contains a keyword."""

        def on_result(keyword: str | None) -> None:
            if keyword is None or not keyword.strip():
                return
            keyword = keyword.strip()
            self._set_filter(ViewFilter(f"/{keyword}", lambda store: store.search(keyword)))

        self.push_screen(PromptDialog("Search tasks", placeholder="keyword"), on_result)

    def action_filter_category(self) -> None:
        """Show only one category."""

        def on_result(category: str | None) -> None:
            if category is None or not category.strip():
                return
            category = category.strip()
            self._set_filter(
                ViewFilter(f"category {category}", lambda store: store.filter_by_category(category))
            )

        self.push_screen(PromptDialog("Filter by category", placeholder="Work"), on_result)

    def action_filter_deadline(self) -> None:
        """Show only tasks due on or before a date."""

        def on_result(value: str | None) -> None:
            if value is None or not value.strip():
                return
            value = value.strip()
            try:
                self.store.filter_by_deadline(value)
            except ValidationError as e:
                self._report(e)
                return
            self._set_filter(
                ViewFilter(f"due by {value}", lambda store: store.filter_by_deadline(value))
            )

        self.push_screen(
            PromptDialog("Show tasks due on or before", placeholder="YYYY-MM-DD"), on_result
        )

    def action_show_overdue(self) -> None:
        """Show only overdue tasks."""
        self._set_filter(ViewFilter("overdue", lambda store: store.overdue()))

    def action_clear_filter(self) -> None:
        """Cancel a pending delete, or go back to the full list."""
        if self.query_one("#task-list", TaskList).cancel_delete():
            return
        if self.view_filter is not None:
            self._set_filter(None)

    def action_sort(self) -> None:
        """Reorder the stored list."""

        def on_result(criterion: str | None) -> None:
            if criterion is None:
                return
            try:
                self.store.sort(criterion)
            except ValidationError as e:
                self._report(e)
                return
            self._persist()
            self._load_tasks()

        if self._loaded:
            self.push_screen(SortDialog(), on_result)

    def action_goto(self) -> None:
        """Select a task by the number shown next to it."""

        def on_result(value: str | None) -> None:
            if value is None:
                return
            view = self.query_one(TaskListView).tasks
            try:
                task_id = self.store.resolve(value, view)
            except TaskIndexError as e:
                self._report(e)
                return
            self.query_one(TaskListView).select_task_by_id(task_id)

        self.push_screen(PromptDialog("Go to task number", placeholder="1"), on_result)

    def action_hide_completed_tasks(self) -> None:
        """Hide completed tasks from the list."""
        self.hide_completed = True
        self._load_tasks()

    def action_show_completed_tasks(self) -> None:
        """Show completed tasks in the list."""
        self.hide_completed = False
        self._load_tasks()

    def action_toggle_dark(self) -> None:
        """Toggle dark mode."""
        self.theme = "textual-light" if self.theme == "textual-dark" else "textual-dark"


def main(argv: list[str] | None = None) -> None:
    """Run a CLI command, or the interactive app when none is given."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Reading the config file can log, so set up the console first
    setup_logging(console_level=console_log_level(args, Config()))
    config = resolve_config(args)

    interactive = args.command is None
    setup_logging(
        console_level=console_log_level(args, config),
        log_file=config.log_file,
        console=not interactive,
    )

    if not interactive:
        sys.exit(dispatch(args, config))

    app = TickoffApp(config)
    app.run()
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
