"""CLI commands for Tickoff."""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from tickoff.config import Config, load_config
from tickoff.errors import PersistenceError, TaskIndexError, ValidationError
from tickoff.models import REPEAT_KINDS, REPEAT_NONE, Task
from tickoff.storage import JsonStorage
from tickoff.store import SORT_CRITERIA, TaskStore
from tickoff.utils import format_task_line, parse_quick_add

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USER_ERROR = 1
EXIT_STORAGE_ERROR = 3


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="tickoff",
        description="Tickoff - a terminal to-do list. Run without a command for the interactive UI.",
    )
    parser.add_argument("--file", type=Path, dest="data_file", help="Task file (default: tasks.json)")
    parser.add_argument("--config", type=Path, dest="config_path", help="Config file to use")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)"
    )
    subparsers = parser.add_subparsers(dest="command")

    # add command
    add_parser = subparsers.add_parser("add", help="Add a task")
    add_parser.add_argument("text", nargs="?", default="", help="Task description")
    add_parser.add_argument("-c", "--category", help="Category (default: General)")
    add_parser.add_argument("-d", "--deadline", help="Deadline as YYYY-MM-DD")
    add_parser.add_argument("-p", "--priority", help="High, Medium or Low (default: Medium)")
    add_parser.add_argument(
        "-r", "--repeat", help=f"Repeat: {', '.join(REPEAT_KINDS)} or {REPEAT_NONE}"
    )
    add_parser.add_argument(
        "-q",
        "--quick",
        metavar="LINE",
        help="One-line entry, e.g. 'pay rent !high due:2024-05-01 every:monthly #Home'",
    )

    # ls command
    ls_parser = subparsers.add_parser("ls", help="List all tasks")
    ls_parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output as JSON"
    )

    # toggle command
    toggle_parser = subparsers.add_parser("toggle", help="Mark a task done/undone")
    toggle_parser.add_argument("position", help="Task number as shown by 'ls'")

    # edit command
    edit_parser = subparsers.add_parser("edit", help="Edit a task")
    edit_parser.add_argument("position", help="Task number as shown by 'ls'")
    edit_parser.add_argument("--text", help="New description")
    edit_parser.add_argument("--category", help="New category")
    edit_parser.add_argument("--deadline", help="New deadline (YYYY-MM-DD)")
    edit_parser.add_argument("--priority", help="New priority")

    # rm command
    rm_parser = subparsers.add_parser("rm", help="Delete a task")
    rm_parser.add_argument("position", help="Task number as shown by 'ls'")

    # filter command
    filter_parser = subparsers.add_parser("filter", help="Filter by category or deadline")
    filter_group = filter_parser.add_mutually_exclusive_group(required=True)
    filter_group.add_argument("--category", help="Category name (case-insensitive)")
    filter_group.add_argument(
        "--before", metavar="DATE", help="Tasks due on or before DATE (YYYY-MM-DD)"
    )

    # search command
    search_parser = subparsers.add_parser("search", help="Search task descriptions")
    search_parser.add_argument("keyword", help="Text to look for (case-insensitive)")

    # sort command
    sort_parser = subparsers.add_parser("sort", help="Sort the task list")
    sort_parser.add_argument("criterion", help=f"One of: {', '.join(SORT_CRITERIA)}")

    # overdue command
    subparsers.add_parser("overdue", help="Show open tasks past their deadline")

    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Load the config file and apply command-line overrides."""
    config = load_config(args.config_path)
    if args.data_file is not None:
        config.data_file = args.data_file
    return config


def console_log_level(args: argparse.Namespace, config: Config) -> int | str:
    """Pick the console log level from -v flags, falling back to the config."""
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    return config.log_level


def _print_tasks(entries: list[tuple[int, Task]], today: date, empty_message: str) -> None:
    if not entries:
        print(empty_message)
        return
    for position, task in entries:
        print(format_task_line(position, task, today))


def _numbered(store: TaskStore, tasks: list[Task]) -> list[tuple[int, Task]]:
    """Pair tasks with their position in the full list, which 'toggle' etc. accept."""
    positions = {t.id: i for i, t in enumerate(store.list(), start=1)}
    return [(positions[t.id], t) for t in tasks]


def _commit(storage: JsonStorage, store: TaskStore) -> int:
    """Save after a mutation; report a failure distinctly from success."""
    try:
        storage.save(store.list())
    except PersistenceError as e:
        print(f"Warning: change not saved: {e}", file=sys.stderr)
        return EXIT_STORAGE_ERROR
    return EXIT_OK


def cmd_add(args: argparse.Namespace, store: TaskStore, storage: JsonStorage) -> int:
    """Add a task."""
    if args.quick:
        quick = parse_quick_add(args.quick)
        text = args.text or quick.text
        category = args.category or quick.category
        deadline = args.deadline or quick.deadline
        priority = args.priority or quick.priority
        repeat = args.repeat or quick.repeat
    else:
        text, category, deadline, priority, repeat = (
            args.text,
            args.category,
            args.deadline,
            args.priority,
            args.repeat,
        )

    task = store.add(text, category=category, deadline=deadline, priority=priority, repeat=repeat)
    status = _commit(storage, store)
    if status == EXIT_OK:
        print(f"Task added: {format_task_line(len(store), task)}")
    return status


def cmd_ls(args: argparse.Namespace, store: TaskStore, storage: JsonStorage) -> int:
    """List all tasks."""
    tasks = store.list()
    if args.json_output:
        output = [
            {"position": position, **task.to_dict()}
            for position, task in enumerate(tasks, start=1)
        ]
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return EXIT_OK

    _print_tasks(list(enumerate(tasks, start=1)), date.today(), "No tasks yet.")
    return EXIT_OK


def cmd_toggle(args: argparse.Namespace, store: TaskStore, storage: JsonStorage) -> int:
    """Mark a task done or not done."""
    task_id = store.resolve(args.position)
    result = store.toggle(task_id)
    status = _commit(storage, store)
    if status != EXIT_OK:
        return status

    state = "done" if result.task.done else "not done"
    print(f"Task {args.position} marked {state}: {result.task.text}")
    if result.spawned is not None:
        print(f"New recurring task created for {result.spawned.deadline}.")
    elif result.recurrence_skipped:
        print(
            f"Task repeats {result.task.repeat_kind} but its deadline '{result.task.deadline}' "
            "is not a date; no new task created."
        )
    return EXIT_OK


def cmd_edit(args: argparse.Namespace, store: TaskStore, storage: JsonStorage) -> int:
    """Edit a task's description, category, deadline or priority."""
    # Check that at least one field is provided
    fields = (args.text, args.category, args.deadline, args.priority)
    if all(value is None or not value.strip() for value in fields):
        print(
            "Error: At least one of --text, --category, --deadline or --priority is required.",
            file=sys.stderr,
        )
        return EXIT_USER_ERROR

    task_id = store.resolve(args.position)
    store.edit(
        task_id,
        text=args.text,
        category=args.category,
        deadline=args.deadline,
        priority=args.priority,
    )
    status = _commit(storage, store)
    if status == EXIT_OK:
        print(f"Updated task {args.position}.")
    return status


def cmd_rm(args: argparse.Namespace, store: TaskStore, storage: JsonStorage) -> int:
    """Delete a task."""
    task_id = store.resolve(args.position)
    task = store.delete(task_id)
    status = _commit(storage, store)
    if status == EXIT_OK:
        print(f"Deleted task {args.position}: {task.text}")
    return status


def cmd_filter(args: argparse.Namespace, store: TaskStore, storage: JsonStorage) -> int:
    """Show tasks in a category or due on or before a date."""
    if args.category is not None:
        tasks = store.filter_by_category(args.category)
        empty = f"No tasks in category '{args.category}'."
    else:
        tasks = store.filter_by_deadline(args.before)
        empty = f"No tasks due on or before {args.before}."
    _print_tasks(_numbered(store, tasks), date.today(), empty)
    return EXIT_OK


def cmd_search(args: argparse.Namespace, store: TaskStore, storage: JsonStorage) -> int:
    """Search task descriptions."""
    tasks = store.search(args.keyword)
    _print_tasks(_numbered(store, tasks), date.today(), "No tasks found.")
    return EXIT_OK


def cmd_sort(args: argparse.Namespace, store: TaskStore, storage: JsonStorage) -> int:
    """Sort the list and show it."""
    store.sort(args.criterion)
    status = _commit(storage, store)
    _print_tasks(list(enumerate(store.list(), start=1)), date.today(), "No tasks yet.")
    return status


def cmd_overdue(args: argparse.Namespace, store: TaskStore, storage: JsonStorage) -> int:
    """Warn about open tasks past their deadline."""
    today = date.today()
    tasks = store.overdue(today)
    if not tasks:
        print("No overdue tasks.")
        return EXIT_OK
    print("WARNING! You have overdue tasks:")
    _print_tasks(_numbered(store, tasks), today, "")
    return EXIT_OK


COMMANDS = {
    "add": cmd_add,
    "ls": cmd_ls,
    "toggle": cmd_toggle,
    "edit": cmd_edit,
    "rm": cmd_rm,
    "filter": cmd_filter,
    "search": cmd_search,
    "sort": cmd_sort,
    "overdue": cmd_overdue,
}


def dispatch(args: argparse.Namespace, config: Config) -> int:
    """Load the task file, run one command and report errors.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    storage = JsonStorage(config.data_file)
    try:
        store = TaskStore(storage.load())
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_STORAGE_ERROR

    handler = COMMANDS[args.command]
    try:
        return handler(args, store, storage)
    except (ValidationError, TaskIndexError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USER_ERROR


def run_cli(argv: list[str] | None = None) -> int | None:
    """Parse arguments and dispatch to command handlers.

    Returns:
        Exit code (0 for success, non-zero for error) if a command was handled,
        None if no command was specified (should launch TUI).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        return None

    return dispatch(args, resolve_config(args))
