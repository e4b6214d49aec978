"""Widgets for Tickoff."""

from tickoff.widgets.task_list import TaskListView

__all__ = ["TaskListView"]
