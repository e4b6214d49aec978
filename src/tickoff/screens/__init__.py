"""Screen modules for Tickoff."""

from tickoff.screens.dialogs import LoadErrorDialog, PromptDialog, SortDialog
from tickoff.screens.task_edit_modal import TaskForm, TaskFormModal

__all__ = ["LoadErrorDialog", "PromptDialog", "SortDialog", "TaskForm", "TaskFormModal"]
