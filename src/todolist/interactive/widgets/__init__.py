"""Interactive mode widgets."""

from .task_list import TaskListWidget
from .output_panel import OutputPanel
from .stats_bar import StatsBar
from .top_bar import TopBar
from .confirm_modal import ConfirmModal
from .edit_task_modal import EditTaskModal

__all__ = [
    "TaskListWidget",
    "OutputPanel",
    "StatsBar",
    "TopBar",
    "ConfirmModal",
    "EditTaskModal",
]
